"""
Tests for merging primary and secondary alignments into one segment table.
"""

from junctionreads.records import PrimaryRecord
from junctionreads.segments import merge_segments, primary_segment, record_segments


class TestPrimarySegment:
    """Tests for primary_segment function."""

    def test_fields_copied(self):
        record = PrimaryRecord("r1", "chr1", 1000, "-", "60M40S")
        seg = primary_segment(record)

        assert seg.read_id == "r1"
        assert seg.sequence_name == "chr1"
        assert (seg.start, seg.end) == (1000, 1059)
        assert seg.strand == "-"
        assert seg.origin == "primary"


class TestMergeSegments:
    """Tests for merge_segments function."""

    def test_union_of_origins(self):
        """Primary, SA and XA segments all appear, with the read id propagated."""
        record = PrimaryRecord(
            "r1", "chr1", 1000, "+", "50M50S",
            sa_tag="PiggyBac,100,+,50S50M,60,0;",
            xa_tag="chr7,-5000,50M50S,2;",
        )
        segments = record_segments(record)

        assert [s.origin for s in segments] == ["primary", "supplementary", "alternative"]
        assert {s.read_id for s in segments} == {"r1"}

    def test_counts(self, junction_records):
        result = merge_segments(junction_records)

        assert result.n_records == 4
        assert result.n_segments == 8
        assert result.n_dropped == 0

    def test_malformed_entries_counted(self):
        """Malformed tag entries are the only thing dropped, and they are counted."""
        records = [
            PrimaryRecord("r1", "chr1", 1000, "+", "50M",
                          sa_tag="chr2,10,+,50M,60,0;broken;",
                          xa_tag="chr3,+20,50M,0;chr4,20,50M,0;"),
            PrimaryRecord("r2", "chr1", 2000, "+", "50M"),
        ]
        result = merge_segments(records)

        assert result.n_segments == 4  # 2 primary + 1 SA + 1 XA
        assert result.n_dropped == 2

    def test_record_without_cigar(self):
        """A primary line with CIGAR "*" still yields a one-base primary segment."""
        record = PrimaryRecord("r1", "chr1", 1000, "+", "*",
                               sa_tag="PiggyBac,100,+,50M,60,0;")
        result = merge_segments([record])

        assert result.n_segments == 2
        assert (result.segments[0].start, result.segments[0].end) == (1000, 1000)

    def test_empty(self):
        result = merge_segments([])
        assert result.segments == []
        assert result.n_records == 0
        assert result.n_dropped == 0
