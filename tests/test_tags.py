"""
Tests for SA / XA tag decoding.
"""

import pytest

from junctionreads.tags import (
    split_tag_entries,
    parse_supplementary_entry,
    parse_alternative_entry,
    decode_supplementary_tag,
    decode_alternative_tag,
)


# ============================================================================
# Tests: Entry Splitting
# ============================================================================

class TestSplitTagEntries:
    """Tests for split_tag_entries function."""

    def test_trailing_delimiter(self):
        """BWA ends tags with ';', which gives no extra entry."""
        assert split_tag_entries("a,1;b,2;") == ["a,1", "b,2"]

    def test_missing_tag(self):
        """None and empty tags have no entries."""
        assert split_tag_entries(None) == []
        assert split_tag_entries("") == []

    def test_empty_entries_skipped(self):
        assert split_tag_entries(";;a,1;;") == ["a,1"]


# ============================================================================
# Tests: SA Tag
# ============================================================================

class TestSupplementaryTag:
    """Tests for SA tag decoding."""

    def test_valid_entry(self):
        """Parse a complete SA entry."""
        seg = parse_supplementary_entry("chr2,200,-,30S70M,60,2", "read1")

        assert seg is not None
        assert seg.read_id == "read1"
        assert seg.sequence_name == "chr2"
        assert seg.start == 200
        assert seg.end == 269  # 70 reference bases
        assert seg.strand == "-"
        assert seg.cigar == "30S70M"
        assert seg.origin == "supplementary"

    def test_wellformed_and_malformed_mix(self):
        """N well-formed and M malformed entries decode to exactly N segments."""
        tag = (
            "chr1,100,+,50M,60,0;"
            "chr2,200,-,30S70M,60,2;"
            "PiggyBac,15,+,60M40S,60,1;"
            "chr1,100,+,50M;"             # missing mapQ and NM
            "chrX,abc,+,50M,60,0;"        # non-numeric position
            "chr5,10,?,50M,60,0;"         # invalid strand
        )
        segments = decode_supplementary_tag(tag, "read1")

        assert len(segments) == 3
        assert [s.sequence_name for s in segments] == ["chr1", "chr2", "PiggyBac"]
        assert all(s.read_id == "read1" for s in segments)

    def test_empty_field(self):
        """An entry with an empty field is dropped, not filled in."""
        assert parse_supplementary_entry("chr1,100,+,,60,0", "read1") is None

    def test_invalid_cigar(self):
        assert parse_supplementary_entry("chr1,100,+,5Q,60,0", "read1") is None

    def test_too_many_fields(self):
        assert parse_supplementary_entry("chr1,100,+,50M,60,0,7", "read1") is None

    def test_zero_position(self):
        assert parse_supplementary_entry("chr1,0,+,50M,60,0", "read1") is None

    def test_no_tag(self):
        assert decode_supplementary_tag(None, "read1") == []


# ============================================================================
# Tests: XA Tag
# ============================================================================

class TestAlternativeTag:
    """Tests for XA tag decoding."""

    def test_sign_handling(self):
        """The strand sign glued to the position becomes its own field."""
        segments = decode_alternative_tag("chr2,+981,50M,0;chr3,-120,50M,1", "read1")

        assert len(segments) == 2
        assert (segments[0].sequence_name, segments[0].start, segments[0].strand) == ("chr2", 981, "+")
        assert (segments[1].sequence_name, segments[1].start, segments[1].strand) == ("chr3", 120, "-")
        assert all(s.origin == "alternative" for s in segments)

    def test_end_from_cigar(self):
        seg = parse_alternative_entry("chr2,+981,20M5D30M,0", "read1")
        assert seg.end == 981 + 55 - 1

    def test_missing_sign(self):
        """A position without strand sign is malformed."""
        assert parse_alternative_entry("chr2,981,50M,0", "read1") is None

    def test_sign_without_position(self):
        assert parse_alternative_entry("chr2,+,50M,0", "read1") is None

    def test_missing_edit_distance(self):
        assert parse_alternative_entry("chr2,+981,50M", "read1") is None

    def test_sign_in_sequence_name(self):
        """Only the position field is split, names may contain '-'."""
        seg = parse_alternative_entry("chr1-alt,+50,20M,0", "read1")
        assert seg is not None
        assert seg.sequence_name == "chr1-alt"
        assert seg.start == 50

    def test_malformed_entries_dropped(self):
        tag = "chr2,+981,50M,0;garbage;chr3,-x,50M,1;"
        segments = decode_alternative_tag(tag, "read1")
        assert [s.sequence_name for s in segments] == ["chr2"]

    @pytest.mark.parametrize("tag", [None, "", ";"])
    def test_no_entries(self, tag):
        assert decode_alternative_tag(tag, "read1") == []
