"""
Segment Merging

Unions the primary alignment of every read with the segments decoded from
its SA and XA tags into one flat list per library.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

from .records import AlignmentSegment, ORIGIN_PRIMARY, PrimaryRecord
from .tags import (
    decode_alternative_tag,
    decode_supplementary_tag,
    split_tag_entries,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """All segments of a library plus the number of tag entries dropped."""
    segments: List[AlignmentSegment]
    n_records: int
    n_dropped: int

    @property
    def n_segments(self) -> int:
        return len(self.segments)


def primary_segment(record: PrimaryRecord) -> AlignmentSegment:
    """The primary alignment of a record as a segment."""
    return AlignmentSegment(
        read_id=record.read_id,
        sequence_name=record.sequence_name,
        start=record.start,
        end=record.resolved_end,
        strand=record.strand,
        cigar=record.cigar,
        origin=ORIGIN_PRIMARY,
    )


def record_segments(record: PrimaryRecord) -> List[AlignmentSegment]:
    """Primary, supplementary and alternative segments of one record."""
    segments = [primary_segment(record)]
    segments.extend(decode_supplementary_tag(record.sa_tag, record.read_id))
    segments.extend(decode_alternative_tag(record.xa_tag, record.read_id))
    return segments


def merge_segments(records: Iterable[PrimaryRecord]) -> MergeResult:
    """
    Build the segment table of a library.

    Args:
        records: Primary alignment records of one library

    Returns:
        MergeResult with every segment, in record order
    """
    segments: List[AlignmentSegment] = []
    n_records = 0
    n_entries = 0

    for record in records:
        n_records += 1
        n_entries += len(split_tag_entries(record.sa_tag))
        n_entries += len(split_tag_entries(record.xa_tag))
        segments.extend(record_segments(record))

    n_dropped = n_entries - (len(segments) - n_records)
    if n_dropped:
        logger.debug(f"Dropped {n_dropped} malformed SA/XA entries")

    return MergeResult(segments=segments, n_records=n_records, n_dropped=n_dropped)
