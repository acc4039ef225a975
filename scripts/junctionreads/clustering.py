"""
Read Clustering

Collapses all segments of a read into the minimal set of covering intervals
and classifies the read against the insertion centre.

A junction-spanning read is often reported as several pieces (primary + SA +
XA hits). Merging the pieces per read and per sequence before classification
keeps fragmentary secondary hits from counting a read on both arms, while a
read that genuinely reaches the first arm is still flagged.

Interval convention: 1-based, inclusive. Two intervals on the same sequence
merge when they overlap or touch (end + 1 == next start).
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Tuple

from .records import AlignmentSegment


class Interval(NamedTuple):
    sequence_name: str
    start: int
    end: int


@dataclass(frozen=True)
class ReadCluster:
    """Merged intervals of one read and its orientation flag."""
    read_id: str
    intervals: Tuple[Interval, ...]
    before_pad: bool

    def intervals_on(self, sequence_name: str) -> List[Interval]:
        return [iv for iv in self.intervals if iv.sequence_name == sequence_name]

    @property
    def sequence_names(self) -> Tuple[str, ...]:
        seen = []
        for iv in self.intervals:
            if iv.sequence_name not in seen:
                seen.append(iv.sequence_name)
        return tuple(seen)


def merge_intervals(
    intervals: List[Tuple[int, int]],
    merge_distance: int = 0
) -> List[Tuple[int, int]]:
    """
    Merge overlapping or adjacent intervals.

    Args:
        intervals: List of (start, end) tuples (1-based, inclusive)
        merge_distance: Also merge intervals separated by up to this many bases

    Returns:
        List of merged (start, end) tuples, sorted by start

    Examples:
        >>> merge_intervals([(100, 150), (140, 200), (250, 300)])
        [(100, 200), (250, 300)]
        >>> merge_intervals([(1, 10), (11, 20)])
        [(1, 20)]
    """
    if not intervals:
        return []

    sorted_ivs = sorted(intervals)
    merged = [list(sorted_ivs[0])]

    for start, end in sorted_ivs[1:]:
        prev_end = merged[-1][1]
        if start <= prev_end + 1 + merge_distance:
            merged[-1][1] = max(prev_end, end)
        else:
            merged.append([start, end])

    return [(s, e) for s, e in merged]


def group_segments_by_read(
    segments: Iterable[AlignmentSegment]
) -> Dict[str, List[AlignmentSegment]]:
    """
    Group segments by read name.

    Args:
        segments: Segments of one library

    Returns:
        Dictionary mapping read_id to its segments, in first-seen order
    """
    by_read: Dict[str, List[AlignmentSegment]] = {}
    for seg in segments:
        if seg.read_id not in by_read:
            by_read[seg.read_id] = []
        by_read[seg.read_id].append(seg)
    return by_read


def starts_before_boundary(
    intervals: Iterable[Interval],
    insert_name: str,
    boundary: int
) -> bool:
    """True if any interval on the insert starts strictly before `boundary`."""
    return any(
        iv.start < boundary
        for iv in intervals
        if iv.sequence_name == insert_name
    )


def cluster_read(
    read_id: str,
    segments: List[AlignmentSegment],
    insert_name: str,
    boundary: int
) -> ReadCluster:
    """
    Reduce the segments of one read to a ReadCluster.

    Args:
        read_id: Read identifier
        segments: All segments of the read (any origin, any strand)
        insert_name: Name of the insert sequence in the hybrid reference
        boundary: Insertion centre position on the insert

    Returns:
        ReadCluster with intervals ordered by (sequence_name, start)

    Examples:
        >>> segs = [
        ...     AlignmentSegment("r1", "chr1", 100, 150, "+", "51M", "primary"),
        ...     AlignmentSegment("r1", "chr1", 140, 200, "-", "61M", "alternative"),
        ... ]
        >>> cluster_read("r1", segs, "PiggyBac", 1238).intervals
        (Interval(sequence_name='chr1', start=100, end=200),)
    """
    spans_by_sequence: Dict[str, List[Tuple[int, int]]] = {}
    for seg in segments:
        # Strand does not matter here, only the span
        spans_by_sequence.setdefault(seg.sequence_name, []).append((seg.start, seg.end))

    intervals = tuple(
        Interval(name, start, end)
        for name in sorted(spans_by_sequence)
        for start, end in merge_intervals(spans_by_sequence[name])
    )

    return ReadCluster(
        read_id=read_id,
        intervals=intervals,
        before_pad=starts_before_boundary(intervals, insert_name, boundary),
    )


def cluster_reads(
    segments: Iterable[AlignmentSegment],
    insert_name: str,
    boundary: int
) -> List[ReadCluster]:
    """
    Cluster every read of a library.

    Returns:
        One ReadCluster per read, sorted by read_id
    """
    by_read = group_segments_by_read(segments)
    return [
        cluster_read(read_id, by_read[read_id], insert_name, boundary)
        for read_id in sorted(by_read)
    ]
