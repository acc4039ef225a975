"""
Alignment Record Types

Value types shared by every stage of the junction read pipeline:

- PrimaryRecord: one primary alignment as read from the BAM file, still
  carrying its raw SA (supplementary) and XA (alternative) tag strings
- AlignmentSegment: one mapped span of a read on the hybrid reference,
  either the primary alignment itself or one decoded tag entry

Coordinates are 1-based and inclusive throughout, matching SAM POS and the
tag string encodings.

CIGAR Operations:
    M, =, X   alignment match (consumes reference)
    D, N      deletion / skipped region (consumes reference)
    I, S, H, P  insertion / clips / padding (no reference)
"""

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

# Strand values
STRAND_FORWARD = "+"
STRAND_REVERSE = "-"
STRAND_UNKNOWN = "*"
VALID_STRANDS = (STRAND_FORWARD, STRAND_REVERSE, STRAND_UNKNOWN)

# Segment origins
ORIGIN_PRIMARY = "primary"
ORIGIN_SUPPLEMENTARY = "supplementary"  # SA tag
ORIGIN_ALTERNATIVE = "alternative"  # XA tag
VALID_ORIGINS = (ORIGIN_PRIMARY, ORIGIN_SUPPLEMENTARY, ORIGIN_ALTERNATIVE)

_CIGAR_RE = re.compile(r"(\d+)([MIDNSHP=X])")
_REFERENCE_OPS = frozenset("MDN=X")


def parse_cigar(cigar: str) -> List[Tuple[int, str]]:
    """
    Split a CIGAR string into (length, operation) tuples.

    Args:
        cigar: CIGAR string, e.g. "20S80M"

    Returns:
        List of (length, op) tuples

    Raises:
        ValueError: If the string is empty, "*" or contains anything that is
            not a length/operation pair

    Examples:
        >>> parse_cigar("20S80M")
        [(20, 'S'), (80, 'M')]
    """
    if not cigar or cigar == "*":
        raise ValueError(f"Missing CIGAR: {cigar!r}")

    ops = _CIGAR_RE.findall(cigar)
    if "".join(f"{n}{op}" for n, op in ops) != cigar:
        raise ValueError(f"Unparseable CIGAR: {cigar!r}")

    return [(int(n), op) for n, op in ops]


def cigar_reference_span(cigar: str) -> int:
    """
    Number of reference bases covered by an alignment.

    Examples:
        >>> cigar_reference_span("10S50M2D20M5I")
        72
    """
    return sum(n for n, op in parse_cigar(cigar) if op in _REFERENCE_OPS)


def segment_end(start: int, cigar: str) -> int:
    """
    Inclusive end coordinate of an alignment starting at `start`.

    An alignment without reference-consuming operations still covers its
    start position, so the result is never below `start`.
    """
    span = cigar_reference_span(cigar)
    return start + max(span, 1) - 1


@dataclass(frozen=True)
class AlignmentSegment:
    """One mapped span of one read."""
    read_id: str
    sequence_name: str
    start: int  # 1-based inclusive
    end: int    # 1-based inclusive
    strand: str  # '+', '-', '*'
    cigar: str
    origin: str  # 'primary', 'supplementary', 'alternative'

    def __post_init__(self):
        if self.strand not in VALID_STRANDS:
            raise ValueError(
                f"Invalid strand {self.strand!r} for {self.read_id}; "
                f"expected one of {', '.join(VALID_STRANDS)}"
            )
        if self.origin not in VALID_ORIGINS:
            raise ValueError(
                f"Invalid segment origin {self.origin!r} for {self.read_id}; "
                f"expected one of {', '.join(VALID_ORIGINS)}"
            )
        if self.end < self.start:
            raise ValueError(
                f"Segment end {self.end} before start {self.start} "
                f"({self.read_id} on {self.sequence_name})"
            )

    @property
    def length(self) -> int:
        """Number of reference bases covered."""
        return self.end - self.start + 1

    def unstranded(self) -> "AlignmentSegment":
        """Copy with strand information removed."""
        return replace(self, strand=STRAND_UNKNOWN)


@dataclass(frozen=True)
class PrimaryRecord:
    """Primary alignment of a read with its raw secondary alignment tags."""
    read_id: str
    sequence_name: str
    start: int  # 1-based
    strand: str
    cigar: str
    sa_tag: Optional[str] = None
    xa_tag: Optional[str] = None
    end: Optional[int] = None  # as reported by the reader, else from CIGAR

    @property
    def resolved_end(self) -> int:
        """
        Inclusive end of the primary alignment.

        A record without a CIGAR ("*" or empty) and without a reported end
        covers only its start position.
        """
        if self.end is not None:
            return self.end
        if not self.cigar or self.cigar == "*":
            return self.start
        return segment_end(self.start, self.cigar)
