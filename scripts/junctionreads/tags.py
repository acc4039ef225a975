"""
Secondary Alignment Tag Decoding

BWA reports the additional placements of a read in two optional tags on the
primary record:

SA (supplementary / chimeric alignments):
    (rname,pos,strand,CIGAR,mapQ,NM;)+
    e.g. "chr1,1200,+,60S40M,60,0;PiggyBac,15,-,40S60M,60,1;"

XA (alternative hits):
    (rname,<strand><pos>,CIGAR,NM;)+
    e.g. "chr2,+981,50M,0;chr3,-120,50M,1;"

In XA the strand sign is glued to the position, so the sign has to be
separated into its own field before the entry can be read as a tuple.

Entries that are incomplete or fail to parse are dropped. Decoding never
raises; tags are noisy and partial coverage is expected.
"""

from typing import List, Optional

from .errors import MalformedTagEntry
from .records import (
    AlignmentSegment,
    ORIGIN_ALTERNATIVE,
    ORIGIN_SUPPLEMENTARY,
    STRAND_FORWARD,
    STRAND_REVERSE,
    segment_end,
)

ENTRY_DELIMITER = ";"
FIELD_DELIMITER = ","

SA_FIELDS = ("sequence_name", "pos", "strand", "cigar", "mapq", "edit_distance")
XA_FIELDS = ("sequence_name", "strand", "pos", "cigar", "edit_distance")


def split_tag_entries(tag: Optional[str]) -> List[str]:
    """
    Split a raw SA/XA tag value into its entries.

    Examples:
        >>> split_tag_entries("chr1,100,+,50M,60,0;chr2,5,-,50M,60,1;")
        ['chr1,100,+,50M,60,0', 'chr2,5,-,50M,60,1']
        >>> split_tag_entries(None)
        []
    """
    if not tag:
        return []
    return [e.strip() for e in tag.split(ENTRY_DELIMITER) if e.strip()]


def _require_int(entry: str, name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedTagEntry(entry, f"{name} is not an integer: {value!r}")


def _check_complete(entry: str, fields: List[str], names) -> None:
    if len(fields) != len(names):
        raise MalformedTagEntry(
            entry, f"expected {len(names)} fields, got {len(fields)}"
        )
    for name, value in zip(names, fields):
        if not value:
            raise MalformedTagEntry(entry, f"missing {name}")


def _build_segment(entry, read_id, sequence_name, pos_field, strand, cigar, origin):
    pos = _require_int(entry, "pos", pos_field)
    if pos < 1:
        raise MalformedTagEntry(entry, f"position {pos} is not 1-based")
    if strand not in (STRAND_FORWARD, STRAND_REVERSE):
        raise MalformedTagEntry(entry, f"invalid strand {strand!r}")
    try:
        end = segment_end(pos, cigar)
    except ValueError as e:
        raise MalformedTagEntry(entry, str(e))

    return AlignmentSegment(
        read_id=read_id,
        sequence_name=sequence_name,
        start=pos,
        end=end,
        strand=strand,
        cigar=cigar,
        origin=origin,
    )


def _split_supplementary(entry: str, read_id: str) -> AlignmentSegment:
    fields = [f.strip() for f in entry.split(FIELD_DELIMITER)]
    _check_complete(entry, fields, SA_FIELDS)
    sequence_name, pos, strand, cigar, mapq, edit_distance = fields
    _require_int(entry, "mapq", mapq)
    _require_int(entry, "edit_distance", edit_distance)
    return _build_segment(
        entry, read_id, sequence_name, pos, strand, cigar, ORIGIN_SUPPLEMENTARY
    )


def _split_alternative(entry: str, read_id: str) -> AlignmentSegment:
    fields = [f.strip() for f in entry.split(FIELD_DELIMITER)]
    # Separate the strand sign from the position: "+981" -> "+", "981"
    if len(fields) > 1 and fields[1][:1] in (STRAND_FORWARD, STRAND_REVERSE):
        fields = [fields[0], fields[1][0], fields[1][1:]] + fields[2:]
    _check_complete(entry, fields, XA_FIELDS)
    sequence_name, strand, pos, cigar, edit_distance = fields
    _require_int(entry, "edit_distance", edit_distance)
    return _build_segment(
        entry, read_id, sequence_name, pos, strand, cigar, ORIGIN_ALTERNATIVE
    )


def parse_supplementary_entry(entry: str, read_id: str) -> Optional[AlignmentSegment]:
    """
    Parse a single SA tag entry.

    Args:
        entry: "rname,pos,strand,CIGAR,mapQ,NM"
        read_id: Name of the read owning the tag

    Returns:
        AlignmentSegment if parsing successful, None otherwise

    Examples:
        >>> seg = parse_supplementary_entry("chr1,100,+,50M,60,0", "read1")
        >>> (seg.sequence_name, seg.start, seg.end, seg.strand)
        ('chr1', 100, 149, '+')
        >>> parse_supplementary_entry("chr1,100,+,50M", "read1") is None
        True
    """
    try:
        return _split_supplementary(entry, read_id)
    except MalformedTagEntry:
        return None


def parse_alternative_entry(entry: str, read_id: str) -> Optional[AlignmentSegment]:
    """
    Parse a single XA tag entry.

    Args:
        entry: "rname,<strand><pos>,CIGAR,NM"
        read_id: Name of the read owning the tag

    Returns:
        AlignmentSegment if parsing successful, None otherwise

    Examples:
        >>> seg = parse_alternative_entry("chr3,-120,50M,1", "read1")
        >>> (seg.sequence_name, seg.start, seg.strand)
        ('chr3', 120, '-')
    """
    try:
        return _split_alternative(entry, read_id)
    except MalformedTagEntry:
        return None


def decode_supplementary_tag(tag: Optional[str], read_id: str) -> List[AlignmentSegment]:
    """Decode every well-formed entry of an SA tag."""
    segments = []
    for entry in split_tag_entries(tag):
        seg = parse_supplementary_entry(entry, read_id)
        if seg is not None:
            segments.append(seg)
    return segments


def decode_alternative_tag(tag: Optional[str], read_id: str) -> List[AlignmentSegment]:
    """Decode every well-formed entry of an XA tag."""
    segments = []
    for entry in split_tag_entries(tag):
        seg = parse_alternative_entry(entry, read_id)
        if seg is not None:
            segments.append(seg)
    return segments
