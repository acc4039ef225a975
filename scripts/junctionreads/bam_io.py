"""
Alignment Input

Reads primary alignment records (with their SA and XA tags) from the BAM
files produced by the mapping step, and looks up the insert length.

Only reads that touch the insert sequence are informative for junction
calling. A read touches the insert when its primary alignment or any SA/XA
entry names the insert (case-insensitive).
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Union

import pysam
from Bio import SeqIO

from .records import PrimaryRecord, STRAND_FORWARD, STRAND_REVERSE

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _open_alignments(path: PathLike) -> pysam.AlignmentFile:
    mode = "r" if str(path).endswith(".sam") else "rb"
    return pysam.AlignmentFile(str(path), mode, check_sq=False)


def _optional_tag(aln: pysam.AlignedSegment, tag: str) -> Optional[str]:
    return aln.get_tag(tag) if aln.has_tag(tag) else None


def record_from_alignment(aln: pysam.AlignedSegment) -> PrimaryRecord:
    """
    Convert a pysam alignment into a PrimaryRecord.

    pysam reports 0-based half-open coordinates; the record is 1-based
    inclusive, so the start shifts by one and the end stays as is.
    """
    return PrimaryRecord(
        read_id=aln.query_name,
        sequence_name=aln.reference_name,
        start=aln.reference_start + 1,
        strand=STRAND_REVERSE if aln.is_reverse else STRAND_FORWARD,
        cigar=aln.cigarstring,
        sa_tag=_optional_tag(aln, "SA"),
        xa_tag=_optional_tag(aln, "XA"),
        end=aln.reference_end,
    )


def record_touches_insert(record: PrimaryRecord, insert_name: str) -> bool:
    """True if the primary alignment or any SA/XA entry names the insert."""
    needle = insert_name.lower()
    fields = (record.sequence_name, record.sa_tag or "", record.xa_tag or "")
    return any(needle in field.lower() for field in fields)


def iter_primary_records(
    bam_path: PathLike,
    insert_name: Optional[str] = None,
    primary_only: bool = True
) -> Iterator[PrimaryRecord]:
    """
    Iterate the mapped records of a BAM/SAM file.

    Args:
        bam_path: Alignment file (sorted or not, index not required)
        insert_name: If given, only yield records touching the insert
        primary_only: Skip secondary and supplementary alignment lines

    Yields:
        PrimaryRecord objects
    """
    with _open_alignments(bam_path) as infile:
        for aln in infile.fetch(until_eof=True):
            if aln.is_unmapped:
                continue
            if primary_only and (aln.is_secondary or aln.is_supplementary):
                continue
            record = record_from_alignment(aln)
            if insert_name is not None and not record_touches_insert(record, insert_name):
                continue
            yield record


def read_primary_records(
    bam_path: PathLike,
    insert_name: Optional[str] = None,
    primary_only: bool = True
) -> List[PrimaryRecord]:
    """Load the records of `iter_primary_records` into a list."""
    records = list(iter_primary_records(bam_path, insert_name, primary_only))
    logger.info(f"Loaded {len(records)} alignment records from {bam_path}")
    return records


def insert_length_from_bam(bam_path: PathLike, insert_name: str) -> int:
    """
    Length of the insert sequence from the BAM header.

    Raises:
        KeyError: If the header has no sequence named `insert_name`
    """
    with _open_alignments(bam_path) as infile:
        if insert_name not in infile.references:
            raise KeyError(f"Insert {insert_name!r} not in header of {bam_path}")
        return infile.get_reference_length(insert_name)


def insert_length_from_fasta(fasta_path: PathLike, insert_name: str) -> int:
    """
    Length of the insert sequence from a FASTA file.

    Raises:
        FileNotFoundError: If the file does not exist
        KeyError: If no record is named `insert_name`
    """
    path = Path(fasta_path)
    if not path.exists():
        raise FileNotFoundError(f"Insert FASTA not found: {fasta_path}")

    for record in SeqIO.parse(str(path), "fasta"):
        if record.id == insert_name:
            return len(record.seq)

    raise KeyError(f"Insert {insert_name!r} not found in {fasta_path}")
