"""
Library Reconciliation Pipeline

Runs the per-library passes

    merge segments -> cluster reads -> remove duplicates

for the forward and reverse libraries of a sample. The insertion centre is
resolved once per run and shared read-only by both libraries, which are
otherwise fully independent and processed concurrently.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence

from .boundary import CentreMode, InsertionBoundary, resolve_boundary
from .clustering import cluster_reads
from .dedup import DeduplicatedSet, deduplicate
from .records import PrimaryRecord
from .segments import merge_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LibraryResult:
    """Reconciled reads of one library with diagnostic counts."""
    name: str
    reads: DeduplicatedSet
    n_records: int
    n_segments: int
    n_dropped_entries: int

    @property
    def n_clusters(self) -> int:
        return self.reads.n_input


@dataclass(frozen=True)
class RunResult:
    """Output of a run: one LibraryResult per library and the centre used."""
    libraries: Dict[str, LibraryResult]
    boundary: InsertionBoundary
    insert_name: str
    dedup: bool

    def __getitem__(self, name: str) -> LibraryResult:
        return self.libraries[name]


def reconcile_library(
    name: str,
    records: Sequence[PrimaryRecord],
    insert_name: str,
    boundary: InsertionBoundary,
    dedup: bool = True
) -> LibraryResult:
    """
    Reconcile the alignment records of one library.

    Args:
        name: Library label (e.g. "FWD")
        records: Primary alignment records
        insert_name: Name of the insert sequence in the hybrid reference
        boundary: Resolved insertion centre
        dedup: Remove suspected PCR duplicates

    Returns:
        LibraryResult; an empty record list gives an empty read set
    """
    records = list(records)
    if not records:
        logger.info(f"{name}: no alignment records, no junction reads found")
        empty = DeduplicatedSet(clusters=(), deduplicated=dedup, n_input=0)
        return LibraryResult(name, empty, 0, 0, 0)

    merged = merge_segments(records)
    clusters = cluster_reads(merged.segments, insert_name, boundary.position)
    reads = deduplicate(clusters, enabled=dedup)

    logger.info(
        f"{name}: {merged.n_records} records, {merged.n_segments} segments "
        f"({merged.n_dropped} tag entries dropped), {len(clusters)} reads, "
        f"{len(reads)} after dedup"
    )

    return LibraryResult(
        name=name,
        reads=reads,
        n_records=merged.n_records,
        n_segments=merged.n_segments,
        n_dropped_entries=merged.n_dropped,
    )


def reconcile_run(
    libraries: Mapping[str, Sequence[PrimaryRecord]],
    insert_name: str,
    insert_length: int,
    centre_mode: CentreMode,
    dedup: bool = True,
    max_workers: int = 2
) -> RunResult:
    """
    Reconcile all libraries of a sample.

    Args:
        libraries: Library name -> primary records (usually "FWD" and "REV")
        insert_name: Name of the insert sequence in the hybrid reference
        insert_length: Length of the insert sequence
        centre_mode: How to resolve the insertion centre
        dedup: Remove suspected PCR duplicates
        max_workers: Libraries processed in parallel (1 = sequential)

    Returns:
        RunResult with libraries in input order

    Raises:
        InvalidBoundary, InvalidMode: Before any library is processed
    """
    boundary = resolve_boundary(centre_mode, insert_length)
    logger.info(f"Insertion centre: {boundary.position} ({boundary.mode})")

    results: Dict[str, LibraryResult] = {}

    if max_workers <= 1 or len(libraries) <= 1:
        for name, records in libraries.items():
            results[name] = reconcile_library(name, records, insert_name, boundary, dedup)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_name = {
                executor.submit(reconcile_library, name, records, insert_name, boundary, dedup): name
                for name, records in libraries.items()
            }
            for future in as_completed(future_to_name):
                name = future_to_name[future]
                results[name] = future.result()

    ordered = {name: results[name] for name in libraries}
    return RunResult(libraries=ordered, boundary=boundary, insert_name=insert_name, dedup=dedup)
