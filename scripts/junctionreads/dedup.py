"""
PCR Duplicate Removal

Reads that land on exactly the same loci (same sequences, same start
coordinates) with the same orientation flag are taken to be amplification
copies of one original fragment. One representative per group is kept, the
read with the lowest read id, so the result is deterministic and running the
pass again changes nothing.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .clustering import ReadCluster

logger = logging.getLogger(__name__)

DuplicateKey = Tuple[Tuple[Tuple[str, int], ...], bool]


@dataclass(frozen=True)
class DeduplicatedSet:
    """Final clusters of one library."""
    clusters: Tuple[ReadCluster, ...]
    deduplicated: bool
    n_input: int

    @property
    def n_duplicates_removed(self) -> int:
        return self.n_input - len(self.clusters)

    @property
    def read_ids(self) -> List[str]:
        return [c.read_id for c in self.clusters]

    def __len__(self) -> int:
        return len(self.clusters)

    def __iter__(self):
        return iter(self.clusters)


def duplicate_key(cluster: ReadCluster) -> DuplicateKey:
    """
    Loci identifying a fragment: (sequence, start) of every interval plus the
    orientation flag.
    """
    loci = tuple((iv.sequence_name, iv.start) for iv in cluster.intervals)
    return (loci, cluster.before_pad)


def group_duplicates(
    clusters: Iterable[ReadCluster]
) -> Dict[DuplicateKey, List[ReadCluster]]:
    """
    Group clusters sharing the same duplicate key.

    Returns:
        Dictionary mapping key to its clusters, sorted by read_id
    """
    groups: Dict[DuplicateKey, List[ReadCluster]] = {}
    for cluster in clusters:
        groups.setdefault(duplicate_key(cluster), []).append(cluster)
    for members in groups.values():
        members.sort(key=lambda c: c.read_id)
    return groups


def deduplicate(clusters: Iterable[ReadCluster], enabled: bool = True) -> DeduplicatedSet:
    """
    Collapse duplicate reads of one library.

    Args:
        clusters: Complete ReadCluster set of a library
        enabled: If False, every cluster is kept as its own group

    Returns:
        DeduplicatedSet sorted by read_id

    Examples:
        >>> from junctionreads.clustering import Interval
        >>> a = ReadCluster("a", (Interval("chr1", 100, 150),), False)
        >>> b = ReadCluster("b", (Interval("chr1", 100, 180),), False)
        >>> deduplicate([b, a]).read_ids
        ['a']
    """
    clusters = list(clusters)

    if not enabled:
        kept = sorted(clusters, key=lambda c: c.read_id)
        return DeduplicatedSet(clusters=tuple(kept), deduplicated=False, n_input=len(clusters))

    groups = group_duplicates(clusters)
    kept = sorted((members[0] for members in groups.values()), key=lambda c: c.read_id)

    removed = len(clusters) - len(kept)
    if removed:
        logger.debug(f"Removed {removed} duplicate reads from {len(clusters)}")

    return DeduplicatedSet(clusters=tuple(kept), deduplicated=True, n_input=len(clusters))
