"""
Junction Reads - Core Library

Reconciles BWA alignments against a hybrid (host + insert) reference into a
deduplicated, orientation-classified set of insertion junction reads:
- SA / XA tag decoding into alignment segments
- Per-read interval merging and insertion-centre classification
- PCR duplicate removal
"""

from .errors import (
    JunctionReadsError,
    InvalidBoundary,
    InvalidMode,
    MalformedTagEntry,
)

from .records import (
    AlignmentSegment,
    PrimaryRecord,
    cigar_reference_span,
)

from .tags import (
    decode_supplementary_tag,
    decode_alternative_tag,
)

from .segments import merge_segments

from .boundary import (
    AutomaticCentre,
    DefaultCentre,
    FixedCentre,
    InsertionBoundary,
    resolve_boundary,
    parse_centre_mode,
)

from .clustering import (
    Interval,
    ReadCluster,
    merge_intervals,
    cluster_reads,
)

from .dedup import DeduplicatedSet, deduplicate

from .pipeline import reconcile_library, reconcile_run

__version__ = "1.0.0"

__all__ = [
    # Errors
    "JunctionReadsError",
    "InvalidBoundary",
    "InvalidMode",
    "MalformedTagEntry",
    # Records and tags
    "AlignmentSegment",
    "PrimaryRecord",
    "cigar_reference_span",
    "decode_supplementary_tag",
    "decode_alternative_tag",
    "merge_segments",
    # Insertion centre
    "AutomaticCentre",
    "DefaultCentre",
    "FixedCentre",
    "InsertionBoundary",
    "resolve_boundary",
    "parse_centre_mode",
    # Clustering and dedup
    "Interval",
    "ReadCluster",
    "merge_intervals",
    "cluster_reads",
    "DeduplicatedSet",
    "deduplicate",
    # Pipeline
    "reconcile_library",
    "reconcile_run",
]
