"""
Reporting Export

Flattens reconciled reads into the interval table handed to downstream
insertion calling: one row per merged interval, tagged with its read name
and the read's orientation flag.
"""

from pathlib import Path
from typing import Any, Dict, Union

import pandas as pd

from .dedup import DeduplicatedSet
from .pipeline import RunResult

TABLE_COLUMNS = ["read_name", "seqnames", "start", "end", "width", "before_pad"]


def clusters_to_frame(reads: DeduplicatedSet) -> pd.DataFrame:
    """
    One row per interval of every read.

    Returns:
        DataFrame with columns read_name, seqnames, start, end, width,
        before_pad (empty but with these columns when there are no reads)
    """
    rows = [
        {
            "read_name": cluster.read_id,
            "seqnames": iv.sequence_name,
            "start": iv.start,
            "end": iv.end,
            "width": iv.end - iv.start + 1,
            "before_pad": cluster.before_pad,
        }
        for cluster in reads
        for iv in cluster.intervals
    ]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def write_library_table(reads: DeduplicatedSet, path: Union[str, Path]) -> Path:
    """Write the interval table of a library as TSV."""
    path = Path(path)
    clusters_to_frame(reads).to_csv(path, sep="\t", index=False)
    return path


def run_summary(result: RunResult) -> Dict[str, Any]:
    """Counts per library plus the insertion centre used."""
    return {
        "insert_name": result.insert_name,
        "insertion_centre": result.boundary.position,
        "centre_mode": result.boundary.mode,
        "insert_length": result.boundary.insert_length,
        "dedup": result.dedup,
        "libraries": {
            name: {
                "records": lib.n_records,
                "segments": lib.n_segments,
                "dropped_tag_entries": lib.n_dropped_entries,
                "reads": lib.n_clusters,
                "reads_after_dedup": len(lib.reads),
                "duplicates_removed": lib.reads.n_duplicates_removed,
            }
            for name, lib in result.libraries.items()
        },
    }
