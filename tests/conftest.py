"""
Pytest configuration and fixtures for junction read tests.
"""

import sys
import tempfile
from pathlib import Path

import pytest

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))

from junctionreads.records import PrimaryRecord


# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Reference Fixtures
# ============================================================================

@pytest.fixture
def insert_name():
    """Name of the insert sequence in the hybrid reference."""
    return "PiggyBac"


@pytest.fixture
def insert_length():
    """Length of the insert sequence."""
    return 2476


@pytest.fixture
def reference_lengths(insert_name, insert_length):
    """Sequences of a small hybrid reference."""
    return {
        "chr1": 100000,
        "chr2": 50000,
        insert_name: insert_length,
    }


# ============================================================================
# Alignment Record Fixtures
# ============================================================================

@pytest.fixture
def junction_records(insert_name):
    """
    Four primary records: r1 and r2 are duplicates, r3 and r4 are unique.

    With the default centre (1238) r1, r2 and r4 start on the insert before
    the centre, r3 after it.
    """
    return [
        PrimaryRecord("r1", "chr1", 1000, "+", "50M50S",
                      sa_tag=f"{insert_name},100,+,50S50M,60,0;"),
        PrimaryRecord("r2", "chr1", 1000, "+", "50M50S",
                      sa_tag=f"{insert_name},100,+,50S50M,60,1;"),
        PrimaryRecord("r3", "chr1", 5000, "-", "60M40S",
                      sa_tag=f"{insert_name},1500,-,60S40M,60,0;"),
        PrimaryRecord("r4", "chr2", 300, "+", "50M",
                      xa_tag=f"{insert_name},+100,50M,0;"),
    ]


# ============================================================================
# BAM Fixtures
# ============================================================================

def _query_length(cigar):
    from junctionreads.records import parse_cigar
    return sum(n for n, op in parse_cigar(cigar) if op in "MIS=X")


@pytest.fixture
def write_bam(reference_lengths):
    """
    Factory fixture writing a BAM file with pysam.

    Each read is a dict with keys name, ref, pos (1-based), cigar and
    optional flag, tags ({"SA": ..., "XA": ...}). A read with flag 4 is
    written unmapped.
    """
    import pysam

    def _write_bam(path, reads):
        header = {
            "HD": {"VN": "1.6", "SO": "unsorted"},
            "SQ": [{"SN": name, "LN": length} for name, length in reference_lengths.items()],
        }
        with pysam.AlignmentFile(str(path), "wb", header=header) as out:
            for read in reads:
                aln = pysam.AlignedSegment(out.header)
                aln.query_name = read["name"]
                aln.flag = read.get("flag", 0)
                if aln.flag & 4:
                    aln.query_sequence = "A" * 50
                else:
                    aln.reference_id = out.get_tid(read["ref"])
                    aln.reference_start = read["pos"] - 1
                    aln.mapping_quality = 60
                    aln.cigarstring = read["cigar"]
                    aln.query_sequence = "A" * _query_length(read["cigar"])
                for tag, value in read.get("tags", {}).items():
                    aln.set_tag(tag, value, value_type="Z")
                out.write(aln)
        return Path(path)

    return _write_bam


@pytest.fixture
def library_reads(insert_name):
    """Reads for one library BAM."""
    return [
        {"name": "r1", "ref": "chr1", "pos": 1000, "cigar": "50M50S",
         "tags": {"SA": f"{insert_name},100,+,50S50M,60,0;"}},
        {"name": "r2", "ref": "chr1", "pos": 1000, "cigar": "50M50S",
         "tags": {"SA": f"{insert_name},100,+,50S50M,60,1;"}},
        {"name": "r3", "ref": insert_name, "pos": 1500, "cigar": "40M", "flag": 16},
        {"name": "r4", "ref": "chr2", "pos": 300, "cigar": "50M"},
        {"name": "r5", "ref": insert_name, "pos": 10, "cigar": "50M", "flag": 256},
        {"name": "r6", "flag": 4},
    ]


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config(insert_name):
    """Provide a sample configuration dictionary."""
    return {
        "insert": {
            "name": insert_name,
        },
        "centre": {
            "mode": "default",
        },
        "run": {
            "dedup": True,
            "jobs": 2,
            "outdir": "/tmp/junction_reads_test",
        },
    }
