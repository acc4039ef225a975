#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Junction Read Reconciliation Script
===================================

Purpose:
    Turn BWA alignments of the forward and reverse libraries against the
    hybrid (host + insert) reference into deduplicated, orientation-labelled
    junction reads.

    Steps per library:
    1. Load primary alignments touching the insert (with SA / XA tags)
    2. Decode SA / XA tags and merge them with the primary alignments
    3. Collapse every read into merged intervals and flag reads whose insert
       alignment starts before the insertion centre
    4. Remove suspected PCR duplicates (disable with --no-dedup)

Required Environment:
    - pysam (BAM reading)
    - biopython (insert FASTA, optional)
    - pandas, pyyaml

Input:
    - {FWD}.bam / {REV}.bam: alignments against the hybrid reference, e.g.
      bwa mem -Y -M | samtools view -b -F 4 | samtools sort
    - Insert FASTA (optional, otherwise the insert length is read from the
      BAM header)

Output:
    - {OUTDIR}/FWD.tsv, {OUTDIR}/REV.tsv - one row per merged read interval
    - {OUTDIR}/summary.json - counts and the insertion centre used
    - {OUTDIR}/reconcile.log

Adjustable Parameters:
    --centre: auto | default | <position> (default: default)
    --no-dedup: keep suspected PCR duplicates
    --jobs: libraries processed in parallel (default: 2)

Usage:
    python reconcile_junction_reads.py --fwd-bam FWD.bam --rev-bam REV.bam \\
        --insert-name PiggyBac --outdir results

    # Settings from a YAML file, command line flags take precedence
    python reconcile_junction_reads.py --config config.yaml --centre 1200
"""

import argparse
import json
import logging
import os
import sys

import yaml

from junctionreads import JunctionReadsError, parse_centre_mode, reconcile_run
from junctionreads.bam_io import (
    insert_length_from_bam,
    insert_length_from_fasta,
    read_primary_records,
)
from junctionreads.report import run_summary, write_library_table
from utils.config_parser import get_nested, load_config, validate_config, with_defaults

logger = logging.getLogger(__name__)


def setup_logging(outdir, verbose=False):
    os.makedirs(outdir, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(os.path.join(outdir, "reconcile.log")),
        ],
        force=True,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Reconcile junction reads of forward and reverse libraries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--fwd-bam", help="BAM of the forward library")
    parser.add_argument("--rev-bam", help="BAM of the reverse library")
    parser.add_argument("--insert-name", help="Name of the insert sequence in the hybrid reference")
    parser.add_argument("--insert-fasta", help="FASTA containing the insert sequence")
    parser.add_argument("--centre", help="Insertion centre: auto, default or a position")
    parser.add_argument("--no-dedup", action="store_true", help="Keep suspected PCR duplicates")
    parser.add_argument("--outdir", help="Output directory")
    parser.add_argument("--jobs", type=int, help="Libraries processed in parallel")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def merge_settings(args, config):
    """Config values overridden by command line flags."""
    settings = with_defaults(config)
    overrides = {
        "libraries.fwd_bam": args.fwd_bam,
        "libraries.rev_bam": args.rev_bam,
        "insert.name": args.insert_name,
        "insert.fasta": args.insert_fasta,
        "centre.mode": args.centre,
        "run.outdir": args.outdir,
        "run.jobs": args.jobs,
    }
    for key_path, value in overrides.items():
        if value is None:
            continue
        section, key = key_path.split(".")
        settings.setdefault(section, {})[key] = value
    if args.no_dedup:
        settings["run"]["dedup"] = False
    return settings


def run(settings):
    """Run reconciliation for validated settings, return the output directory."""
    insert_name = get_nested(settings, "insert.name")
    fwd_bam = get_nested(settings, "libraries.fwd_bam")
    rev_bam = get_nested(settings, "libraries.rev_bam")
    insert_fasta = get_nested(settings, "insert.fasta")
    outdir = get_nested(settings, "run.outdir")

    if insert_fasta:
        insert_length = insert_length_from_fasta(insert_fasta, insert_name)
    else:
        insert_length = insert_length_from_bam(fwd_bam, insert_name)
    logger.info(f"Insert {insert_name}: {insert_length} bp")

    # No empirical estimator is wired in here, so "auto" uses the half-length
    centre_mode = parse_centre_mode(get_nested(settings, "centre.mode"))

    libraries = {
        "FWD": read_primary_records(fwd_bam, insert_name),
        "REV": read_primary_records(rev_bam, insert_name),
    }

    result = reconcile_run(
        libraries,
        insert_name=insert_name,
        insert_length=insert_length,
        centre_mode=centre_mode,
        dedup=get_nested(settings, "run.dedup"),
        max_workers=int(get_nested(settings, "run.jobs")),
    )

    for name, lib in result.libraries.items():
        path = write_library_table(lib.reads, os.path.join(outdir, f"{name}.tsv"))
        logger.info(f"{name}: {len(lib.reads)} reads written to {path}")

    with open(os.path.join(outdir, "summary.json"), "w") as f:
        json.dump(run_summary(result), f, indent=2)

    return outdir


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else {}
    except (FileNotFoundError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    settings = merge_settings(args, config)
    setup_logging(get_nested(settings, "run.outdir"), args.verbose)

    is_valid, errors = validate_config(settings)
    for key_path in ("libraries.fwd_bam", "libraries.rev_bam"):
        if not get_nested(settings, key_path):
            errors.append(f"Missing input BAM ({key_path})")
            is_valid = False
    if not is_valid:
        for error in errors:
            logger.error(error)
        return 1

    try:
        outdir = run(settings)
    except (JunctionReadsError, FileNotFoundError, KeyError) as e:
        logger.error(f"Reconciliation failed: {e}")
        return 1

    logger.info(f"Done, results in {outdir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
