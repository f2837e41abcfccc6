"""Command line front-end for batch classification.

Usage::

    python -m mutant_detector.cli --store sqlite --store-path dna.db classify samples.json
    python -m mutant_detector.cli classify --dna ATCG CGAT TACG GCTA
    python -m mutant_detector.cli --store sqlite --store-path dna.db stats
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import STORE_BACKENDS, build_settings
from .detector import MutantDetector
from .io_utils import load_dna_json, save_report
from .validation import DnaValidationError

logger = logging.getLogger("mutant_detector.cli")

EXIT_OK = 0
EXIT_INVALID = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mutant-detector",
        description="Classify DNA grids as mutant or human",
    )
    parser.add_argument("--store", choices=STORE_BACKENDS, help="result store backend")
    parser.add_argument("--store-path", help="file used by the json and sqlite backends")
    parser.add_argument("--log-level", help="logging level (default from MUTANT_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="classify grids from JSON files or --dna")
    classify.add_argument("files", nargs="*", help="JSON files holding DNA requests")
    classify.add_argument("--dna", nargs="+", metavar="ROW", help="rows of a single grid")
    classify.add_argument("--report", help="also write results and statistics to this JSON file")

    sub.add_parser("stats", help="print mutant/human statistics")
    return parser


def _load_grids(args: argparse.Namespace) -> List[Any]:
    grids: List[Any] = []
    for path in args.files:
        grids.extend(load_dna_json(path))
    if args.dna:
        grids.append(list(args.dna))
    return grids


def _classify(detector: MutantDetector, grids: List[Any], args: argparse.Namespace) -> int:
    if not grids:
        print("no DNA grids given", file=sys.stderr)
        return EXIT_INVALID

    results: List[Dict[str, Any]] = []
    exit_code = EXIT_OK
    for index, grid in enumerate(grids):
        verdict = detector.classify(grid)
        if isinstance(verdict, DnaValidationError):
            exit_code = EXIT_INVALID
            result = {"index": index, "error": verdict.to_dict()}
        else:
            result = {"index": index, "mutant": verdict}
        results.append(result)
        print(json.dumps(result))

    if args.report:
        save_report(
            {"results": results, "stats": detector.statistics().as_dict()},
            args.report,
        )
        logger.info("Report written to %s", args.report)
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = build_settings(
        {"STORE": args.store, "STORE_PATH": args.store_path, "LOG_LEVEL": args.log_level}
    )
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        detector = MutantDetector(settings=settings)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "classify":
        try:
            grids = _load_grids(args)
        except (OSError, ValueError) as exc:
            parser.error(f"cannot read DNA input: {exc}")
        return _classify(detector, grids, args)
    print(json.dumps(detector.statistics().as_dict()))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
