"""Command line entry point: extract, bootstrap and incremental commands."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from issue_rollup.analytics.rollup.incremental import MissingSnapshotHistoryError
from issue_rollup.core.config import MERGE_POLICIES, load_settings
from issue_rollup.core.gh_client import GhCommandError
from issue_rollup.features.report import run_bootstrap, run_extract, run_incremental

logger = logging.getLogger("issue_rollup")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="issue-rollup",
        description="Extract GitHub issues and compute per-area daily rollups.",
    )
    p.add_argument("--config", type=Path, default=None, help="Optional YAML settings file (rollup: mapping).")
    p.add_argument("-v", "--verbose", action="store_true", help="Log per-day processing (DEBUG).")
    sub = p.add_subparsers(dest="command", required=True)

    ex = sub.add_parser("extract", help="Fetch all issues of a repository with the gh CLI.")
    ex.add_argument("repo", help="Repository as owner/name.")
    ex.add_argument("--output-dir", type=Path, default=Path("."), help="Directory for the JSON and CSV files.")

    bs = sub.add_parser("bootstrap", help="Compute the full snapshot series and write a report.")
    bs.add_argument("--input", dest="input_path", type=Path, required=True, help="Extracted issues JSON file.")
    bs.add_argument("--output", dest="output_path", type=Path, required=True, help="Report JSON file to write.")
    bs.add_argument("--trend", action="store_true", help="Include the MonthlyTrend list.")

    inc = sub.add_parser("incremental", help="Extend an existing report up to today.")
    inc.add_argument("--input", dest="input_path", type=Path, required=True, help="Extracted issues JSON file.")
    inc.add_argument("--charts", dest="charts_path", type=Path, required=True, help="Report JSON file to update in place.")
    inc.add_argument("--merge", choices=sorted(MERGE_POLICIES), default=None, help="Merge policy for new records.")
    inc.add_argument("--trend", action="store_true", help="Include the MonthlyTrend list.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_settings(args.config)
        if args.command == "extract":
            paths = run_extract(args.repo, args.output_dir, settings)
            logger.info("Issues written to %s and %s", paths.issues_json, paths.issues_csv)
        elif args.command == "bootstrap":
            run_bootstrap(args.input_path, args.output_path, settings, include_trend=args.trend)
        elif args.command == "incremental":
            result = run_incremental(
                args.input_path,
                args.charts_path,
                settings,
                include_trend=args.trend,
                merge_policy=args.merge,
            )
            if result.up_to_date:
                logger.info("Charts are already up to date; nothing written")
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except MissingSnapshotHistoryError as exc:
        logger.error("%s", exc)
        return 1
    except GhCommandError as exc:
        logger.error("GitHub CLI error: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid data: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
