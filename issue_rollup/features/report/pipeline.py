"""Extract, bootstrap and incremental pipelines: load, compute, then write."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from issue_rollup.analytics.metrics.normalize import normalize_issue_dates
from issue_rollup.analytics.rollup.areas import unique_areas
from issue_rollup.analytics.rollup.incremental import ExtensionResult, extend_snapshots
from issue_rollup.analytics.rollup.snapshot import accumulate_snapshots, snapshot_bounds
from issue_rollup.core import storage
from issue_rollup.core.config import RollupSettings
from issue_rollup.core.gh_client import GitHubCLI
from issue_rollup.core.service import IssueService
from issue_rollup.features.report.context import build_report

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExtractPaths:
    issues_json: Path
    issues_csv: Path


def output_paths(repo: str, output_dir: str | Path) -> ExtractPaths:
    slug = repo.replace("/", "-")
    base = Path(output_dir)
    return ExtractPaths(
        issues_json=base / f"{slug}-all-issues.json",
        issues_csv=base / f"{slug}-issues.csv",
    )


def run_extract(
    repo: str,
    output_dir: str | Path,
    settings: RollupSettings,
    *,
    api: GitHubCLI | None = None,
) -> ExtractPaths:
    logger.info("Fetching all issues from GitHub for %s", repo)
    service = IssueService(api or GitHubCLI(repo), settings)
    issues = service.fetch_issues(progress=logger.info)
    paths = output_paths(repo, output_dir)
    storage.save_issues(paths.issues_json, issues, encoding=settings.encoding)
    storage.save_issues_csv(paths.issues_csv, issues, encoding=settings.encoding)
    return paths


def run_bootstrap(
    input_path: str | Path,
    output_path: str | Path,
    settings: RollupSettings,
    *,
    include_trend: bool = False,
    now: datetime | None = None,
) -> dict:
    """Compute the full series from the earliest issue through today and write the report."""
    issues = normalize_issue_dates(storage.load_issues(input_path, encoding=settings.encoding))
    start, end = snapshot_bounds(issues, settings, now)
    charts = accumulate_snapshots(issues, start, end, unique_areas(issues, settings), settings)
    report = build_report(issues, charts, settings, include_trend=include_trend, now=now)
    storage.write_json(output_path, report, encoding=settings.encoding)
    logger.info("Written rollup data to %s", output_path)
    return report


def stored_charts(report: dict) -> list[dict] | None:
    """The ``charts`` list of a stored report.

    Older reports were written with ``charts`` as an object keyed by record
    index; its values are the records.
    """
    charts = report.get("charts")
    if isinstance(charts, dict):
        return list(charts.values())
    return charts


def run_incremental(
    input_path: str | Path,
    charts_path: str | Path,
    settings: RollupSettings,
    *,
    include_trend: bool = False,
    merge_policy: str | None = None,
    now: datetime | None = None,
) -> ExtensionResult:
    """Extend an existing report in place; nothing is written when already up to date."""
    issues = storage.load_issues(input_path, encoding=settings.encoding)
    existing = storage.load_report(charts_path, encoding=settings.encoding)
    normalize_issue_dates(issues)

    result = extend_snapshots(
        stored_charts(existing),
        issues,
        settings,
        now=now,
        merge_policy=merge_policy,
    )
    if result.up_to_date:
        return result

    report = build_report(
        issues,
        result.charts,
        settings,
        include_trend=include_trend or "MonthlyTrend" in existing,
        now=now,
    )
    storage.write_json(charts_path, report, encoding=settings.encoding)
    logger.info("Updated charts data in %s", charts_path)
    logger.info("Added %s new snapshot records", len(result.new_records))
    return result
