"""Extend a persisted snapshot series forward to today."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from issue_rollup.analytics.rollup.areas import unique_areas
from issue_rollup.analytics.rollup.snapshot import accumulate_snapshots, today_in
from issue_rollup.core.config import MERGE_APPEND, MERGE_POLICIES, MERGE_UPSERT, RollupSettings
from issue_rollup.core.models import IssueModel

logger = logging.getLogger(__name__)


class MissingSnapshotHistoryError(RuntimeError):
    """Incremental update requested without a bootstrapped series."""


@dataclass(slots=True)
class ExtensionResult:
    charts: list[dict]
    new_records: list[dict] = field(default_factory=list)
    start: date | None = None
    end: date | None = None
    up_to_date: bool = False


def last_snapshot_date(charts) -> str | None:
    """Latest ``date`` in the series.

    ISO calendar dates are fixed width and zero padded, so the string max is
    the chronological max.
    """
    if not isinstance(charts, list):
        return None
    dates = [r["date"] for r in charts if isinstance(r, dict) and isinstance(r.get("date"), str)]
    return max(dates) if dates else None


def next_snapshot_date(date_str: str) -> date:
    return date.fromisoformat(date_str) + timedelta(days=1)


def merge_charts(existing: list[dict], new: list[dict], policy: str = MERGE_APPEND) -> list[dict]:
    """Combine an existing series with newly computed records.

    ``append`` concatenates without deduplication: re-running over a covered
    range leaves duplicate (date, area) records. ``upsert`` keys records by
    (date, area) and lets new records overwrite existing ones in place.
    """
    if policy not in MERGE_POLICIES:
        raise ValueError(f"Unknown merge policy {policy!r}")
    if policy == MERGE_APPEND:
        return [*existing, *new]

    merged: dict[tuple, dict] = {}
    for record in existing:
        merged[(record.get("date"), record.get("area"))] = record
    for record in new:
        merged[(record.get("date"), record.get("area"))] = record
    return list(merged.values())


def extend_snapshots(
    existing_charts,
    issues: list[IssueModel],
    settings: RollupSettings,
    *,
    now: datetime | None = None,
    merge_policy: str | None = None,
) -> ExtensionResult:
    """Accumulate only the days after the last stored snapshot and merge them in.

    Raises ``MissingSnapshotHistoryError`` when the series is absent or empty;
    returns an ``up_to_date`` result (nothing computed) when the next day is
    after today.
    """
    last = last_snapshot_date(existing_charts)
    if last is None:
        raise MissingSnapshotHistoryError(
            "No existing snapshot data found in charts file. Please run bootstrap first."
        )
    logger.info("Last snapshot date: %s", last)

    start = next_snapshot_date(last)
    today = today_in(settings, now)
    if start > today:
        logger.info("Charts are already up to date")
        return ExtensionResult(charts=list(existing_charts), end=today, up_to_date=True)

    logger.info("Updating from %s to %s", start, today)
    new_records = accumulate_snapshots(issues, start, today, unique_areas(issues, settings), settings)
    policy = merge_policy or settings.merge_policy
    charts = merge_charts(list(existing_charts), new_records, policy)
    if policy == MERGE_UPSERT:
        logger.debug("Upserted %s records into %s existing", len(new_records), len(existing_charts))
    return ExtensionResult(charts=charts, new_records=new_records, start=start, end=today)
