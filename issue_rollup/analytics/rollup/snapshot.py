"""Snapshot accumulation over a calendar date range."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import date, datetime, timedelta

from issue_rollup.analytics.metrics.normalize import parse_instant
from issue_rollup.analytics.rollup.daily import apply_issue, build_timeline, snapshot_day
from issue_rollup.core.config import RollupSettings
from issue_rollup.core.models import AreaSnapshotRollup, IssueModel

logger = logging.getLogger(__name__)


def today_in(settings: RollupSettings, now: datetime | None = None) -> date:
    if now is None:
        now = datetime.now(tz=settings.tz)
    elif now.tzinfo is not None:
        now = now.astimezone(settings.tz)
    return now.date()


def snapshot_bounds(
    issues: Iterable[IssueModel],
    settings: RollupSettings,
    now: datetime | None = None,
) -> tuple[date, date]:
    """Return (earliest creation day, today) in the configured timezone.

    With no issues the range collapses to today alone.
    """
    tz = settings.tz
    today = today_in(settings, now)
    start = today
    for issue in issues:
        created = parse_instant(issue.created_at, issue_number=issue.number, field_name="createdAt")
        created_day = created.tz_convert(tz).date()
        if created_day < start:
            start = created_day
    return start, today


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def empty_records(areas: Iterable[str]) -> dict[str, AreaSnapshotRollup]:
    return {area: AreaSnapshotRollup() for area in sorted(areas)}


def accumulate_snapshots(
    issues: list[IssueModel],
    start: date,
    end: date,
    areas: Iterable[str],
    settings: RollupSettings,
) -> list[dict]:
    """Build one rollup record per (day, area) for every day in [start, end].

    Issue instants are parsed once up front and the day boundaries once per
    day, so the inner loop only compares datetimes.
    """
    area_list = sorted(areas)
    timelines = [build_timeline(issue, settings) for issue in issues]
    output: list[dict] = []
    days = 0
    for day in iter_days(start, end):
        snap = snapshot_day(day, settings)
        records = empty_records(area_list)
        for tl in timelines:
            apply_issue(tl, snap, records, settings)
        output.extend(record.to_record(snap.label, area) for area, record in records.items())
        days += 1
        logger.debug("Processed snapshot for date: %s", snap.label)
    if days:
        logger.info("Completed rollup processing for %s days from %s to %s", days, start, end)
    return output
