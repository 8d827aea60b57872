"""Per-issue, per-day rollup predicates and counter updates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from issue_rollup.analytics.metrics.aging import age_in_days, get_age_bucket
from issue_rollup.analytics.metrics.normalize import parse_instant
from issue_rollup.analytics.rollup.areas import areas_to_update
from issue_rollup.core.config import UNKNOWN_BUCKET, RollupSettings
from issue_rollup.core.models import AreaSnapshotRollup, IssueModel


@dataclass(slots=True)
class IssueTimeline:
    """An issue with its instants parsed once, ready for the day loop."""

    issue: IssueModel
    created: datetime
    closed: datetime | None
    created_day: date
    areas: tuple[str, ...]
    untriaged: bool
    backlog_milestone: bool
    backlog_live: bool


@dataclass(slots=True)
class SnapshotDay:
    day: date
    label: str
    end: datetime
    window_start: datetime


@dataclass(slots=True, frozen=True)
class DailyFlags:
    is_open: bool
    is_triaged_open: bool
    is_untriaged: bool
    is_backlog: bool
    opened_in_window: bool
    closed_in_window: bool
    age_bucket: str


def build_timeline(issue: IssueModel, settings: RollupSettings) -> IssueTimeline:
    created = parse_instant(issue.created_at, issue_number=issue.number, field_name="createdAt")
    closed = (
        parse_instant(issue.closed_at, issue_number=issue.number, field_name="closedAt")
        if issue.closed_at
        else None
    )
    backlog_milestone = issue.milestone == settings.backlog_milestone
    return IssueTimeline(
        issue=issue,
        created=created.to_pydatetime(),
        closed=closed.to_pydatetime() if closed is not None else None,
        created_day=created.tz_convert(settings.tz).date(),
        areas=areas_to_update(issue, settings),
        untriaged=issue.milestone is None,
        backlog_milestone=backlog_milestone,
        # Live state: backlog reflects current membership on every day
        backlog_live=backlog_milestone and issue.is_open,
    )


def snapshot_day(day: date, settings: RollupSettings) -> SnapshotDay:
    tz = settings.tz
    end = tz.localize(datetime.combine(day, time.max))
    window_start = tz.localize(datetime.combine(day - timedelta(days=settings.window_days), time.max))
    return SnapshotDay(
        day=day,
        label=day.isoformat(),
        end=end,
        window_start=window_start,
    )


def evaluate_issue(
    issue: IssueModel | IssueTimeline,
    day: date | SnapshotDay,
    settings: RollupSettings,
) -> DailyFlags:
    """Evaluate every membership predicate for one issue on one snapshot day.

    Day boundaries are compared at the end of the snapshot day in the
    configured timezone; the age is a whole number of calendar days.
    """
    tl = issue if isinstance(issue, IssueTimeline) else build_timeline(issue, settings)
    snap = day if isinstance(day, SnapshotDay) else snapshot_day(day, settings)

    created, closed = tl.created, tl.closed
    is_open = created <= snap.end and (closed is None or closed > snap.end)
    return DailyFlags(
        is_open=is_open,
        is_triaged_open=is_open and not tl.backlog_milestone,
        is_untriaged=is_open and tl.untriaged,
        is_backlog=tl.backlog_live,
        opened_in_window=snap.window_start < created <= snap.end,
        closed_in_window=closed is not None and snap.window_start < closed <= snap.end,
        age_bucket=get_age_bucket(age_in_days(snap.day, tl.created_day)),
    )


def apply_issue(
    timeline: IssueTimeline,
    snap: SnapshotDay,
    records: dict[str, AreaSnapshotRollup],
    settings: RollupSettings,
) -> DailyFlags:
    """Increment the day's area records for one issue; returns the evaluated flags."""
    flags = evaluate_issue(timeline, snap, settings)
    for area in timeline.areas:
        record = records[area]
        if flags.is_triaged_open:
            record.open += 1
            if flags.age_bucket != UNKNOWN_BUCKET:
                setattr(record, flags.age_bucket, getattr(record, flags.age_bucket) + 1)
        if flags.is_backlog:
            record.backlog += 1
        if flags.is_untriaged:
            record.untriaged += 1
        if flags.opened_in_window:
            record.opened_last_30d += 1
        if flags.closed_in_window:
            record.closed_last_30d += 1
    return flags
