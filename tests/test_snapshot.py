from collections import Counter
from datetime import UTC, date, datetime

from issue_rollup.analytics.metrics.normalize import normalize_issue_dates
from issue_rollup.analytics.rollup.areas import areas_to_update, unique_areas
from issue_rollup.analytics.rollup.snapshot import (
    accumulate_snapshots,
    iter_days,
    snapshot_bounds,
)
from issue_rollup.core.config import AGE_BUCKETS, ROLLUP_COUNTERS, RollupSettings
from issue_rollup.core.models import IssueModel

SETTINGS = RollupSettings()
ALL = SETTINGS.all_areas_label
BUCKETS = [key for key, _, _ in AGE_BUCKETS]


def _sample_issues():
    rows = [
        ("2024-01-01T08:00:00Z", None, ["UI"], None, "OPEN"),
        ("2024-01-03T08:00:00Z", "2024-01-20T08:00:00Z", ["Backend"], "v1", "CLOSED"),
        ("2024-01-05T08:00:00Z", None, [], "Backlog", "OPEN"),
        ("2024-01-10T08:00:00Z", None, ["UI", "Backend"], "v2", "OPEN"),
        ("2024-02-01T08:00:00Z", "2024-02-02T08:00:00Z", ["Docs"], None, "CLOSED"),
    ]
    issues = [
        IssueModel(
            number=i,
            title=f"Issue {i}",
            author="octocat",
            state=state,
            created_at=created,
            closed_at=closed,
            url=f"https://github.com/o/r/issues/{i}",
            areas=areas,
            milestone=milestone,
        )
        for i, (created, closed, areas, milestone, state) in enumerate(rows, start=1)
    ]
    return normalize_issue_dates(issues)


def _by_key(charts):
    return {(r["date"], r["area"]): r for r in charts}


def test_unique_areas_includes_synthetic_label():
    areas = unique_areas(_sample_issues(), SETTINGS)
    assert areas == {"UI", "Backend", "Docs", ALL}


def test_areas_to_update_appends_all_label():
    issue = _sample_issues()[3]
    assert areas_to_update(issue, SETTINGS) == ("UI", "Backend", ALL)


def test_snapshot_bounds_from_earliest_issue_to_today():
    now = datetime(2024, 2, 10, 15, 0, tzinfo=UTC)
    start, end = snapshot_bounds(_sample_issues(), SETTINGS, now)
    assert start == date(2024, 1, 1)
    assert end == date(2024, 2, 10)


def test_snapshot_bounds_without_issues_is_today():
    now = datetime(2024, 2, 10, 15, 0, tzinfo=UTC)
    assert snapshot_bounds([], SETTINGS, now) == (date(2024, 2, 10), date(2024, 2, 10))


def test_one_record_per_day_and_area():
    issues = _sample_issues()
    areas = unique_areas(issues, SETTINGS)
    charts = accumulate_snapshots(issues, date(2024, 1, 1), date(2024, 2, 10), areas, SETTINGS)
    days = list(iter_days(date(2024, 1, 1), date(2024, 2, 10)))
    assert len(charts) == len(days) * len(areas)
    counts = Counter((r["date"], r["area"]) for r in charts)
    assert set(counts.values()) == {1}


def test_bucket_sum_matches_open_count():
    issues = _sample_issues()
    charts = accumulate_snapshots(
        issues, date(2023, 12, 30), date(2024, 8, 1), unique_areas(issues, SETTINGS), SETTINGS
    )
    for record in charts:
        assert sum(record[b] for b in BUCKETS) == record["open"], record


def test_all_area_counts_every_open_issue():
    issues = _sample_issues()
    charts = _by_key(
        accumulate_snapshots(issues, date(2024, 1, 1), date(2024, 2, 10), unique_areas(issues, SETTINGS), SETTINGS)
    )
    jan_12 = charts[("2024-01-12", ALL)]
    # issues 1, 2, 4 open and triaged; 3 is backlog
    assert jan_12["open"] == 3
    assert jan_12["backlog"] == 1
    assert jan_12["untriaged"] == 1
    assert jan_12["opened_last_30d"] == 4

    assert charts[("2024-01-12", "UI")]["open"] == 2
    assert charts[("2024-01-12", "Backend")]["open"] == 2
    assert charts[("2024-01-12", "Docs")]["open"] == 0


def test_closed_issue_drops_out_and_counts_closed_window():
    issues = _sample_issues()
    charts = _by_key(
        accumulate_snapshots(issues, date(2024, 1, 1), date(2024, 2, 10), unique_areas(issues, SETTINGS), SETTINGS)
    )
    assert charts[("2024-01-19", "Backend")]["open"] == 2
    assert charts[("2024-01-20", "Backend")]["open"] == 1
    assert charts[("2024-01-20", "Backend")]["closed_last_30d"] == 1
    assert charts[("2024-02-01", "Docs")]["open"] == 1
    assert charts[("2024-02-02", "Docs")]["open"] == 0


def test_zero_initialized_records_before_any_issue():
    issues = _sample_issues()
    charts = _by_key(
        accumulate_snapshots(issues, date(2024, 1, 1), date(2024, 1, 1), unique_areas(issues, SETTINGS), SETTINGS)
    )
    assert all(charts[("2024-01-01", "Docs")][c] == 0 for c in ROLLUP_COUNTERS)
