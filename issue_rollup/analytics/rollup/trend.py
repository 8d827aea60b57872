"""Trailing monthly opened/closed trend per area."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from issue_rollup.analytics.rollup.areas import areas_to_update, unique_areas
from issue_rollup.analytics.rollup.snapshot import today_in
from issue_rollup.core.config import RollupSettings
from issue_rollup.core.models import IssueModel


def _to_month(values: pd.Series, tz) -> pd.Series:
    ts = pd.to_datetime(values, utc=True, errors="raise")
    return ts.dt.tz_convert(tz).dt.tz_localize(None).dt.to_period("M")


def _counts(frame: pd.DataFrame, column: str, index: pd.MultiIndex) -> pd.Series:
    if frame.empty:
        return pd.Series(0, index=index, dtype="int64")
    counts = frame.groupby([column, "area"]).size().rename_axis(["month", "area"])
    return counts.reindex(index, fill_value=0).astype("int64")


def monthly_trend(
    issues: list[IssueModel],
    settings: RollupSettings,
    *,
    now: datetime | None = None,
) -> list[dict]:
    """Opened and closed counts per (month, area) for the trailing months.

    Covers the current month plus ``trend_months - 1`` previous ones; every
    (month, area) pair is present, zero filled.
    """
    tz = settings.tz
    today = today_in(settings, now)
    current = pd.Period(year=today.year, month=today.month, freq="M")
    months = pd.period_range(end=current, periods=settings.trend_months, freq="M")
    areas = sorted(unique_areas(issues, settings))
    index = pd.MultiIndex.from_product([months, areas], names=["month", "area"])

    rows = [
        {"area": area, "created": issue.created_at, "closed": issue.closed_at}
        for issue in issues
        for area in areas_to_update(issue, settings)
    ]
    df = pd.DataFrame(rows, columns=["area", "created", "closed"])
    opened = df.copy()
    opened["month"] = _to_month(opened["created"], tz)
    closed = df.dropna(subset=["closed"]).copy()
    closed["month"] = _to_month(closed["closed"], tz)

    trend = pd.DataFrame(
        {
            "opened": _counts(opened, "month", index),
            "closed": _counts(closed, "month", index),
        },
        index=index,
    ).reset_index()
    trend["month"] = trend["month"].astype(str)
    return trend[["month", "area", "opened", "closed"]].to_dict("records")
