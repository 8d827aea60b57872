"""Assemble the combined report document (no file I/O)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from issue_rollup.analytics.rollup.trend import monthly_trend
from issue_rollup.analytics.segments import filters as seg
from issue_rollup.core.config import RollupSettings
from issue_rollup.core.models import IssueModel


def build_report(
    issues: list[IssueModel],
    charts: list[dict],
    settings: RollupSettings,
    *,
    include_trend: bool = False,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the report document from normalized issues and a rollup series.

    Parameters
    ----------
    issues : list[IssueModel]
        Issues with canonical timestamps.
    charts : list[dict]
        Full rollup time series (one record per date and area).
    settings : RollupSettings
        Labels, sentinels and limits used by the selectors.
    include_trend : bool
        Add the ``MonthlyTrend`` list when True.
    now : datetime, optional
        Reference time for the trend window (defaults to the current time).

    Returns
    -------
    dict
        ``mostReactedIssues``, ``mostCommentedIssues``, ``noAreaIssues``,
        ``noMilestoneIssues``, ``backlogIssues``, ``charts`` and optionally
        ``MonthlyTrend``.
    """
    report: dict[str, Any] = {
        "mostReactedIssues": seg.most_reacted(issues, settings),
        "mostCommentedIssues": seg.most_commented(issues, settings),
        "noAreaIssues": seg.no_area(issues, settings),
        "noMilestoneIssues": seg.no_milestone(issues, settings),
        "backlogIssues": seg.backlog(issues, settings),
        "charts": charts,
    }
    if include_trend:
        report["MonthlyTrend"] = monthly_trend(issues, settings, now=now)
    return report
