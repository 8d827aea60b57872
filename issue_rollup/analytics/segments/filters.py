"""Issue list selectors for the report (top-N and triage gap lists)."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from issue_rollup.core.config import OPEN_STATE, SELECTOR_FIELDS, RollupSettings
from issue_rollup.core.mappers import issue_to_record
from issue_rollup.core.models import IssueModel


def issues_frame(issues: Iterable[IssueModel]) -> pd.DataFrame:
    records = [issue_to_record(i) for i in issues]
    if not records:
        return pd.DataFrame(columns=list(SELECTOR_FIELDS) + ["state"])
    return pd.DataFrame.from_records(records)


def _open(df: pd.DataFrame) -> pd.Series:
    return df["state"].astype(str).str.upper() == OPEN_STATE


def _project(df: pd.DataFrame) -> list[dict]:
    if df.empty:
        return []
    out = df[list(SELECTOR_FIELDS)].astype(object)
    return out.where(out.notna(), None).to_dict("records")


def _top_by(issues: Iterable[IssueModel], column: str, limit: int) -> list[dict]:
    df = issues_frame(issues)
    if df.empty:
        return []
    mask = _open(df) & (pd.to_numeric(df[column], errors="coerce").fillna(0) > 0)
    # mergesort is stable: equal counts keep their input order
    ranked = df[mask].sort_values(column, ascending=False, kind="mergesort").head(limit)
    return _project(ranked)


def most_reacted(issues: Iterable[IssueModel], settings: RollupSettings) -> list[dict]:
    return _top_by(issues, "totalReactions", settings.top_n)


def most_commented(issues: Iterable[IssueModel], settings: RollupSettings) -> list[dict]:
    return _top_by(issues, "commentCount", settings.top_n)


def no_area(issues: Iterable[IssueModel], settings: RollupSettings) -> list[dict]:
    df = issues_frame(issues)
    if df.empty:
        return []
    return _project(df[_open(df) & (df["areas"].apply(len) == 0)])


def no_milestone(issues: Iterable[IssueModel], settings: RollupSettings) -> list[dict]:
    df = issues_frame(issues)
    if df.empty:
        return []
    return _project(df[_open(df) & df["milestone"].isna()])


def backlog(issues: Iterable[IssueModel], settings: RollupSettings) -> list[dict]:
    df = issues_frame(issues)
    if df.empty:
        return []
    return _project(df[_open(df) & (df["milestone"] == settings.backlog_milestone)])
