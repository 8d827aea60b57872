"""Mapping raw ``gh`` issue JSON and stored records into IssueModel instances."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from .config import CSV_COLUMNS, NO_PRIORITY, TYPE_BOTH, TYPE_BUG, TYPE_FEATURE, RollupSettings
from .models import IssueModel, MalformedIssueError


def total_reactions(reaction_groups: list[dict] | None) -> int:
    if not reaction_groups:
        return 0
    total = 0
    for group in reaction_groups:
        users = (group or {}).get("users") or {}
        total += int(users.get("totalCount") or 0)
    return total


def map_priority(labels: Iterable[str], prefix: str) -> int:
    for label in labels:
        if label.startswith(prefix):
            try:
                return int(label[len(prefix) :].strip())
            except ValueError:
                return NO_PRIORITY
    return NO_PRIORITY


def map_type(labels: Iterable[str], settings: RollupSettings) -> str | None:
    names = set(labels)
    is_bug = settings.bug_label in names
    is_feature = settings.feature_label in names
    if is_bug and is_feature:
        return TYPE_BOTH
    if is_bug:
        return TYPE_BUG
    if is_feature:
        return TYPE_FEATURE
    return None


def map_areas(labels: Iterable[str], prefix: str) -> list[str]:
    return [label[len(prefix) :] for label in labels if label.startswith(prefix)]


def map_issue(raw: dict[str, Any], settings: RollupSettings) -> IssueModel:
    """Map one merged ``gh`` issue payload (base fields + labels + reactions + comments)."""
    labels = [lbl.get("name", "") for lbl in raw.get("labels") or [] if isinstance(lbl, dict)]
    issue_type = map_type(labels, settings)
    areas = map_areas(labels, settings.area_label_prefix)
    return IssueModel(
        number=raw.get("number"),
        title=raw.get("title"),
        author=(raw.get("author") or {}).get("login") if raw.get("author") else None,
        state=raw.get("state"),
        created_at=raw.get("createdAt"),
        closed_at=raw.get("closedAt") or None,
        url=raw.get("url"),
        areas=areas,
        priority=map_priority(labels, settings.priority_label_prefix),
        type=issue_type,
        total_reactions=total_reactions(raw.get("reactionGroups")),
        comment_count=int(raw.get("comments") or 0),
        milestone=(raw.get("milestone") or {}).get("title") if raw.get("milestone") else None,
        has_area=bool(areas),
        has_type=issue_type is not None,
    )


_REQUIRED_RECORD_FIELDS = ("number", "state", "createdAt")


def issue_from_record(record: dict[str, Any]) -> IssueModel:
    """Rebuild an IssueModel from an extracted issues JSON record."""
    if not isinstance(record, dict):
        raise MalformedIssueError(f"Issue record must be an object, got {type(record).__name__}")
    missing = [name for name in _REQUIRED_RECORD_FIELDS if record.get(name) is None]
    if missing:
        raise MalformedIssueError(
            f"Issue #{record.get('number', '?')} is missing required fields: {', '.join(missing)}"
        )
    areas = record.get("areas") or []
    if not isinstance(areas, list):
        raise MalformedIssueError(f"Issue #{record['number']}: 'areas' must be a list")
    bad = [a for a in areas if not isinstance(a, str) or not a.strip()]
    if bad:
        raise MalformedIssueError(f"Issue #{record['number']}: invalid area entries {bad!r}")
    return IssueModel(
        number=int(record["number"]),
        title=record.get("title"),
        author=record.get("author"),
        state=record["state"],
        created_at=record["createdAt"],
        closed_at=record.get("closedAt") or None,
        url=record.get("url"),
        areas=list(areas),
        priority=int(record["priority"]) if record.get("priority") is not None else NO_PRIORITY,
        type=record.get("type"),
        total_reactions=int(record.get("totalReactions") or 0),
        comment_count=int(record.get("commentCount") or 0),
        milestone=record.get("milestone") or None,
        has_area=bool(record.get("hasArea", bool(areas))),
        has_type=bool(record.get("hasType", record.get("type") is not None)),
    )


def issue_to_record(issue: IssueModel) -> dict[str, Any]:
    return {
        "author": issue.author,
        "closedAt": issue.closed_at,
        "createdAt": issue.created_at,
        "number": issue.number,
        "state": issue.state,
        "url": issue.url,
        "title": issue.title,
        "areas": list(issue.areas),
        "priority": issue.priority,
        "type": issue.type,
        "hasArea": issue.has_area,
        "hasType": issue.has_type,
        "totalReactions": issue.total_reactions,
        "commentCount": issue.comment_count,
        "milestone": issue.milestone,
    }


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    """Flatten issues into one row per issue x area (empty Area when none)."""
    rows = []
    for i in issues:
        for area in i.areas or [""]:
            rows.append(
                {
                    "Number": i.number,
                    "Title": i.title,
                    "Author": i.author,
                    "State": i.state,
                    "CreatedAt": i.created_at,
                    "ClosedAt": i.closed_at,
                    "Area": area,
                    "Type": i.type,
                    "Reactions": i.total_reactions,
                    "URL": i.url,
                    "Comments": i.comment_count,
                    "Priority": i.priority,
                    "Milestone": i.milestone,
                }
            )
    return pd.DataFrame(rows, columns=list(CSV_COLUMNS))
