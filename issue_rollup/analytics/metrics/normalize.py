"""Issue timestamp canonicalization and derived flags."""

from __future__ import annotations

import logging
import re
from datetime import datetime

import pandas as pd

from issue_rollup.core.models import IssueModel, MalformedIssueError

logger = logging.getLogger(__name__)

# Calendar date followed by a time of day; bare dates and keywords are rejected
_ISO_INSTANT = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


def parse_instant(value, *, issue_number=None, field_name: str = "timestamp") -> pd.Timestamp:
    """Parse a timestamp string into a UTC ``pd.Timestamp``.

    Unlike the lenient ``errors="coerce"`` parsing used for display, a bad value
    here raises: every snapshot day depends on these instants.
    """
    label = f"Issue #{issue_number}" if issue_number is not None else "Issue"
    if value is None or value == "":
        raise MalformedIssueError(f"{label}: missing {field_name}")
    if not isinstance(value, (str, datetime)):
        raise MalformedIssueError(f"{label}: {field_name} must be a string, got {type(value).__name__}")
    if isinstance(value, str) and not _ISO_INSTANT.match(value.strip()):
        raise MalformedIssueError(f"{label}: {field_name} {value!r} is not an ISO-8601 instant")
    try:
        if isinstance(value, str):
            ts = pd.to_datetime(value.strip(), utc=True, format="ISO8601")
        else:
            ts = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError) as exc:
        raise MalformedIssueError(f"{label}: malformed {field_name} {value!r}") from exc
    if ts is None or pd.isna(ts):
        raise MalformedIssueError(f"{label}: malformed {field_name} {value!r}")
    return ts


def canonical_timestamp(ts: pd.Timestamp) -> str:
    """Render a UTC instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return ts.tz_convert("UTC").strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def normalize_issue_dates(issues: list[IssueModel]) -> list[IssueModel]:
    """Rewrite created/closed timestamps in canonical UTC form (in place).

    Also derives ``has_area`` and ``has_type``. Returns the same list.
    """
    for issue in issues:
        created = parse_instant(issue.created_at, issue_number=issue.number, field_name="createdAt")
        issue.created_at = canonical_timestamp(created)
        if issue.closed_at:
            closed = parse_instant(issue.closed_at, issue_number=issue.number, field_name="closedAt")
            issue.closed_at = canonical_timestamp(closed)
        else:
            issue.closed_at = None
        issue.has_area = bool(issue.areas)
        issue.has_type = issue.type is not None
    logger.debug("Normalized timestamps for %s issues", len(issues))
    return issues
