"""Central configuration, constants, and the explicit settings struct."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, fields, replace
from pathlib import Path

import pytz
import yaml

# =============================================================================
# GitHub CLI Settings
# =============================================================================
GH_EXECUTABLE = "gh"
GH_ISSUE_LIMIT = 999999
GH_TIMEOUT_SECONDS = 600

# Field groups fetched with separate `gh issue list` calls and merged by number
GH_BASE_FIELDS = "number,title,author,state,createdAt,closedAt,url,milestone"
GH_LABEL_FIELDS = "number,labels"
GH_REACTION_FIELDS = "number,reactionGroups"
GH_COMMENTS_JQ = "[.[] | select(.pull_request | not) | {number, comments}]"

# =============================================================================
# Issue Classification
# =============================================================================
OPEN_STATE = "OPEN"
NO_PRIORITY = -1
TYPE_BUG = "Bug"
TYPE_FEATURE = "Feature Request"
TYPE_BOTH = "Both Bug and Feature"

# =============================================================================
# Rollup Configuration
# =============================================================================
UNKNOWN_BUCKET = "unknown"

# Inclusive whole-day ranges; the last bucket is unbounded above.
AGE_BUCKETS: Sequence[tuple[str, int, float]] = (
    ("bucket_0_7", 0, 7),
    ("bucket_8_30", 8, 30),
    ("bucket_31_90", 31, 90),
    ("bucket_91_180", 91, 180),
    ("bucket_180_plus", 181, float("inf")),
)

ROLLUP_COUNTERS: Sequence[str] = (
    "open",
    "untriaged",
    "backlog",
    "opened_last_30d",
    "closed_last_30d",
    *(key for key, _, _ in AGE_BUCKETS),
)

MERGE_APPEND = "append"
MERGE_UPSERT = "upsert"
MERGE_POLICIES: frozenset[str] = frozenset({MERGE_APPEND, MERGE_UPSERT})

# =============================================================================
# Output Columns
# =============================================================================
CSV_COLUMNS: Sequence[str] = (
    "Number",
    "Title",
    "Author",
    "State",
    "CreatedAt",
    "ClosedAt",
    "Area",
    "Type",
    "Reactions",
    "URL",
    "Comments",
    "Priority",
    "Milestone",
)

# Reduced issue shape used by the report selector lists
SELECTOR_FIELDS: Sequence[str] = (
    "number",
    "title",
    "url",
    "author",
    "createdAt",
    "areas",
    "milestone",
    "totalReactions",
    "commentCount",
)


@dataclass(slots=True)
class RollupSettings:
    all_areas_label: str = "Area - All"
    backlog_milestone: str = "Backlog"
    area_label_prefix: str = "Area - "
    priority_label_prefix: str = "Pri:"
    bug_label: str = "Bug"
    feature_label: str = "Enhancement"
    window_days: int = 30
    top_n: int = 100
    timezone: str = "UTC"
    merge_policy: str = MERGE_APPEND
    trend_months: int = 6
    encoding: str = "utf-8"

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    def validate(self) -> RollupSettings:
        if self.merge_policy not in MERGE_POLICIES:
            raise ValueError(
                f"Unknown merge policy {self.merge_policy!r}; expected one of {sorted(MERGE_POLICIES)}"
            )
        for name in ("window_days", "top_n", "trend_months"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        try:
            pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone {self.timezone!r}") from exc
        if not self.all_areas_label:
            raise ValueError("all_areas_label must not be empty")
        return self


def load_settings(path: str | Path | None = None, **overrides) -> RollupSettings:
    """Build settings from an optional YAML file plus keyword overrides.

    The YAML document keeps its options under a ``rollup`` mapping::

        rollup:
          backlog_milestone: Backlog
          timezone: America/Santiago

    A missing file yields the defaults; unknown keys raise ``ValueError``.
    """
    settings = RollupSettings()
    if path is not None:
        yaml_path = Path(path)
        if yaml_path.exists():
            data = yaml.safe_load(yaml_path.read_text(encoding="utf-8")) or {}
            section = data.get("rollup", {}) if isinstance(data, dict) else None
            if not isinstance(section, dict):
                raise ValueError(f"{yaml_path}: expected a 'rollup' mapping")
            settings = _apply(settings, section, source=str(yaml_path))
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        settings = _apply(settings, overrides, source="overrides")
    return settings.validate()


def _apply(settings: RollupSettings, values: dict, *, source: str) -> RollupSettings:
    known = {f.name for f in fields(RollupSettings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"{source}: unknown settings {', '.join(unknown)}")
    return replace(settings, **values)
