"""Domain data models for GitHub issues and per-area snapshot rollups."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import OPEN_STATE, ROLLUP_COUNTERS


class MalformedIssueError(ValueError):
    """An issue record is missing a required field or carries a bad timestamp."""


@dataclass(slots=True)
class IssueModel:
    number: int
    title: str | None
    author: str | None
    state: str
    created_at: str
    closed_at: str | None
    url: str | None
    areas: list[str] = field(default_factory=list)
    priority: int = -1
    type: str | None = None
    total_reactions: int = 0
    comment_count: int = 0
    milestone: str | None = None

    # Derived flags (populated by the normalizer)
    has_area: bool = False
    has_type: bool = False

    @property
    def is_open(self) -> bool:
        """Live lifecycle state, independent of any snapshot day."""
        return str(self.state or "").upper() == OPEN_STATE


@dataclass(slots=True)
class AreaSnapshotRollup:
    open: int = 0
    untriaged: int = 0
    backlog: int = 0
    opened_last_30d: int = 0
    closed_last_30d: int = 0
    bucket_0_7: int = 0
    bucket_8_30: int = 0
    bucket_31_90: int = 0
    bucket_91_180: int = 0
    bucket_180_plus: int = 0

    def to_record(self, snapshot_date: str, area: str) -> dict:
        counters = {name: getattr(self, name) for name in ROLLUP_COUNTERS}
        return {"date": snapshot_date, "area": area, **counters}
