"""Area (category) index for rollups."""

from __future__ import annotations

from collections.abc import Iterable

from issue_rollup.core.config import RollupSettings
from issue_rollup.core.models import IssueModel


def unique_areas(issues: Iterable[IssueModel], settings: RollupSettings) -> set[str]:
    """Every area attached to any issue, plus the synthetic all-areas label."""
    areas = {area for issue in issues for area in issue.areas}
    areas.add(settings.all_areas_label)
    return areas


def areas_to_update(issue: IssueModel, settings: RollupSettings) -> tuple[str, ...]:
    # dict.fromkeys keeps label order while dropping duplicates
    return tuple(dict.fromkeys([*issue.areas, settings.all_areas_label]))
