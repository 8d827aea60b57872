"""IssueService: orchestrates fetching and mapping issues from the GitHub CLI."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .config import (
    GH_BASE_FIELDS,
    GH_COMMENTS_JQ,
    GH_LABEL_FIELDS,
    GH_REACTION_FIELDS,
    RollupSettings,
)
from .gh_client import GitHubCLI
from .mappers import map_issue
from .models import IssueModel

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class IssueService:
    def __init__(self, api: GitHubCLI, settings: RollupSettings | None = None):
        self.api = api
        self.settings = settings or RollupSettings()

    # ------------------ Fetch Methods ------------------
    def fetch_comment_counts(self) -> dict[int, int]:
        """Comment counts via the REST endpoint; ``gh issue list`` has no plain count field."""
        rows = self.api.api_paginate(f"repos/{self.api.repo}/issues?state=all", jq=GH_COMMENTS_JQ)
        return {int(r["number"]): int(r.get("comments") or 0) for r in rows if isinstance(r, dict)}

    def fetch_raw(self, *, progress: ProgressCallback | None = None) -> list[dict[str, Any]]:
        """Fetch the four field groups and merge them by issue number."""
        if progress:
            progress("Fetching base issue info")
        base = self.api.list_issues(GH_BASE_FIELDS)
        if progress:
            progress("Fetching labels")
        labels = {i["number"]: i.get("labels") or [] for i in self.api.list_issues(GH_LABEL_FIELDS)}
        if progress:
            progress("Fetching comments")
        comments = self.fetch_comment_counts()
        if progress:
            progress("Fetching reactions")
        reactions = {
            i["number"]: i.get("reactionGroups") or [] for i in self.api.list_issues(GH_REACTION_FIELDS)
        }

        merged: list[dict[str, Any]] = []
        for issue in base:
            number = issue.get("number")
            merged.append(
                {
                    **issue,
                    "comments": comments.get(number, 0),
                    "reactionGroups": reactions.get(number, []),
                    "labels": labels.get(number, []),
                }
            )
        return merged

    def fetch_issues(self, *, progress: ProgressCallback | None = None) -> list[IssueModel]:
        raw = self.fetch_raw(progress=progress)
        issues = [map_issue(r, self.settings) for r in raw]
        logger.info("Found %s issues in %s", len(issues), self.api.repo)
        return issues
