from issue_rollup.core.config import GH_BASE_FIELDS, GH_LABEL_FIELDS, GH_REACTION_FIELDS, RollupSettings
from issue_rollup.core.gh_client import GitHubCLI
from issue_rollup.core.service import IssueService


class DummyCLI(GitHubCLI):
    def __init__(self):
        self.repo = "o/r"

    def list_issues(self, fields):
        if fields == GH_BASE_FIELDS:
            return [
                {
                    "number": 1,
                    "title": "First",
                    "author": {"login": "alice"},
                    "state": "OPEN",
                    "createdAt": "2024-01-01T00:00:00Z",
                    "closedAt": None,
                    "url": "https://github.com/o/r/issues/1",
                    "milestone": None,
                },
                {
                    "number": 2,
                    "title": "Second",
                    "author": {"login": "bob"},
                    "state": "CLOSED",
                    "createdAt": "2024-01-02T00:00:00Z",
                    "closedAt": "2024-01-03T00:00:00Z",
                    "url": "https://github.com/o/r/issues/2",
                    "milestone": {"title": "v1"},
                },
            ]
        if fields == GH_LABEL_FIELDS:
            return [{"number": 1, "labels": [{"name": "Area - UI"}, {"name": "Enhancement"}]}]
        if fields == GH_REACTION_FIELDS:
            return [{"number": 2, "reactionGroups": [{"users": {"totalCount": 4}}]}]
        raise AssertionError(fields)

    def api_paginate(self, endpoint, jq=None):
        assert endpoint == "repos/o/r/issues?state=all"
        return [{"number": 1, "comments": 3}]


def test_fetch_issues_merges_field_groups():
    messages = []
    issues = IssueService(DummyCLI(), RollupSettings()).fetch_issues(progress=messages.append)
    by_number = {i.number: i for i in issues}

    assert by_number[1].areas == ["UI"]
    assert by_number[1].type == "Feature Request"
    assert by_number[1].comment_count == 3
    assert by_number[1].total_reactions == 0
    assert by_number[2].areas == []
    assert by_number[2].total_reactions == 4
    assert by_number[2].comment_count == 0
    assert by_number[2].milestone == "v1"
    assert len(messages) == 4
