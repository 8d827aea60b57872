import pytest

from issue_rollup.core.config import CSV_COLUMNS, RollupSettings
from issue_rollup.core.mappers import (
    issue_from_record,
    issue_to_record,
    issues_to_dataframe,
    map_issue,
    map_priority,
    map_type,
    total_reactions,
)
from issue_rollup.core.models import MalformedIssueError

SETTINGS = RollupSettings()


def _raw(**overrides):
    raw = {
        "number": 42,
        "title": "Crash on save",
        "author": {"login": "octocat"},
        "state": "OPEN",
        "createdAt": "2024-01-01T10:00:00Z",
        "closedAt": None,
        "url": "https://github.com/o/r/issues/42",
        "milestone": {"title": "Backlog"},
        "labels": [{"name": "Area - Editor"}, {"name": "Area - UI"}, {"name": "Bug"}, {"name": "Pri: 2"}],
        "reactionGroups": [{"users": {"totalCount": 3}}, {"users": {"totalCount": 2}}, {}],
        "comments": 7,
    }
    raw.update(overrides)
    return raw


def test_map_issue_extracts_areas_priority_type_reactions():
    issue = map_issue(_raw(), SETTINGS)
    assert issue.number == 42
    assert issue.author == "octocat"
    assert issue.areas == ["Editor", "UI"]
    assert issue.priority == 2
    assert issue.type == "Bug"
    assert issue.total_reactions == 5
    assert issue.comment_count == 7
    assert issue.milestone == "Backlog"
    assert issue.has_area and issue.has_type


def test_map_issue_defaults_when_fields_missing():
    issue = map_issue(_raw(labels=[], milestone=None, reactionGroups=None, comments=None, author=None), SETTINGS)
    assert issue.areas == []
    assert issue.priority == -1
    assert issue.type is None
    assert issue.total_reactions == 0
    assert issue.comment_count == 0
    assert issue.milestone is None
    assert issue.author is None


def test_map_type_variants():
    assert map_type(["Bug", "Enhancement"], SETTINGS) == "Both Bug and Feature"
    assert map_type(["Enhancement"], SETTINGS) == "Feature Request"
    assert map_type(["question"], SETTINGS) is None


def test_map_priority_unparsable_is_sentinel():
    assert map_priority(["Pri: high"], "Pri:") == -1
    assert map_priority(["Pri:1", "Pri: 3"], "Pri:") == 1


def test_total_reactions_empty():
    assert total_reactions(None) == 0
    assert total_reactions([]) == 0


def test_record_round_trip_keeps_fields():
    issue = map_issue(_raw(), SETTINGS)
    record = issue_to_record(issue)
    assert record["createdAt"] == "2024-01-01T10:00:00Z"
    assert record["hasArea"] is True
    assert issue_from_record(record) == issue


def test_issue_from_record_requires_core_fields():
    with pytest.raises(MalformedIssueError, match="createdAt"):
        issue_from_record({"number": 1, "state": "OPEN"})
    with pytest.raises(MalformedIssueError):
        issue_from_record(["not", "a", "dict"])


@pytest.mark.parametrize("areas", [[None], ["UI", ""], [3]])
def test_issue_from_record_rejects_invalid_areas(areas):
    record = {"number": 1, "state": "OPEN", "createdAt": "2024-01-01T00:00:00Z", "areas": areas}
    with pytest.raises(MalformedIssueError, match="invalid area"):
        issue_from_record(record)


def test_issues_to_dataframe_one_row_per_area():
    with_areas = map_issue(_raw(), SETTINGS)
    without = map_issue(_raw(number=43, labels=[]), SETTINGS)
    df = issues_to_dataframe([with_areas, without])
    assert list(df.columns) == list(CSV_COLUMNS)
    assert len(df) == 3
    assert df["Area"].tolist() == ["Editor", "UI", ""]
    assert df["Number"].tolist() == [42, 42, 43]
