"""JSON and CSV readers/writers for issue lists and report documents."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from .mappers import issue_from_record, issue_to_record, issues_to_dataframe
from .models import IssueModel, MalformedIssueError

logger = logging.getLogger(__name__)


def _require_file(path: Path, label: str) -> None:
    if not path.is_file():
        raise FileNotFoundError(f"{label} not found: {path}")


def read_json(path: str | Path, *, label: str = "Input file", encoding: str = "utf-8") -> Any:
    p = Path(path)
    _require_file(p, label)
    try:
        return json.loads(p.read_text(encoding=encoding))
    except json.JSONDecodeError as exc:
        raise MalformedIssueError(f"{p}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc


def write_json(path: str | Path, payload: Any, *, encoding: str = "utf-8") -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding=encoding)
    return p


def load_issues(path: str | Path, *, encoding: str = "utf-8") -> list[IssueModel]:
    data = read_json(path, label="Input file", encoding=encoding)
    if not isinstance(data, list):
        raise MalformedIssueError(f"{path}: expected a JSON list of issues")
    issues = [issue_from_record(r) for r in data]
    logger.info("Loaded %s issues from %s", len(issues), path)
    return issues


def save_issues(path: str | Path, issues: list[IssueModel], *, encoding: str = "utf-8") -> Path:
    out = write_json(path, [issue_to_record(i) for i in issues], encoding=encoding)
    logger.info("All issues saved to %s", out)
    return out


def load_report(path: str | Path, *, encoding: str = "utf-8") -> dict[str, Any]:
    data = read_json(path, label="Charts file", encoding=encoding)
    if not isinstance(data, dict):
        raise MalformedIssueError(f"{path}: expected a JSON object with a 'charts' list")
    return data


def save_issues_csv(path: str | Path, issues: list[IssueModel], *, encoding: str = "utf-8") -> Path:
    """Write one fully quoted row per issue x area; nulls become empty fields."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    df: pd.DataFrame = issues_to_dataframe(issues)
    df.to_csv(p, index=False, quoting=csv.QUOTE_ALL, na_rep="", encoding=encoding)
    logger.info("CSV file written to %s", p)
    return p
