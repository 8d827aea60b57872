"""GitHub CLI wrapper (``gh issue list`` JSON + ``gh api --paginate`` streams)."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from .config import GH_EXECUTABLE, GH_ISSUE_LIMIT, GH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class GhCommandError(RuntimeError):
    """The ``gh`` process failed or produced output that is not JSON."""


def parse_json_stream(text: str) -> list[Any]:
    """Parse concatenated JSON arrays as emitted by ``gh api --paginate -q``.

    Each page is printed as its own array, so the output is ``[...][...]`` or
    one array per line. Items of every array are flattened into one list.
    """
    decoder = json.JSONDecoder()
    results: list[Any] = []
    idx = 0
    length = len(text)
    while True:
        while idx < length and text[idx].isspace():
            idx += 1
        if idx >= length:
            break
        try:
            value, idx = decoder.raw_decode(text, idx)
        except json.JSONDecodeError as exc:
            raise GhCommandError(f"Failed to parse JSON stream at offset {idx}: {exc.msg}") from exc
        if isinstance(value, list):
            results.extend(value)
        else:
            results.append(value)
    return results


class GitHubCLI:
    def __init__(self, repo: str, executable: str = GH_EXECUTABLE, timeout_s: int = GH_TIMEOUT_SECONDS):
        if not repo or "/" not in repo:
            raise ValueError(f"Repository must look like 'owner/name', got {repo!r}")
        self.repo = repo
        self.executable = executable
        self.timeout_s = timeout_s

    def _run(self, args: list[str]) -> str:
        cmd = [self.executable, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout_s)
        except FileNotFoundError as exc:
            raise GhCommandError(f"{self.executable!r} not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise GhCommandError(f"Command timed out after {self.timeout_s}s: {' '.join(cmd)}") from exc
        if proc.returncode != 0:
            raise GhCommandError(f"Command failed ({proc.returncode}): {proc.stderr.strip()[:500]}")
        return proc.stdout

    def list_issues(self, fields: str) -> list[dict[str, Any]]:
        out = self._run(
            [
                "issue",
                "list",
                "--limit",
                str(GH_ISSUE_LIMIT),
                "--state",
                "all",
                "--json",
                fields,
                "--repo",
                self.repo,
            ]
        )
        try:
            data = json.loads(out)
        except json.JSONDecodeError as exc:
            raise GhCommandError(f"Failed to parse JSON: {exc.msg}") from exc
        if not isinstance(data, list):
            raise GhCommandError(f"Expected a JSON list from gh issue list, got {type(data).__name__}")
        return data

    def api_paginate(self, endpoint: str, jq: str | None = None) -> list[Any]:
        args = ["api", "--paginate", endpoint]
        if jq:
            args.extend(["-q", jq])
        return parse_json_stream(self._run(args))
