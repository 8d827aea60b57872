"""Convenience launcher for the rollup CLI.

Usage:
  python run_rollup.py bootstrap --input owner-repo-all-issues.json --output report.json
  python run_rollup.py incremental --input owner-repo-all-issues.json --charts report.json
"""

from issue_rollup.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
