"""Report feature: combined report document and the file pipelines around it."""

from issue_rollup.features.report.context import build_report
from issue_rollup.features.report.pipeline import (
    ExtractPaths,
    output_paths,
    run_bootstrap,
    run_extract,
    run_incremental,
)

__all__ = [
    "ExtractPaths",
    "build_report",
    "output_paths",
    "run_bootstrap",
    "run_extract",
    "run_incremental",
]
