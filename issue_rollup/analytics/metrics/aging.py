"""Age bucket computation (pure functions)."""

from __future__ import annotations

from datetime import date

from issue_rollup.core.config import AGE_BUCKETS, UNKNOWN_BUCKET


def age_in_days(snapshot_day: date, created_day: date) -> int:
    """Whole calendar days between the creation day and the snapshot day."""
    return snapshot_day.toordinal() - created_day.toordinal()


def get_age_bucket(age_days: int) -> str:
    """Return the bucket key whose inclusive range contains ``age_days``.

    Negative ages (issue created after the snapshot day) map to ``"unknown"``.

    Examples
    --------
    >>> get_age_bucket(4)
    'bucket_0_7'
    >>> get_age_bucket(181)
    'bucket_180_plus'
    """
    for key, low, high in AGE_BUCKETS:
        if low <= age_days <= high:
            return key
    return UNKNOWN_BUCKET
