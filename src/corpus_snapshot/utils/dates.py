"""YYYYMMDD date handling."""

import re

from corpus_snapshot.core.exceptions import DateOrderError, InvalidDateError

_YMD_RE = re.compile(r"[0-9]{8}")


def validate_ymd(ymd: str) -> str:
    """Validate a ``YYYYMMDD`` string and return it unchanged.

    Only the shape is checked: month 1-12 and day 1-31, with no calendar
    awareness (``20260231`` is accepted).
    """
    if not isinstance(ymd, str) or not _YMD_RE.fullmatch(ymd):
        raise InvalidDateError(
            f"Invalid date format: {ymd} (expected YYYYMMDD)",
            details={"date": ymd},
        )

    month = int(ymd[4:6])
    day = int(ymd[6:8])
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Invalid month in date: {ymd}", details={"date": ymd})
    if not 1 <= day <= 31:
        raise InvalidDateError(f"Invalid day in date: {ymd}", details={"date": ymd})
    return ymd


def ensure_date_order(start_ymd: str, end_ymd: str) -> None:
    """Require ``start_ymd <= end_ymd``."""
    if int(start_ymd) > int(end_ymd):
        raise DateOrderError(
            "Start date must be <= end date",
            details={"start": start_ymd, "end": end_ymd},
        )


def ymd_to_git_date(ymd: str) -> str:
    """``20260113`` -> ``2026-01-13``."""
    return f"{ymd[0:4]}-{ymd[4:6]}-{ymd[6:8]}"


def end_of_day_boundary(ymd: str) -> str:
    """Last second of ``ymd`` as understood by ``git rev-list --before``."""
    return f"{ymd_to_git_date(ymd)} 23:59:59"
