"""Tests for YYYYMMDD date helpers."""

import pytest

from corpus_snapshot.core.exceptions import DateOrderError, InvalidDateError
from corpus_snapshot.utils.dates import (
    end_of_day_boundary,
    ensure_date_order,
    validate_ymd,
    ymd_to_git_date,
)


@pytest.mark.unit
class TestValidateYmd:
    """Tests for validate_ymd."""

    @pytest.mark.parametrize("ymd", ["20260101", "20261231", "20260131", "20260231", "00000101"])
    def test_accepts_valid_shapes(self, ymd: str) -> None:
        assert validate_ymd(ymd) == ymd

    @pytest.mark.parametrize("month", range(1, 13))
    def test_accepts_every_month(self, month: int) -> None:
        assert validate_ymd(f"2026{month:02d}15")

    @pytest.mark.parametrize("day", range(1, 32))
    def test_accepts_every_day(self, day: int) -> None:
        assert validate_ymd(f"202601{day:02d}")

    @pytest.mark.parametrize(
        "ymd",
        ["2026011", "202601011", "", "2026-01-01", "2026O101", " 20260101", "20260101\n", "２０２６０１０１"],
    )
    def test_rejects_bad_format(self, ymd: str) -> None:
        with pytest.raises(InvalidDateError, match="Invalid date format"):
            validate_ymd(ymd)

    @pytest.mark.parametrize("ymd", ["20260001", "20261301", "20269901"])
    def test_rejects_bad_month(self, ymd: str) -> None:
        with pytest.raises(InvalidDateError, match="Invalid month"):
            validate_ymd(ymd)

    @pytest.mark.parametrize("ymd", ["20260100", "20260132", "20260199"])
    def test_rejects_bad_day(self, ymd: str) -> None:
        with pytest.raises(InvalidDateError, match="Invalid day"):
            validate_ymd(ymd)


@pytest.mark.unit
class TestDateOrder:
    """Tests for ensure_date_order."""

    def test_equal_dates_allowed(self) -> None:
        ensure_date_order("20260110", "20260110")

    def test_start_before_end_allowed(self) -> None:
        ensure_date_order("20251231", "20260101")

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(DateOrderError) as exc_info:
            ensure_date_order("20260117", "20260116")
        assert exc_info.value.details == {"start": "20260117", "end": "20260116"}


@pytest.mark.unit
def test_git_date_conversion() -> None:
    assert ymd_to_git_date("20260113") == "2026-01-13"
    assert end_of_day_boundary("20260113") == "2026-01-13 23:59:59"
