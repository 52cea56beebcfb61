"""手動入力バリデーションのテスト"""

import pytest

from coordinates_app.features.coordinates.domain.models import CoordinateValue
from coordinates_app.features.coordinates.services.validation import (
    validate_latitude_text,
    validate_longitude_text,
    validate_manual_input,
)
from coordinates_app.shared.exceptions.errors import (
    CoordinateParseError,
    CoordinateRangeError,
    ValidationError,
)
from coordinates_app.shared.utils.text import normalize_text, parse_decimal


@pytest.mark.parametrize(
    "text,expected",
    [
        ("37.77", 37.77),
        ("-122.41", -122.41),
        ("+5", 5.0),
        (" 12.5 ", 12.5),
        ("　12.5　", 12.5),
        (".5", 0.5),
        ("5.", 5.0),
        ("1e2", 100.0),
    ],
)
def test_parse_decimal_accepts(text: str, expected: float) -> None:
    assert parse_decimal(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "nan", "inf", "1_0", "1,5", "--1", "1.2.3", None])
def test_parse_decimal_rejects(text: object) -> None:
    """10進数表記以外は受け付けない"""
    assert parse_decimal(text) is None  # type: ignore[arg-type]


def test_normalize_text() -> None:
    assert normalize_text("　 abc ") == "abc"
    assert normalize_text("  ") is None
    assert normalize_text(None) is None


def test_validate_manual_input_success() -> None:
    assert validate_manual_input("37.77", "-122.41") == CoordinateValue(37.77, -122.41)


def test_validate_manual_input_bounds_inclusive() -> None:
    assert validate_manual_input("-90", "180") == CoordinateValue(-90.0, 180.0)


def test_latitude_parse_error() -> None:
    with pytest.raises(CoordinateParseError) as exc_info:
        validate_manual_input("abc", "10")

    assert exc_info.value.field == "latitude"
    assert exc_info.value.user_message == "Please enter a valid number"


def test_longitude_parse_error() -> None:
    with pytest.raises(CoordinateParseError) as exc_info:
        validate_manual_input("10", "")

    assert exc_info.value.field == "longitude"


def test_latitude_range_error() -> None:
    with pytest.raises(CoordinateRangeError) as exc_info:
        validate_latitude_text("95")

    error = exc_info.value
    assert error.field == "latitude"
    assert error.value == 95.0
    assert error.bounds == (-90.0, 90.0)
    assert error.user_message == "Latitude must be between -90 and 90"


def test_longitude_range_error() -> None:
    with pytest.raises(CoordinateRangeError) as exc_info:
        validate_longitude_text("-180.5")

    assert exc_info.value.user_message == "Longitude must be between -180 and 180"


def test_latitude_checked_first() -> None:
    """両方不正な場合は緯度のエラー"""
    with pytest.raises(ValidationError) as exc_info:
        validate_manual_input("abc", "xyz")

    assert exc_info.value.field == "latitude"


def test_overflowing_exponent_is_out_of_range() -> None:
    with pytest.raises(CoordinateRangeError):
        validate_latitude_text("1e999")
