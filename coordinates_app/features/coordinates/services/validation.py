"""手動入力のバリデーション"""
from typing import Callable, Optional

from ....shared.exceptions.errors import CoordinateParseError, CoordinateRangeError
from ....shared.utils.text import parse_decimal
from ..domain.enums import CoordinateField
from ..domain.models import (
    LATITUDE_BOUNDS,
    LONGITUDE_BOUNDS,
    CoordinateValue,
    is_valid_latitude,
    is_valid_longitude,
)


def parse_coordinate_text(text: Optional[str], field: CoordinateField) -> float:
    """
    入力文字列を数値に変換

    Raises:
        CoordinateParseError: 数値として解釈できない場合
    """
    value = parse_decimal(text)
    if value is None:
        raise CoordinateParseError(field.value, text or "")
    return value


def _validate_text(
    text: Optional[str],
    field: CoordinateField,
    predicate: Callable[[float], bool],
    bounds: tuple[float, float],
) -> float:
    value = parse_coordinate_text(text, field)
    if not predicate(value):
        raise CoordinateRangeError(field.value, value, bounds)
    return value


def validate_latitude_text(text: Optional[str]) -> float:
    """
    緯度の入力を検証

    Raises:
        CoordinateParseError: 数値でない場合
        CoordinateRangeError: -90〜90の範囲外の場合
    """
    return _validate_text(text, CoordinateField.LATITUDE, is_valid_latitude, LATITUDE_BOUNDS)


def validate_longitude_text(text: Optional[str]) -> float:
    """
    経度の入力を検証

    Raises:
        CoordinateParseError: 数値でない場合
        CoordinateRangeError: -180〜180の範囲外の場合
    """
    return _validate_text(text, CoordinateField.LONGITUDE, is_valid_longitude, LONGITUDE_BOUNDS)


def validate_manual_input(latitude_text: Optional[str], longitude_text: Optional[str]) -> CoordinateValue:
    """
    緯度・経度の入力を検証して座標を生成

    緯度を先に検証し、最初に失敗した入力欄のエラーを送出する。

    Args:
        latitude_text: 緯度の入力文字列
        longitude_text: 経度の入力文字列

    Returns:
        CoordinateValue: 検証済みの座標

    Raises:
        CoordinateParseError: 数値でない場合
        CoordinateRangeError: 範囲外の場合
    """
    latitude = validate_latitude_text(latitude_text)
    longitude = validate_longitude_text(longitude_text)
    return CoordinateValue.create(latitude, longitude)
