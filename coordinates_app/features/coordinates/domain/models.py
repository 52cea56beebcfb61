"""座標機能のドメインモデル"""
from dataclasses import dataclass

LATITUDE_BOUNDS = (-90.0, 90.0)
LONGITUDE_BOUNDS = (-180.0, 180.0)


def is_valid_latitude(value: float) -> bool:
    """緯度が -90 以上 90 以下か（NaNは不可）"""
    return LATITUDE_BOUNDS[0] <= value <= LATITUDE_BOUNDS[1]


def is_valid_longitude(value: float) -> bool:
    """経度が -180 以上 180 以下か（NaNは不可）"""
    return LONGITUDE_BOUNDS[0] <= value <= LONGITUDE_BOUNDS[1]


def format_coordinate(value: float) -> str:
    """
    小数点以下2桁の文字列に変換

    丸めは最近接偶数丸め（Pythonの書式指定と同じ）。
    ロケールに依存せず小数点は常に "."。
    "-0.00" になる値（-0.0 や -0.004 など）は "0.00" とする。

    Args:
        value: 緯度または経度

    Returns:
        str: 例 "37.77", "-122.42"
    """
    text = f"{value:.2f}"
    if text == "-0.00":
        return "0.00"
    return text


@dataclass(frozen=True)
class CoordinateValue:
    """
    緯度・経度のペア（イミュータブル）

    生成時には範囲チェックを行わない。状態へ反映する前に
    `is_valid()` または各バリデーション関数で確認すること。
    """

    latitude: float  # 緯度
    longitude: float  # 経度

    @classmethod
    def create(cls, latitude: float, longitude: float) -> "CoordinateValue":
        """座標を生成（範囲外でも失敗しない）"""
        return cls(latitude=float(latitude), longitude=float(longitude))

    @property
    def formatted_latitude(self) -> str:
        return format_coordinate(self.latitude)

    @property
    def formatted_longitude(self) -> str:
        return format_coordinate(self.longitude)

    def is_valid(self) -> bool:
        """緯度・経度ともに範囲内か"""
        return is_valid_latitude(self.latitude) and is_valid_longitude(self.longitude)

    def to_dict(self) -> dict[str, object]:
        """表示・API用の辞書に変換"""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "formatted_latitude": self.formatted_latitude,
            "formatted_longitude": self.formatted_longitude,
        }

    def __repr__(self) -> str:
        return f"CoordinateValue(lat={self.latitude}, lng={self.longitude})"


DEFAULT_COORDINATES = CoordinateValue(latitude=0.0, longitude=0.0)

# サンフランシスコ（シミュレーション用の固定値）
MOCK_COORDINATES = CoordinateValue(latitude=37.7749, longitude=-122.4194)
