"""手動編集の結果型"""
from dataclasses import dataclass
from typing import Optional

from ....shared.exceptions.errors import ValidationError
from .models import CoordinateValue


@dataclass(frozen=True)
class ManualEditResult:
    """手動編集の結果（成功時はvalue、失敗時はerrorを持つ）"""

    value: Optional[CoordinateValue] = None
    error: Optional[ValidationError] = None

    @classmethod
    def success(cls, value: CoordinateValue) -> "ManualEditResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ValidationError) -> "ManualEditResult":
        return cls(error=error)
