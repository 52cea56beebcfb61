"""テキスト処理ユーティリティ"""

import re
from typing import Optional

# 符号・整数部・小数部・指数部のみを許可（"nan", "inf", "1_000" などは不可）
DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def normalize_text(text: Optional[str]) -> Optional[str]:
    """
    入力テキストを正規化

    - 全角スペースを半角スペースに変換
    - 前後の空白を除去
    """
    if text is None:
        return None

    text = text.replace("　", " ").strip()

    return text if text else None


def parse_decimal(text: Optional[str]) -> Optional[float]:
    """
    10進数表記の文字列を数値に変換

    ロケールに依存せず、小数点は "." のみ受け付ける。

    Args:
        text: 入力文字列

    Returns:
        Optional[float]: 数値（解釈できない場合はNone）
    """
    normalized = normalize_text(text)
    if normalized is None or not DECIMAL_PATTERN.match(normalized):
        return None

    return float(normalized)
