"""
单位换算 - 物理长度 → PDF点 / 十六进制颜色 → RGB

职责：
1. "1.5cm" → 42.525pt（1cm = 28.35pt）
2. "#rrggbb" → (r, g, b)，各分量归一化到 [0, 1]

测试要点：
- test_length_to_points_cm: 厘米换算
- test_length_to_points_invalid: 无法解析的长度
- test_color_from_hex: 颜色归一化
"""

from __future__ import annotations

import re

from .interfaces import ConfigError

POINTS_PER_CM = 28.35

_LENGTH_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*(cm)?\s*$")
_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def length_to_points(value: str | float | int) -> float:
    """物理长度（厘米，单位后缀可省略）换算为pt"""
    if isinstance(value, (int, float)):
        return float(value) * POINTS_PER_CM

    m = _LENGTH_RE.match(value)
    if not m:
        raise ConfigError(f"无法解析的长度: {value!r}（仅支持厘米，如 '1.5cm'）")
    return float(m.group(1)) * POINTS_PER_CM


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR_RE.match(value))


def color_from_hex(hex_color: str) -> tuple[float, float, float]:
    """
    "#rrggbb" → (r, g, b)

    不做格式校验，调用方须在配置加载时先用 is_hex_color 校验。
    """
    n = int(hex_color[1:], 16)
    return (
        ((n >> 16) & 0xFF) / 255,
        ((n >> 8) & 0xFF) / 255,
        (n & 0xFF) / 255,
    )
