"""
版式配置 - 纸张/页边距/页眉/页码

职责：
- 解析YAML中 layout 段并提供类型安全访问
- 加载时校验长度与颜色（错误即 ConfigError，发生在任何渲染之前）
- 提供换算后的pt值与RGB三元组，供分页驱动和Overlay只读共享

使用方式：
    layout = get_config().layout
    layout.top_pt, layout.header.text_rgb
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from ..interfaces import ConfigError
from ..units import color_from_hex, is_hex_color, length_to_points


def _check_length(value: str) -> str:
    try:
        length_to_points(value)
    except ConfigError as e:
        raise ValueError(str(e)) from e
    return value


def _check_color(value: str) -> str:
    if not is_hex_color(value):
        raise ValueError(f"颜色必须是 #rrggbb 格式: {value!r}")
    return value


class PageMargin(BaseModel):
    """页边距（厘米）"""
    top: str = "1.5cm"
    right: str = "1.5cm"
    bottom: str = "1.2cm"
    left: str = "1.5cm"

    model_config = {"frozen": True}

    @field_validator("top", "right", "bottom", "left")
    @classmethod
    def validate_length(cls, value: str) -> str:
        return _check_length(value)

    def as_css(self) -> str:
        """CSS margin 简写（上 右 下 左）"""
        return f"{self.top} {self.right} {self.bottom} {self.left}"


class PageConfig(BaseModel):
    """纸张配置"""
    format: str = "A5"
    margin: PageMargin = PageMargin()

    model_config = {"frozen": True}


class HeaderConfig(BaseModel):
    """页眉配置"""
    text_color: str = "#3a6640"
    border_color: str = "#b8deba"
    font_size: float = 7
    section_prefix: str = "// "

    model_config = {"frozen": True}

    @field_validator("text_color", "border_color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _check_color(value)

    @property
    def text_rgb(self) -> tuple[float, float, float]:
        return color_from_hex(self.text_color)

    @property
    def border_rgb(self) -> tuple[float, float, float]:
        return color_from_hex(self.border_color)


class PageNumberConfig(BaseModel):
    """页码配置"""
    color: str = "#4a7a52"
    font_size: float = 7
    y_from_bottom: str = "0.5cm"

    model_config = {"frozen": True}

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _check_color(value)

    @field_validator("y_from_bottom")
    @classmethod
    def validate_length(cls, value: str) -> str:
        return _check_length(value)

    @property
    def rgb(self) -> tuple[float, float, float]:
        return color_from_hex(self.color)


class LayoutConfig(BaseModel):
    """版式配置（单次发布内不可变）"""
    page: PageConfig = PageConfig()
    header: HeaderConfig = HeaderConfig()
    page_number: PageNumberConfig = PageNumberConfig()

    model_config = {"frozen": True}

    # === 换算值（pt） ===

    @property
    def top_pt(self) -> float:
        return length_to_points(self.page.margin.top)

    @property
    def bottom_pt(self) -> float:
        return length_to_points(self.page.margin.bottom)

    @property
    def left_pt(self) -> float:
        return length_to_points(self.page.margin.left)

    @property
    def right_pt(self) -> float:
        return length_to_points(self.page.margin.right)

    @property
    def page_number_y_pt(self) -> float:
        return length_to_points(self.page_number.y_from_bottom)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LayoutConfig:
        """从配置字典构建，校验失败转为 ConfigError"""
        try:
            return cls(**(data or {}))
        except ValidationError as e:
            raise ConfigError(f"版式配置无效: {e}") from e
