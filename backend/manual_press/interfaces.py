"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 核心引擎只通过接口访问渲染器/存储/页面，不依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换（测试中用FakeRenderer/RecordingPage）

使用方式：
    from manual_press.interfaces import IRenderer

    class MyRenderer(IRenderer):
        def render(self, document, layout) -> RenderedPages:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import LayoutConfig
    from .layout.source import SourceDocument
    from .models import BlobInfo, RenderedPages, VersionMeta


# ============================================================================
# 渲染协作者接口
# ============================================================================

class IRenderer(ABC):
    """渲染器接口 - 源文档 → 分页PDF + 逐页文本"""

    @abstractmethod
    def render(self, document: SourceDocument, layout: LayoutConfig) -> RenderedPages:
        """
        按版式几何渲染源文档

        不绘制任何页眉/页脚装饰（由Overlay在成品页上追加）。

        Args:
            document: 源文档（TOC注入后会被再次渲染）
            layout: 版式配置（纸张/页边距）

        Returns:
            PDF字节 + 逐页纯文本

        Raises:
            RenderError: 超时/加载失败/渲染失败
        """
        ...


# ============================================================================
# 页面绘制接口
# ============================================================================

RGB = tuple[float, float, float]


class IPageSurface(ABC):
    """
    单页绘制面 - 只允许追加绘制操作

    坐标系：PDF用户空间，原点在左下角，单位pt。
    """

    @property
    @abstractmethod
    def width(self) -> float:
        ...

    @property
    @abstractmethod
    def height(self) -> float:
        ...

    @abstractmethod
    def text_width(self, text: str, font_size: float) -> float:
        """等宽字体在指定字号下的文本宽度"""
        ...

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float, font_size: float, color: RGB) -> None:
        """在基线 (x, y) 处绘制文本"""
        ...

    @abstractmethod
    def draw_line(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        thickness: float,
        color: RGB,
    ) -> None:
        """绘制直线"""
        ...


class IPageDocument(ABC):
    """可装饰的成品文档（页序列）"""

    decorated: bool = False

    @abstractmethod
    def pages(self) -> Iterator[IPageSurface]:
        """按页序遍历绘制面"""
        ...

    @abstractmethod
    def page_count(self) -> int:
        ...

    @abstractmethod
    def to_bytes(self) -> bytes:
        """序列化为最终PDF"""
        ...


# ============================================================================
# 存储协作者接口
# ============================================================================

class IVersionStore(ABC):
    """版本计数器存储（单键读改写，无事务保证）"""

    @abstractmethod
    def get(self, key: str) -> VersionMeta | None:
        ...

    @abstractmethod
    def put(self, key: str, meta: VersionMeta) -> None:
        """写入失败抛 StorageError"""
        ...

    @abstractmethod
    def lock(self, key: str) -> AbstractContextManager[None]:
        """
        发布互斥租约

        Raises:
            PublishConflictError: 已有发布进行中
        """
        ...


class IBlobStore(ABC):
    """对象存储"""

    @abstractmethod
    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """写入失败抛 StorageError"""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        ...

    @abstractmethod
    def list(self, prefix: str = "") -> list[BlobInfo]:
        ...


# ============================================================================
# 异常定义
# ============================================================================

class ManualPressError(Exception):
    """基础异常"""
    pass


class ConfigError(ManualPressError):
    """配置错误（渲染前即失败）"""
    pass


class RenderError(ManualPressError):
    """渲染错误（超时/加载失败/就绪信号缺失）"""
    pass


class StorageError(ManualPressError):
    """存储读写错误"""
    pass


class PublishConflictError(ManualPressError):
    """已有发布在进行中"""
    pass
