"""
配置层 - 加载运行期配置与版式配置

职责：
- 加载 config/manual_press.yaml（运行参数 + layout 段）
- 加载时校验，非法配置在渲染前以 ConfigError 失败
- 提供类型安全的配置访问接口
"""

from .layout_config import (
    HeaderConfig,
    LayoutConfig,
    PageConfig,
    PageMargin,
    PageNumberConfig,
)
from .runtime_config import (
    MarkerConfig,
    RuntimeConfig,
    SourceConfig,
    StorageConfig,
    get_config,
    reload_config,
)

__all__ = [
    "LayoutConfig",
    "PageConfig",
    "PageMargin",
    "HeaderConfig",
    "PageNumberConfig",
    "RuntimeConfig",
    "SourceConfig",
    "StorageConfig",
    "MarkerConfig",
    "get_config",
    "reload_config",
]
