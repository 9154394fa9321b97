"""
存储层 - 版本计数器与PDF对象存储

子模块：
- local: 文件系统实现（版本JSON/租约锁/对象目录）
"""

from .local import LocalBlobStore, LocalVersionStore

__all__ = [
    "LocalBlobStore",
    "LocalVersionStore",
]
