"""
版本模型 - 语义化版本计数器

bump规则：
- major: 主版本+1，次版本/修订号归零
- minor: 次版本+1，修订号归零
- patch: 修订号+1
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..interfaces import ConfigError


class BumpKind(str, Enum):
    """版本升级类型"""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def parse(cls, value: str | BumpKind) -> BumpKind:
        """解析bump类型，非法值为配置错误"""
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigError(
                f"无效的bump类型: {value!r}（可选 major/minor/patch）"
            ) from e


class VersionMeta(BaseModel):
    """版本元数据"""
    major: int = Field(0, ge=0)
    minor: int = Field(0, ge=0)
    patch: int = Field(0, ge=0)

    model_config = {"frozen": True}

    def bump(self, kind: BumpKind | str) -> VersionMeta:
        """计算下一版本（不修改自身）"""
        kind = BumpKind.parse(kind)
        if kind is BumpKind.MAJOR:
            return VersionMeta(major=self.major + 1, minor=0, patch=0)
        if kind is BumpKind.MINOR:
            return VersionMeta(major=self.major, minor=self.minor + 1, patch=0)
        return VersionMeta(major=self.major, minor=self.minor, patch=self.patch + 1)

    @property
    def version_string(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def label(self) -> str:
        """页眉中的版本文本"""
        return f"v{self.version_string}"

    def __str__(self) -> str:
        return self.version_string


def blob_key(version: VersionMeta | str, prefix: str = "manual-v") -> str:
    """对象存储键：manual-v{major}.{minor}.{patch}.pdf"""
    return f"{prefix}{version}.pdf"
