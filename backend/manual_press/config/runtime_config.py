"""
运行期配置 - 读取 config/manual_press.yaml

职责：
- 加载源地址/超时/存储/日志等运行参数
- 加载版式配置（layout 段，见 layout_config）
- 提供环境变量覆盖机制（MANUAL_PRESS_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from ..interfaces import ConfigError
from .layout_config import LayoutConfig


class SourceConfig(BaseModel):
    """源文档配置"""

    app_url: str = "http://localhost:4200"
    print_path: str = "/docs/print?worker=1"
    ready_selector: str = "body[data-pdf-ready]"

    @property
    def print_url(self) -> str:
        return f"{self.app_url.rstrip('/')}{self.print_path}"


class TimeoutConfig(BaseModel):
    """超时配置"""

    fetch_sec: int = 60
    render_sec: int = 60


class StorageConfig(BaseModel):
    """存储配置"""

    root_dir: Path = Path("storage")
    version_key: str = "version"
    blob_prefix: str = "manual-v"
    lock_lease_sec: int = 900


class MarkerConfig(BaseModel):
    """章节标记配置"""

    toc_id: str = "TOC"
    toc_title: str = "ÍNDICE DE CONTENIDOS"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    source: SourceConfig = Field(default_factory=SourceConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    markers: MarkerConfig = Field(default_factory=MarkerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    model_config = {
        "env_prefix": "MANUAL_PRESS_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """环境变量优先于YAML（构造参数）"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"配置文件解析失败: {path}: {e}") from e

        runtime_opts = data.get("runtime_options") or {}

        # 以字典传入，环境变量按字段深度合并覆盖
        try:
            config = cls(
                source=cls._extract(runtime_opts, "source"),
                timeouts=cls._extract(runtime_opts, "timeouts"),
                storage=cls._extract(runtime_opts, "storage"),
                markers=cls._extract(runtime_opts, "markers"),
                logging=cls._extract(runtime_opts, "logging"),
                layout=data.get("layout") or {},
            )
        except ValidationError as e:
            raise ConfigError(f"运行期配置无效: {e}") from e

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        root = Path(self.storage.root_dir)
        if not root.is_absolute():
            self.storage.root_dir = (base_dir / root).resolve()

    @property
    def log_dir(self) -> Path:
        return Path(self.storage.root_dir) / "logs"

    def ensure_dirs(self) -> None:
        """确保必要目录存在"""
        Path(self.storage.root_dir).mkdir(parents=True, exist_ok=True)
        if self.logging.log_to_file:
            self.log_dir.mkdir(exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/manual_press.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
