"""
本地存储 - 版本计数器与PDF对象的文件系统实现

职责：
1. 版本计数器：<root>/meta/{key}.json（原子替换写入）
2. 发布租约锁：<root>/meta/{key}.lock（独占创建，过期可接管）
3. 对象存储：<root>/blobs/{key} + {key}.meta.json（内容类型/自定义元数据/上传时间）

测试要点：
- test_version_roundtrip: 版本读写
- test_version_absent: 无版本时返回None
- test_lock_conflict: 并发发布冲突
- test_lock_stale_takeover: 过期租约接管
- test_blob_list_prefix: 前缀列举
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from ..interfaces import IBlobStore, IVersionStore, PublishConflictError, StorageError
from ..models import BlobInfo, VersionMeta

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta.json"


def _atomic_write(path: Path, data: bytes) -> None:
    """先写临时文件再替换，避免读到半截内容"""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(data)
        os.replace(tmp, path)
    except OSError as e:
        raise StorageError(f"写入失败: {path}: {e}") from e


def _check_key(key: str) -> str:
    if not key or "/" in key or "\\" in key or key.startswith("."):
        raise StorageError(f"非法存储键: {key!r}")
    return key


class LocalVersionStore(IVersionStore):
    """版本计数器（JSON文件）"""

    def __init__(self, root: Path, lease_sec: int = 900):
        self.meta_dir = Path(root) / "meta"
        self.lease_sec = lease_sec

    def get(self, key: str) -> VersionMeta | None:
        path = self.meta_dir / f"{_check_key(key)}.json"
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return VersionMeta(**data)
        except (OSError, ValueError, TypeError, ValidationError) as e:
            raise StorageError(f"版本记录损坏: {path}: {e}") from e

    def put(self, key: str, meta: VersionMeta) -> None:
        path = self.meta_dir / f"{_check_key(key)}.json"
        payload = json.dumps(meta.model_dump(), ensure_ascii=False, indent=2)
        _atomic_write(path, payload.encode("utf-8"))
        logger.info(f"版本已更新: {key} = {meta}")

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        """发布租约（独占创建锁文件）"""
        path = self.meta_dir / f"{_check_key(key)}.lock"
        self.meta_dir.mkdir(parents=True, exist_ok=True)

        self._acquire(path)
        try:
            yield
        finally:
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    def _acquire(self, path: Path) -> None:
        for _ in range(2):
            try:
                fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                try:
                    age = time.time() - path.stat().st_mtime
                except FileNotFoundError:
                    # 持有者恰好释放，重试创建
                    continue
                if age < self.lease_sec:
                    raise PublishConflictError(
                        f"已有发布进行中（租约 {age:.0f}s/{self.lease_sec}s）: {path}"
                    )
                logger.warning(f"接管过期发布租约: {path} ({age:.0f}s)")
                path.unlink(missing_ok=True)
                continue
            except OSError as e:
                raise StorageError(f"无法创建发布租约: {path}: {e}") from e

            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"pid": os.getpid(), "acquired_at": datetime.now().isoformat()}, f)
            return

        raise PublishConflictError(f"无法获取发布租约: {path}")


class LocalBlobStore(IBlobStore):
    """对象存储（目录 + 元数据旁路文件）"""

    def __init__(self, root: Path):
        self.blob_dir = Path(root) / "blobs"

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        path = self.blob_dir / _check_key(key)
        _atomic_write(path, data)

        sidecar = {
            "content_type": content_type,
            "metadata": metadata or {},
            "uploaded_at": datetime.now().isoformat(),
        }
        _atomic_write(
            path.with_name(path.name + META_SUFFIX),
            json.dumps(sidecar, ensure_ascii=False, indent=2).encode("utf-8"),
        )
        logger.info(f"对象已写入: {key} ({len(data) / 1024:.1f} KB)")

    def get(self, key: str) -> bytes | None:
        path = self.blob_dir / _check_key(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"读取失败: {path}: {e}") from e

    def list(self, prefix: str = "") -> list[BlobInfo]:
        if not self.blob_dir.exists():
            return []

        items = []
        for path in self.blob_dir.iterdir():
            name = path.name
            if not path.is_file() or name.endswith(META_SUFFIX) or name.startswith("."):
                continue
            if not name.startswith(prefix):
                continue
            items.append(
                BlobInfo(key=name, size=path.stat().st_size, uploaded_at=self._uploaded_at(path))
            )

        items.sort(key=lambda b: b.key)
        return items

    def _uploaded_at(self, path: Path) -> datetime:
        sidecar = path.with_name(path.name + META_SUFFIX)
        try:
            with open(sidecar, "r", encoding="utf-8") as f:
                return datetime.fromisoformat(json.load(f)["uploaded_at"])
        except (OSError, ValueError, KeyError):
            return datetime.fromtimestamp(path.stat().st_mtime)
