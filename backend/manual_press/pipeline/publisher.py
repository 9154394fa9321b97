"""
发布编排器 - 版本升级 + 两遍分页 + 叠加 + 存储

职责：
1. 校验bump类型（渲染前失败）
2. 读取当前版本（缺省 0.0.0），计算下一版本
3. 加载源文档 → 两遍分页 → 页眉页脚叠加
4. 先写PDF对象，成功后才推进版本计数器
   （中途崩溃只会留下孤立对象，不会出现指向缺失对象的版本）
5. 发布期间持有版本存储租约，同一时刻只允许一个发布

测试要点：
- test_publish_success: 完整发布
- test_publish_invalid_bump: 非法bump在渲染前失败
- test_publish_render_failure: 渲染失败不写任何产物
- test_publish_blob_failure: 对象写入失败不推进版本
- test_latest: 读取最新版本
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..config import RuntimeConfig, get_config
from ..interfaces import (
    IBlobStore,
    IRenderer,
    IVersionStore,
    ManualPressError,
    StorageError,
)
from ..layout import (
    HeaderFooterOverlay,
    MarkerExtractor,
    PaginationDriver,
    PdfPages,
    SourceLoader,
    WeasyRenderer,
)
from ..models import (
    BlobInfo,
    BumpKind,
    PublishJob,
    PublishResult,
    VersionMeta,
    blob_key,
)
from ..storage import LocalBlobStore, LocalVersionStore
from .stages import StageEnum, get_stage

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class Publisher:
    """发布编排器"""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        *,
        renderer: IRenderer | None = None,
        source_loader: SourceLoader | None = None,
        version_store: IVersionStore | None = None,
        blob_store: IBlobStore | None = None,
    ):
        self.config = config or get_config()
        cfg = self.config

        self.renderer = renderer or WeasyRenderer(timeout=cfg.timeouts.render_sec)
        self.source_loader = source_loader or SourceLoader(
            timeout=cfg.timeouts.fetch_sec,
            ready_selector=cfg.source.ready_selector,
        )
        self.version_store = version_store or LocalVersionStore(
            cfg.storage.root_dir, lease_sec=cfg.storage.lock_lease_sec
        )
        self.blob_store = blob_store or LocalBlobStore(cfg.storage.root_dir)

        extractor = MarkerExtractor(toc_id=cfg.markers.toc_id, toc_title=cfg.markers.toc_title)
        self.driver = PaginationDriver(self.renderer, cfg.layout, extractor)
        self.overlay = HeaderFooterOverlay(cfg.layout)

    # === 发布 ===

    def publish(self, bump: str | BumpKind = BumpKind.PATCH, source: str | None = None) -> PublishResult:
        """发布新版本，返回成功描述；失败抛 ManualPressError"""
        job = self.create_job(bump)
        self.execute(job, source)
        return job.result

    def create_job(self, bump: str | BumpKind) -> PublishJob:
        """bump类型在此校验，早于任何渲染"""
        return PublishJob(bump=BumpKind.parse(bump))

    def execute(self, job: PublishJob, source: str | None = None) -> None:
        """执行发布流水线"""
        locator = source or self.config.source.print_url
        job.mark_running(StageEnum.VALIDATE.value)

        try:
            with self.version_store.lock(self.config.storage.version_key):
                result = self._run(job, locator)
            job.mark_succeeded(result)
        except ManualPressError as e:
            logger.error(f"[{job.job_id}] 发布失败 ({job.progress.stage}): {e}")
            job.mark_failed(str(e))
            raise
        except Exception as e:
            logger.exception(f"[{job.job_id}] 发布异常 ({job.progress.stage})")
            job.mark_failed(str(e))
            raise

        logger.info(
            f"[{job.job_id}] 发布完成: v{result.version} → {result.key} "
            f"({result.size / 1024:.1f} KB)"
        )

    def _run(self, job: PublishJob, locator: str) -> PublishResult:
        storage_cfg = self.config.storage

        current = self.version_store.get(storage_cfg.version_key) or VersionMeta()
        next_version = current.bump(job.bump)
        job.current_version = current
        job.next_version = next_version
        logger.info(f"[{job.job_id}] 生成PDF v{next_version} ({current} → {next_version}) 源: {locator}")

        self._enter(job, StageEnum.LOAD_SOURCE.value)
        document = self.source_loader.load(locator)

        pagination = self.driver.paginate(document, on_stage=lambda stage: self._enter(job, stage))
        if pagination.drifted:
            job.add_flag(
                f"页数漂移:{pagination.first_page_count}→{pagination.final_page_count}"
            )

        self._enter(job, StageEnum.OVERLAY.value)
        with PdfPages.from_bytes(pagination.pages.pdf) as pages:
            self.overlay.apply(pages, pagination.section_map, next_version.label)
            final_pdf = pages.to_bytes()

        self._enter(job, StageEnum.UPLOAD.value)
        key = blob_key(next_version, storage_cfg.blob_prefix)
        self.blob_store.put(
            key,
            final_pdf,
            PDF_CONTENT_TYPE,
            metadata={
                "version": next_version.version_string,
                "generated_at": datetime.now().isoformat(),
            },
        )

        self._enter(job, StageEnum.ADVANCE_VERSION.value)
        try:
            self.version_store.put(storage_cfg.version_key, next_version)
        except StorageError:
            logger.error(f"[{job.job_id}] 版本未推进，对象 {key} 已写入但未被引用")
            raise

        return PublishResult(version=next_version.version_string, key=key, size=len(final_pdf))

    def _enter(self, job: PublishJob, stage_name: str) -> None:
        stage = get_stage(stage_name)
        job.progress.stage = stage.name
        job.progress.percent = stage.progress_start
        job.progress.message = f"开始阶段: {stage.name}"
        logger.info(f"[{job.job_id}] 开始阶段: {stage.name}")

    # === 查询 ===

    def latest(self) -> tuple[VersionMeta, bytes] | None:
        """最新版本及其PDF；从未发布返回None"""
        meta = self.version_store.get(self.config.storage.version_key)
        if meta is None:
            return None

        key = blob_key(meta, self.config.storage.blob_prefix)
        data = self.blob_store.get(key)
        if data is None:
            raise StorageError(f"PDF v{meta} 不存在于存储中: {key}")
        return meta, data

    def list_versions(self) -> list[BlobInfo]:
        """历史版本列表"""
        return self.blob_store.list(prefix=self.config.storage.blob_prefix)
