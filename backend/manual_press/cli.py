"""
命令行入口

示例：
  manual-press publish patch                  # 1.0.0 → 1.0.1（修正）
  manual-press publish minor --source http://localhost:4200/docs/print?worker=1
  manual-press latest -o manual.pdf
  manual-press versions
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import RuntimeConfig, reload_config
from .interfaces import ManualPressError
from .models import BumpKind
from .pipeline import Publisher

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: RuntimeConfig, level: str | None = None) -> None:
    """按配置初始化根日志"""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_to_file:
        config.ensure_dirs()
        handlers.append(
            logging.FileHandler(config.log_dir / "manual_press.log", encoding="utf-8")
        )
    logging.basicConfig(
        level=getattr(logging, (level or config.logging.log_level).upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="manual-press", description="生成并发布手册PDF")
    ap.add_argument("--config", default="config/manual_press.yaml", help="配置文件路径")
    ap.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = ap.add_subparsers(dest="command", required=True)

    p_publish = sub.add_parser("publish", help="生成新版本PDF并发布")
    # 不在此限制choices，由 BumpKind.parse 统一校验
    p_publish.add_argument("bump", nargs="?", default=BumpKind.PATCH.value, help="major/minor/patch")
    p_publish.add_argument("--source", default=None, help="源文档URL或本地HTML路径")

    p_latest = sub.add_parser("latest", help="导出最新版本PDF")
    p_latest.add_argument("-o", "--output", required=True)

    sub.add_parser("versions", help="列出历史版本")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = reload_config(args.config)
    except ManualPressError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return 1

    setup_logging(config, args.log_level)
    publisher = Publisher(config)

    try:
        if args.command == "publish":
            job = publisher.create_job(args.bump)
            publisher.execute(job, args.source)
            print(json.dumps(job.result.model_dump(), ensure_ascii=False, indent=2))
            for flag in job.flags:
                logger.warning(f"告警: {flag}")

        elif args.command == "latest":
            found = publisher.latest()
            if found is None:
                print("尚未发布任何PDF，请先执行 publish。", file=sys.stderr)
                return 1
            meta, data = found
            output = Path(args.output)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(data)
            print(f"v{meta} → {output}")

        elif args.command == "versions":
            versions = publisher.list_versions()
            print(json.dumps([v.model_dump(mode="json") for v in versions], indent=2))

    except ManualPressError as e:
        print(f"失败: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
