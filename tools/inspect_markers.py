"""
检查PDF中的章节标记（排查页眉标签/目录页码错位时使用）。

输出页数与章节映射；--pages 时额外逐页列出生效的章节标签。
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Inspect FWMARK section markers in a PDF.")
    ap.add_argument("--pdf", required=True)
    ap.add_argument("--config", default="config/manual_press.yaml", help="配置文件路径（目录标记id/标题）")
    ap.add_argument("--pages", action="store_true", help="逐页列出章节标签")
    args = ap.parse_args(argv)

    _add_backend_to_path()
    from manual_press.config import reload_config
    from manual_press.layout import MarkerExtractor, extract_page_texts

    markers = reload_config(args.config).markers
    texts = extract_page_texts(Path(args.pdf).read_bytes())
    section_map = MarkerExtractor(toc_id=markers.toc_id, toc_title=markers.toc_title).extract(texts)

    print(f"pages: {len(texts)}")
    print(json.dumps(section_map.to_dict(), ensure_ascii=False, indent=2))

    if args.pages:
        for page_no in range(1, len(texts) + 1):
            print(f"{page_no:>4}  {section_map.label_for_page(page_no) or '-'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
