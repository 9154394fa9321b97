"""
命令行入口单元测试
"""

import json
from pathlib import Path

import pytest

from manual_press import cli
from manual_press.pipeline import publisher as publisher_module


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    path = temp_dir / "manual_press.yaml"
    path.write_text(
        "runtime_options:\n"
        "  storage:\n"
        "    root_dir: storage\n"
        "  logging:\n"
        "    log_to_file: false\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda config, level=None: None)


@pytest.fixture
def patched_renderer(monkeypatch, fake_renderer, scenario_texts):
    renderer = fake_renderer([scenario_texts])
    monkeypatch.setattr(publisher_module, "WeasyRenderer", lambda timeout=None: renderer)
    return renderer


class TestCli:
    def test_parser_defaults(self):
        args = cli.build_parser().parse_args(["publish"])
        assert args.command == "publish"
        assert args.bump == "patch"
        assert args.source is None

    def test_latest_before_publish(self, config_path, temp_dir, capsys):
        """测试未发布时导出失败"""
        code = cli.main(["--config", str(config_path), "latest", "-o", str(temp_dir / "out.pdf")])
        assert code == 1
        assert "publish" in capsys.readouterr().err

    def test_publish_then_latest(self, config_path, sample_html_path, temp_dir, patched_renderer, capsys):
        """测试发布后导出与列举"""
        code = cli.main(["--config", str(config_path), "publish", "minor", "--source", str(sample_html_path)])
        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["version"] == "0.1.0"
        assert result["key"] == "manual-v0.1.0.pdf"
        assert (temp_dir / "storage" / "blobs" / "manual-v0.1.0.pdf").exists()

        output = temp_dir / "out" / "manual.pdf"
        assert cli.main(["--config", str(config_path), "latest", "-o", str(output)]) == 0
        assert output.read_bytes().startswith(b"%PDF")
        capsys.readouterr()

        assert cli.main(["--config", str(config_path), "versions"]) == 0
        listing = json.loads(capsys.readouterr().out)
        assert [v["key"] for v in listing] == ["manual-v0.1.0.pdf"]

    def test_publish_invalid_bump(self, config_path, sample_html_path, patched_renderer, capsys):
        """测试非法bump：退出码1且未渲染"""
        code = cli.main(["--config", str(config_path), "publish", "mega", "--source", str(sample_html_path)])
        assert code == 1
        assert patched_renderer.calls == 0
        assert capsys.readouterr().err.startswith("失败")

    def test_invalid_config(self, temp_dir, capsys):
        path = temp_dir / "bad.yaml"
        path.write_text("layout:\n  header:\n    text_color: green\n", encoding="utf-8")

        assert cli.main(["--config", str(path), "versions"]) == 1
        assert "配置错误" in capsys.readouterr().err
