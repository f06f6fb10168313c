"""Tests for the analyze_layout command-line script."""

import importlib.util
import json
import pytest
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "analyze_layout.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("analyze_layout", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def blocks_file(tmp_path: Path) -> Path:
    path = tmp_path / "blocks.json"
    path.write_text(json.dumps({"blocks": [
        {"id": "high", "content": "Selected", "priority": 9, "estimatedHeight": 1500, "topicId": "topic-1"},
        {"id": "low", "content": "Optional", "priority": 2, "estimatedHeight": 800, "topicId": "topic-2"},
    ]}), encoding="utf-8")
    return path


@pytest.fixture
def topics_file(tmp_path: Path) -> Path:
    path = tmp_path / "topics.json"
    path.write_text(json.dumps([
        {"id": "topic-1", "title": "Core", "confidence": 0.9},
        {"id": "topic-2", "title": "Extra", "confidence": 0.2},
    ]), encoding="utf-8")
    return path


class TestAnalyzeLayoutCli:
    def test_main_when_blocks_only_then_prints_analysis(self, cli, blocks_file, capsys):
        exit_code = cli.main([str(blocks_file), "--max-pages", "1"])

        report = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert report["analysis"]["has_overflow"] is True
        assert report["analysis"]["reduction_plan"] is None
        assert "detailed" not in report

    def test_main_when_topics_and_selection_then_plan_included(
        self, cli, blocks_file, topics_file, capsys
    ):
        exit_code = cli.main([
            str(blocks_file), "--topics", str(topics_file),
            "--max-pages", "1", "--select", "topic-1", "--detailed", "--css",
        ])

        report = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert report["analysis"]["reduction_plan"]["removable_blocks"] == ["low"]
        assert len(report["detailed"]["affected_content"]) == 2
        assert report["print_css"].startswith(":root {")

    def test_main_when_file_missing_then_nonzero_exit(self, cli, tmp_path, capsys):
        exit_code = cli.main([str(tmp_path / "missing.json")])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_main_when_invalid_config_then_nonzero_exit(self, cli, blocks_file, capsys):
        exit_code = cli.main([str(blocks_file), "--columns", "0"])

        assert exit_code == 1
        assert "columns must be positive" in capsys.readouterr().err
