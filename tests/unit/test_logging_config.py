"""Unit tests for fetch_hash.logging_config."""

from __future__ import annotations

import json

import pytest
import structlog

from fetch_hash.config import LoggingSettings
from fetch_hash.logging_config import configure_logging

pytestmark = pytest.mark.usefixtures("reset_structlog")


class TestConfigureLogging:
    def test_json_output_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(format="json"))
        structlog.get_logger().info("file_downloaded", path="small.fam", size=85)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip())
        assert record["event"] == "file_downloaded"
        assert record["path"] == "small.fam"
        assert record["size"] == 85
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_text_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(format="text"))
        structlog.get_logger().warning("file_hash_mismatch", path="a.txt")

        err = capsys.readouterr().err
        assert "file_hash_mismatch" in err
        assert "a.txt" in err

    def test_level_filters_lower_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(level="ERROR", format="json"))
        log = structlog.get_logger()
        log.info("dropped")
        log.warning("also_dropped")
        log.error("kept")

        lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
        assert [json.loads(line)["event"] for line in lines] == ["kept"]
