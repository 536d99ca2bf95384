"""Tests for structured logging setup."""

from __future__ import annotations

import json

import pytest

from chartsignal.utils.logging import (
    get_logger,
    get_scan_id,
    reset_scan_id,
    set_scan_id,
    setup_logging,
)


def _last_line(text: str) -> str:
    lines = [line for line in text.strip().splitlines() if line]
    return lines[-1] if lines else ""


class TestSetupLogging:
    """Test logging configuration."""

    def test_setup_logging_returns_none(self) -> None:
        assert setup_logging(level="INFO", log_format="json") is None

    def test_get_logger_returns_bound_logger(self) -> None:
        setup_logging(level="INFO", log_format="json")
        assert get_logger("test") is not None


class TestJsonFormat:
    """Test JSON log output."""

    def test_json_output_is_valid(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO", log_format="json")
        get_logger("test_json").info("test message", extra_key="extra_value")

        parsed = json.loads(_last_line(capsys.readouterr().err))
        assert parsed["event"] == "test message"
        assert parsed["extra_key"] == "extra_value"
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="WARNING", log_format="json")
        get_logger("test_level").info("hidden")
        assert "hidden" not in capsys.readouterr().err


class TestConsoleFormat:
    """Test console (pretty-print) log output."""

    def test_console_output_is_not_json(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        setup_logging(level="INFO", log_format="console")
        get_logger("test_console").info("console test")

        line = _last_line(capsys.readouterr().err)
        assert "console test" in line
        with pytest.raises(json.JSONDecodeError):
            json.loads(line)


class TestScanId:
    """Scan IDs are carried through context variables."""

    def test_set_and_reset(self) -> None:
        token = set_scan_id("abc123")
        assert get_scan_id() == "abc123"
        reset_scan_id(token)
        assert get_scan_id() == ""

    def test_scan_id_in_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO", log_format="json")
        token = set_scan_id("scan-42")
        try:
            get_logger("test_scan").info("tagged")
        finally:
            reset_scan_id(token)

        parsed = json.loads(_last_line(capsys.readouterr().err))
        assert parsed["scan_id"] == "scan-42"

    def test_no_scan_id_when_unset(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO", log_format="json")
        get_logger("test_untagged").info("untagged")

        parsed = json.loads(_last_line(capsys.readouterr().err))
        assert "scan_id" not in parsed
