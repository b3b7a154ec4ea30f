"""Tests for structured logging configuration."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from property_search.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_structlog() -> Iterator[None]:
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)


def test_json_output_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(json_output=True)

    structlog.get_logger("property_search.test").info("search_complete", total=3)

    captured = capsys.readouterr()
    assert captured.out == ""
    event = json.loads(captured.err.strip())
    assert event["event"] == "search_complete"
    assert event["level"] == "info"
    assert event["total"] == 3
    assert "timestamp" in event


def test_level_filters_lower_events(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(json_output=True, level=logging.WARNING)

    logger = structlog.get_logger("property_search.test")
    logger.info("search_complete")
    logger.warning("search_unavailable")

    lines = capsys.readouterr().err.strip().splitlines()
    assert [json.loads(line)["event"] for line in lines] == ["search_unavailable"]
