"""Tests for logging utilities."""

from __future__ import annotations

import logging
from pathlib import Path

from eml_extractor.core.config import LoggingSettings
from eml_extractor.core.logging import configure_logging


def test_configure_logging_sets_root_level() -> None:
    """configure_logging should set the root logger level according to settings."""

    settings = LoggingSettings(level="DEBUG", structured=False)
    configure_logging(settings)
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_writes_to_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "extract.log"
    configure_logging(LoggingSettings(level="INFO", log_file=log_file))

    logging.getLogger("eml_extractor.test").warning("Failed to process %s", "x.eml")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "Failed to process x.eml" in log_file.read_text(encoding="utf-8")

    configure_logging(LoggingSettings(level="INFO"))
