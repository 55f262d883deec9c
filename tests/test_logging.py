"""Tests for prscout.logging (package level vs third-party level)."""

import logging

import pytest

from prscout.config import LoggingConfig
from prscout.logging import DEFAULT_FORMAT, PACKAGE_LOGGER, PrscoutLogging, level_from_name


class TestLevelFromName:
    def test_case_and_whitespace_normalized(self) -> None:
        assert level_from_name(" debug ") == logging.DEBUG
        assert level_from_name("Warning") == logging.WARNING

    def test_unknown_level_returns_info(self) -> None:
        assert level_from_name("TRACE") == logging.INFO
        assert level_from_name("CRITICAL") == logging.INFO
        assert level_from_name("") == logging.INFO


class TestPrscoutLogging:
    def test_debug_applies_to_package_only(self) -> None:
        package_logger = PrscoutLogging(LoggingConfig(level="DEBUG", format="%(message)s")).setup()

        assert package_logger.name == PACKAGE_LOGGER
        assert logging.getLogger("prscout.adapters.bitbucket_cloud").isEnabledFor(logging.DEBUG)
        assert not logging.getLogger("urllib3.connectionpool").isEnabledFor(logging.DEBUG)
        assert logging.root.level == logging.WARNING

    def test_error_level_raises_root_too(self) -> None:
        PrscoutLogging(LoggingConfig(level="ERROR", format="%(message)s")).setup()

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR
        assert logging.root.level == logging.ERROR

    def test_verbose_overrides_config(self) -> None:
        logs = PrscoutLogging(LoggingConfig(level="ERROR"), verbose=True)
        assert logs.level == logging.DEBUG

    def test_package_debug_reaches_root_handler(self, capsys: pytest.CaptureFixture[str]) -> None:
        PrscoutLogging(LoggingConfig(level="DEBUG", format="%(name)s|%(message)s")).setup()

        logging.getLogger("prscout.adapters.bitbucket_cloud").debug("GET %s", "https://x")
        logging.getLogger("urllib3.connectionpool").debug("Starting new HTTPS connection")

        err = capsys.readouterr().err
        assert "prscout.adapters.bitbucket_cloud|GET https://x" in err
        assert "Starting new HTTPS connection" not in err

    def test_empty_format_uses_default(self) -> None:
        PrscoutLogging(LoggingConfig(level="INFO", format="")).setup()
        assert logging.root.handlers[0].formatter._fmt == DEFAULT_FORMAT
