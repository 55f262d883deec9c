"""Shared fixtures."""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer BITBUCKET_* / LOGGING_* variables out of settings models."""
    for key in list(os.environ):
        if key.startswith(("BITBUCKET_", "LOGGING_")):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_log_level():
    """main() and PrscoutLogging.setup() set the prscout logger level globally."""
    yield
    logging.getLogger("prscout").setLevel(logging.NOTSET)
