"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from alz_naming.logging_config import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_sets_root_level():
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_defaults_to_info():
    configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_json_output(capsys):
    configure_logging("INFO", json_output=True)

    get_logger("alz_naming.test").info("suffix_assigned", deployment_key="avd/prod/we/avd")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "suffix_assigned"
    assert event["deployment_key"] == "avd/prod/we/avd"
    assert event["level"] == "info"


def test_console_output(capsys):
    configure_logging("INFO")

    get_logger("alz_naming.test").warning("region_unknown", location="Mars Central")

    err = capsys.readouterr().err
    assert "region_unknown" in err
    assert "Mars Central" in err
