"""Tests for structured logging setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from m2doctor.core.logging import setup_logging

pytestmark = pytest.mark.usefixtures("restore_logging")


def test_default_level(monkeypatch):
    monkeypatch.delenv("M2DOCTOR_LOG_LEVEL", raising=False)
    setup_logging()
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("m2doctor").level == logging.INFO


def test_env_level(monkeypatch):
    monkeypatch.setenv("M2DOCTOR_LOG_LEVEL", "warning")
    setup_logging()
    assert logging.getLogger("m2doctor").level == logging.WARNING


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("M2DOCTOR_LOG_LEVEL", "WARNING")
    setup_logging("DEBUG")
    assert logging.getLogger("m2doctor").level == logging.DEBUG


def test_json_format(monkeypatch, capsys):
    monkeypatch.setenv("M2DOCTOR_LOG_FORMAT", "json")
    setup_logging()
    structlog.get_logger("m2doctor.test").info("scanner.completed", invalid=2)
    err = capsys.readouterr().err
    assert '"event": "scanner.completed"' in err
    assert '"invalid": 2' in err
