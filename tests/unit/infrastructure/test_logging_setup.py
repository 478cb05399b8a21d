"""Tests for the structlog/stdlib logging wiring."""

from __future__ import annotations

import logging

import structlog

from manifestarr.infrastructure.config import AppConfig
from manifestarr.infrastructure.logging.setup import (
    _LevelRangeFilter,
    _renderer,
    build_logging_config,
)


def _record(level: int) -> logging.LogRecord:
    return logging.LogRecord("t", level, __file__, 1, "msg", None, None)


class TestBuildLoggingConfig:
    def test_handlers_use_structlog_formatter(self) -> None:
        cfg = build_logging_config(AppConfig())
        assert cfg["handlers"]["default"]["formatter"] == "structlog"
        assert cfg["handlers"]["access"]["formatter"] == "structlog"

    def test_level_applied_to_uvicorn_and_root(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="WARNING"))
        assert cfg["root"]["level"] == "WARNING"
        assert cfg["loggers"]["uvicorn"]["level"] == "WARNING"
        assert cfg["loggers"]["uvicorn.access"]["level"] == "WARNING"


class TestRenderer:
    def test_console_in_dev(self) -> None:
        assert isinstance(_renderer(AppConfig()), structlog.dev.ConsoleRenderer)

    def test_json_in_prod(self) -> None:
        renderer = _renderer(AppConfig(environment="prod"))
        assert isinstance(renderer, structlog.processors.JSONRenderer)


class TestLevelRangeFilter:
    def test_stdout_range(self) -> None:
        f = _LevelRangeFilter(logging.NOTSET, logging.WARNING)
        assert f.filter(_record(logging.INFO))
        assert f.filter(_record(logging.WARNING))
        assert not f.filter(_record(logging.ERROR))

    def test_stderr_range(self) -> None:
        f = _LevelRangeFilter(logging.ERROR, logging.CRITICAL)
        assert not f.filter(_record(logging.WARNING))
        assert f.filter(_record(logging.CRITICAL))
