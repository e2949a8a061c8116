"""Unit tests for observability logging."""

from __future__ import annotations

import asyncio
import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from catalog_search.application.search import (
    ProductSearchService,
    SearchCriteriaCompiler,
    SearchRequest,
)
from catalog_search.observability.logging import JsonLoggerFactory, get_logger


class _Executor:
    def __init__(self, count_error: Exception | None = None) -> None:
        self.count_error = count_error

    async def fetch(self, compiler, pagination):
        return ["a", "b"]

    async def count(self, compiler):
        if self.count_error is not None:
            raise self.count_error
        return 2

    async def count_base(self):
        return 7


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("catalog", service="search").info("hello", n=1)
        assert logs == [{"event": "hello", "n": 1, "service": "search", "log_level": "info"}]

    def test_without_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("catalog").warning("careful")
        assert logs[0]["event"] == "careful"
        assert logs[0]["log_level"] == "warning"


class TestJsonLoggerFactory:
    def test_renders_json_through_root_handler(self, restore_logging, capsys) -> None:
        JsonLoggerFactory.configure(logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

        structlog.get_logger("catalog.test").info("search.completed", total=3)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "search.completed"
        assert payload["total"] == 3
        assert payload["level"] == "info"
        assert payload["logger"] == "catalog.test"
        assert "timestamp" in payload


class TestSearchLogEvents:
    def test_compile_logs_debug_event(self) -> None:
        compiler = SearchCriteriaCompiler(SearchRequest(search="laptop"))
        with capture_logs() as logs:
            compiler.plan()
        [event] = [e for e in logs if e["event"] == "search.compiled"]
        assert event["log_level"] == "debug"
        assert event["variant"] == "full"
        assert event["cache_key"] == compiler.get_cache_key()

    def test_service_logs_completion(self) -> None:
        with capture_logs() as logs:
            asyncio.run(ProductSearchService(_Executor()).search(SearchRequest()))
        [event] = [e for e in logs if e["event"] == "search.completed"]
        assert event["log_level"] == "info"
        assert event["total"] == 2
        assert event["returned"] == 2

    def test_service_logs_count_fallback(self) -> None:
        with capture_logs() as logs:
            page = asyncio.run(
                ProductSearchService(_Executor(RuntimeError("timeout"))).search(SearchRequest())
            )
        assert page.total == 7
        [event] = [e for e in logs if e["event"] == "search.count_failed"]
        assert event["log_level"] == "warning"
        assert event["error"] == "timeout"
