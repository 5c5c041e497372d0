"""Unit tests for cottontrace.core.logging."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from cottontrace.config import AppConfig
from cottontrace.core.logging import build_renderer, configure_logging, order_context


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_stdlib_records_carry_bound_context(self, capsys, restore_logging):
        configure_logging(AppConfig(log_format="json"))

        with structlog.contextvars.bound_contextvars(request_id="req-1", store="batches"):
            logging.getLogger("cottontrace.stores.base").info("Loaded 24 batches")

        line = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert line["event"] == "Loaded 24 batches"
        assert line["request_id"] == "req-1"
        assert line["store"] == "batches"
        assert line["service"] == "cottontrace"
        assert line["level"] == "info"

    def test_level_from_config(self, capsys, restore_logging):
        configure_logging(AppConfig(log_level="warning", log_format="json"))

        logging.getLogger("cottontrace.stores.base").info("hidden")

        assert "hidden" not in capsys.readouterr().out

    def test_repeated_configuration_keeps_one_handler(self, restore_logging):
        configure_logging(AppConfig(log_format="text"))
        configure_logging(AppConfig(log_format="json"))

        ours = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert len(ours) == 1

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            build_renderer("xml")


class TestOrderContext:
    def test_context_keys_come_first(self):
        event = {"event": "store_unavailable", "store": "batches", "request_id": "req-1"}

        ordered = order_context(None, "warning", event)

        assert list(ordered) == ["request_id", "store", "event"]
