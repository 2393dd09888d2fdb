# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for StructlogAdapter."""

import json
import logging

import pytest
import structlog

from shielderrors.core.config import Config
from shielderrors.core.properties import LoggingProperties
from shielderrors.handler import GlobalExceptionHandler
from shielderrors.logging import StructlogAdapter, build_processors, level_number


class TestBuildProcessors:
    def test_console_ends_with_console_renderer(self):
        processors = build_processors("console")
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert structlog.processors.dict_tracebacks not in processors

    def test_json_renders_tracebacks_as_dicts(self):
        processors = build_processors("json")
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert processors[-2] is structlog.processors.dict_tracebacks

    def test_service_field_added_when_set(self):
        assert len(build_processors("json", service="loans")) == len(build_processors("json")) + 1

    def test_unknown_format_raises(self):
        with pytest.raises(ValueError, match="Unknown log format 'xml'"):
            build_processors("xml")


class TestLevelNumber:
    def test_names_are_case_insensitive(self):
        assert level_number("debug") == logging.DEBUG
        assert level_number("WARNING") == logging.WARNING

    def test_unknown_level_raises(self):
        with pytest.raises(ValueError, match="Unknown log level 'loud'"):
            level_number("loud")


class TestStructlogAdapterConfigure:
    def test_from_config_binds_logging_section(self):
        adapter = StructlogAdapter.from_config(Config({"shield": {"logging": {"format": "json", "service": "loans"}}}))
        assert adapter.properties.format == "json"
        assert adapter.properties.service == "loans"
        assert adapter.properties.enabled is False

    def test_sets_root_and_module_levels(self):
        adapter = StructlogAdapter(LoggingProperties(level={"root": "debug", "shielderrors": "error"}))
        adapter.configure()
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("shielderrors").level == logging.ERROR
        logging.getLogger("shielderrors").setLevel(logging.NOTSET)

    def test_invalid_level_leaves_structlog_untouched(self):
        before = structlog.get_config()["processors"]
        with pytest.raises(ValueError):
            StructlogAdapter(LoggingProperties(level={"root": "loud"})).configure()
        assert structlog.get_config()["processors"] == before

    def test_handler_events_render_as_json(self, capsys):
        StructlogAdapter(LoggingProperties(format="json", service="loans")).configure()
        handler = GlobalExceptionHandler(trace_id_generator=lambda: "trace-1")

        try:
            raise RuntimeError("connection reset")
        except RuntimeError as exc:
            handler.handle(exc)

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
        assert len(lines) == 1
        entry = lines[0]
        assert entry["event"] == "unhandled_exception"
        assert entry["level"] == "error"
        assert entry["logger"] == "shielderrors"
        assert entry["service"] == "loans"
        assert entry["trace_id"] == "trace-1"
        assert entry["exception"][0]["exc_type"] == "RuntimeError"

    def test_module_level_silences_handler_events(self, capsys):
        StructlogAdapter(LoggingProperties(format="json", level={"root": "INFO", "shielderrors": "CRITICAL"})).configure()
        GlobalExceptionHandler().handle(RuntimeError("quiet"))
        assert capsys.readouterr().out == ""
        logging.getLogger("shielderrors").setLevel(logging.NOTSET)
