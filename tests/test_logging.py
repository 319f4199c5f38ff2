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

"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO

import pytest

from blueprint.codec import lift, number, optional, required, string, struct
from blueprint.runtime.logging import (
    StructuredLogger,
    _coerce_level,
    configure_logging,
    get_logger,
)
from tests.codec._fixtures import SomeEnum

pytestmark = pytest.mark.core


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@contextmanager
def _capture(logger: logging.Logger) -> Iterator[list[logging.LogRecord]]:
    handler = _CaptureHandler()
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
        handler.close()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


def test_structured_logger_emits_structured_records() -> None:
    logger = get_logger("tests.logging").bind(component="unit-test")

    with _capture(logger.logger) as records:
        logger.info("structured", event="tests.event", context={"attempt": 1})

    assert len(records) == 1
    record = records[0]
    assert record.event == "tests.event"  # type: ignore[attr-defined]
    assert record.context == {"component": "unit-test", "attempt": 1}  # type: ignore[attr-defined]
    assert record.getMessage() == "structured"


def test_structured_logger_handles_none_extra_and_merges_mapping() -> None:
    logger = get_logger("tests.logging.extra")

    with _capture(logger.logger) as records:
        logger.info("none-extra", event="tests.none", extra=None)
        logger.info("with-extra", extra={"event": "tests.extra", "count": 2})

    assert [record.event for record in records] == ["tests.none", "tests.extra"]  # type: ignore[attr-defined]
    assert records[0].context == {}  # type: ignore[attr-defined]
    assert records[1].context == {"count": 2}  # type: ignore[attr-defined]


def test_get_logger_uses_override_and_context() -> None:
    override = logging.getLogger("override")

    logger = get_logger("ignored", logger_override=override, context={"plain": True})

    assert isinstance(logger, StructuredLogger)
    assert logger.logger is override
    assert logger.extra == {"plain": True}


def test_structured_logger_requires_event_metadata() -> None:
    logger = get_logger("tests.missing")
    logger.logger.setLevel(logging.INFO)

    with pytest.raises(TypeError, match="'event' field"):
        logger.info("missing-event", extra={"detail": True})

    with pytest.raises(TypeError, match="context must be a mapping"):
        logger.info("bad-context", event="tests.bad", context=["x"])


def test_schema_declaration_is_logged() -> None:
    base_logger = logging.getLogger("blueprint.codec.struct")

    with _capture(base_logger) as records:

        @struct("logged")
        class Logged:
            name: str = required(string())
            size: int | None = optional(number("u16"))

    declared = [
        record for record in records if record.event == "codec.schema.declared"  # type: ignore[attr-defined]
    ]
    assert len(declared) == 1
    assert declared[0].context == {  # type: ignore[attr-defined]
        "component": "codec",
        "kind": "struct",
        "name": "logged",
        "fields": ["name", "size"],
    }


def test_unrelated_conversion_is_logged() -> None:
    base_logger = logging.getLogger("blueprint.codec.convert")

    with _capture(base_logger) as records:
        assert lift(SomeEnum, 3) is None
        assert lift(SomeEnum, None) is None

    assert len(records) == 1
    assert records[0].event == "codec.convert.unrelated"  # type: ignore[attr-defined]
    assert records[0].context["value_type"] == "int"  # type: ignore[attr-defined]
    assert records[0].context["target"] == "some_enum"  # type: ignore[attr-defined]


def test_configure_logging_respects_existing_handlers() -> None:
    root = logging.getLogger()
    root_handler = logging.NullHandler()
    root.handlers = [root_handler]

    configure_logging(level="DEBUG", json_mode=True)

    assert root.handlers == [root_handler]
    assert root.level == logging.DEBUG


def test_configure_logging_honors_env_toggle() -> None:
    configure_logging(
        force=True,
        env={"BLUEPRINT_LOG_FORMAT": "json", "BLUEPRINT_LOG_LEVEL": "warning"},
    )

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter.__class__.__name__ == "_JsonFormatter"
    assert root.level == logging.WARNING


def test_configure_logging_json_mode_emits_structured_output(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    stream = StringIO()
    monkeypatch.setattr(sys, "stderr", stream)

    configure_logging(json_mode=True, force=True)

    logger = get_logger("tests.logging.json").bind(component="json-test")
    logger.logger.setLevel(logging.INFO)

    logger.info("payload", event="tests.json", context={"key": "value", "obj": object()})

    root = logging.getLogger()
    root.handlers[0].flush()

    payload = json.loads(stream.getvalue().strip())
    assert payload["event"] == "tests.json"
    assert payload["context"]["component"] == "json-test"
    assert payload["context"]["key"] == "value"
    assert payload["context"]["obj"].startswith("<object object")
    assert payload["message"] == "payload"
    assert payload["logger"] == "tests.logging.json"


def test_configure_logging_defaults_to_text_formatter() -> None:
    configure_logging(force=True, env={})

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter.__class__.__name__ != "_JsonFormatter"
    assert root.level == logging.INFO


def test_coerce_level() -> None:
    assert _coerce_level(None) == logging.INFO
    assert _coerce_level(logging.ERROR) == logging.ERROR
    assert _coerce_level("debug") == logging.DEBUG

    with pytest.raises(TypeError, match="Unknown log level"):
        _coerce_level("loud")
