from __future__ import annotations

import io
import json
import logging

import pytest

from modules.multilog.services.destinations import ConsoleHandler, InMemoryLogHandler, RotatingFileHandler
from modules.multilog.services.formatters import JsonFormatter, TextFormatter
from modules.multilog.services.handlers import HandlerError, LoggingHandler, MultiHandler
from modules.multilog.services.records import DEBUG, INFO, Record


class BrokenStream(io.StringIO):
    def write(self, s: str) -> int:
        raise OSError(28, "No space left on device")


def _memory(fmt: logging.Formatter, level: int = INFO) -> InMemoryLogHandler:
    memory = InMemoryLogHandler(maxlen=50, level=level)
    memory.setFormatter(fmt)
    return memory


def test_attributes_and_groups_render_as_nested_json():
    memory = _memory(JsonFormatter())
    handler = (
        LoggingHandler(memory)
        .with_attributes({"service": "api"})
        .with_group("request")
        .with_attributes({"id": "abc"})
    )

    handler.handle(Record.create(INFO, "served", {"status": 200}))

    payload = json.loads(memory.tail(1)[0])
    assert payload["msg"] == "served"
    assert payload["level"] == "INFO"
    assert payload["service"] == "api"
    assert payload["request"] == {"id": "abc", "status": 200}


def test_text_output_flattens_groups_with_dots():
    memory = _memory(TextFormatter())
    handler = LoggingHandler(memory).with_group("db").with_attributes({"table": "users"})

    handler.handle(Record.create(INFO, "query done", {"rows": 3}))

    line = memory.tail(1)[0]
    assert 'msg="query done"' in line
    assert "db.table=users" in line
    assert "db.rows=3" in line


def test_empty_group_is_not_rendered():
    memory = _memory(JsonFormatter())
    LoggingHandler(memory).with_group("empty").handle(Record.create(INFO, "plain"))
    assert "empty" not in json.loads(memory.tail(1)[0])


def test_noop_derivations_return_same_instance():
    handler = LoggingHandler(_memory(TextFormatter()))
    assert handler.with_group("") is handler
    assert handler.with_attributes({}) is handler


def test_derivation_does_not_mutate_receiver():
    memory = _memory(JsonFormatter())
    base = LoggingHandler(memory)
    base.with_attributes({"k": "v"})
    base.handle(Record.create(INFO, "x"))
    assert "k" not in json.loads(memory.tail(1)[0])


def test_records_below_target_level_are_skipped():
    memory = _memory(TextFormatter(), level=INFO)
    handler = LoggingHandler(memory)
    assert handler.is_enabled(DEBUG) is False
    handler.handle(Record.create(DEBUG, "hidden"))
    assert memory.tail() == []


def test_heterogeneous_levels_each_keep_their_threshold():
    console = _memory(TextFormatter(), level=INFO)
    file = _memory(TextFormatter(), level=DEBUG)
    multi = MultiHandler(LoggingHandler(console), LoggingHandler(file))

    assert multi.is_enabled(DEBUG) is True
    multi.handle(Record.create(DEBUG, "details"))

    assert console.tail() == []
    assert len(file.tail()) == 1


def test_write_failure_surfaces_as_handler_error():
    handler = LoggingHandler(ConsoleHandler(BrokenStream()))
    with pytest.raises(HandlerError) as info:
        handler.handle(Record.create(INFO, "lost"))
    assert isinstance(info.value.error, OSError)
    assert info.value.handler is handler


def test_console_first_then_unwritable_file(tmp_path):
    out = io.StringIO()
    console = ConsoleHandler(out)
    console.setFormatter(TextFormatter())
    path = tmp_path / "app.log"
    path.mkdir()  # dosya yerine dizin: yazılamaz hedef
    file = RotatingFileHandler(str(path), compress=False)
    file.setFormatter(JsonFormatter())
    multi = MultiHandler(LoggingHandler(console, name="console"), LoggingHandler(file, name="file"))

    with pytest.raises(HandlerError) as info:
        multi.handle(Record.create(INFO, "first"))
    assert info.value.handler.name == "file"
    assert "first" in out.getvalue()

    path.rmdir()
    multi.handle(Record.create(INFO, "second"))
    file.close()

    assert "second" in out.getvalue()
    (line,) = path.read_text(encoding="utf-8").splitlines()
    assert json.loads(line)["msg"] == "second"


def test_request_id_is_added_exactly_once_per_child():
    a = _memory(TextFormatter())
    b = _memory(JsonFormatter())
    multi = MultiHandler(LoggingHandler(a), LoggingHandler(b)).with_attributes({"request_id": "abc"})

    multi.handle(Record.create(INFO, "handled"))

    assert a.tail(1)[0].count("request_id=abc") == 1
    assert b.tail(1)[0].count('"request_id"') == 1


def test_bound_value_survives_group_of_same_name():
    text = _memory(TextFormatter())
    js = _memory(JsonFormatter())
    multi = MultiHandler(LoggingHandler(text), LoggingHandler(js))

    multi.with_attributes({"req": "r-1"}).with_group("req").handle(Record.create(INFO, "x", {"id": 2}))

    line = text.tail(1)[0]
    assert "req=r-1" in line
    assert "req.id=2" in line
    assert json.loads(js.tail(1)[0])["req"] == {"": "r-1", "id": 2}
