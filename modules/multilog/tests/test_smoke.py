from __future__ import annotations

import json
import logging

import pytest

import modules.multilog as multilog
from modules.multilog import get_memory_handler, init_multi_logger, shutdown


@pytest.fixture(autouse=True)
def _reset(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FILE", raising=False)
    shutdown()
    yield
    shutdown()


def test_smoke_memory_handler():
    init_multi_logger({"enable_file": False})  # file IO'yu kapat
    multilog.debug("dbg")
    multilog.info("info")
    handler = get_memory_handler()
    assert handler is not None
    items = handler.tail(5)
    assert any("msg=info" in i for i in items)
    assert not any("msg=dbg" in i for i in items)


def test_init_is_idempotent():
    first = init_multi_logger({"enable_file": False})
    second = init_multi_logger({"enable_file": False, "console_level": "DEBUG"})
    assert first is second
    assert multilog.get_default() is first


def test_console_and_file_receive_records(tmp_path, capsys):
    path = tmp_path / "logs" / "app.log"
    log = init_multi_logger({"file_path": str(path), "buffer_size": 0})
    log.with_attributes(request_id="abc").info("hello", user="ada")
    shutdown()

    out = capsys.readouterr().out
    assert "msg=hello" in out
    assert "request_id=abc" in out
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert lines[0]["msg"] == "multilog initialized"
    assert lines[0]["destinations"] == ["console", "file"]
    last = lines[-1]
    assert (last["msg"], last["request_id"], last["user"]) == ("hello", "abc", "ada")


def test_stdlib_loggers_are_bridged():
    init_multi_logger({"enable_file": False, "module_levels": {"noisy.lib": "ERROR"}})
    logging.getLogger("third.party").warning("careful")
    logging.getLogger("noisy.lib").warning("suppressed")
    items = get_memory_handler().tail(10)
    assert any("msg=careful" in i and "logger=third.party" in i for i in items)
    assert not any("suppressed" in i for i in items)


def test_default_before_init_writes_to_stderr(capsys):
    multilog.info("early bird")
    assert "early bird" in capsys.readouterr().err


def test_bad_level_fails_fast():
    with pytest.raises(ValueError):
        init_multi_logger({"enable_file": False, "console_level": "LOUD"})


def test_default_wiring_drops_debug():
    log = init_multi_logger({"enable_file": False})
    assert log.enabled(logging.DEBUG) is False
    logging.getLogger("chatty.lib").debug("internal detail")
    assert not any("internal detail" in i for i in get_memory_handler().tail(10))


def test_module_helpers_accept_msg_and_level_attrs():
    init_multi_logger({"enable_file": False})
    multilog.info("hello", msg="payload", level="high")
    (line,) = get_memory_handler().tail(1)
    assert "msg=hello" in line
    assert "msg=payload" in line
    assert "level=high" in line
