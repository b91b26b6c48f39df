from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterator, Mapping, Tuple


RESERVED_KEYS = frozenset({"time", "level", "msg", "exc"})


def _iso_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds")


def _attrs(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "attrs", None) or {}


def flatten(attrs: Mapping[str, Any], prefix: str = "") -> Iterator[Tuple[str, Any]]:
    for key, value in attrs.items():
        # "" anahtarı grubun kendi değeri: req=r-1 req.id=2
        name = f"{prefix}{key}" if key or not prefix else prefix[:-1]
        if isinstance(value, Mapping):
            yield from flatten(value, name + ".")
        else:
            yield name, value


def _quote(value: Any) -> str:
    text = str(value)
    if text == "" or any(ch in text for ch in ' "=\n\t'):
        return json.dumps(text, ensure_ascii=False)
    return text


class TextFormatter(logging.Formatter):
    """time=... level=INFO msg="..." key=value (gruplar noktayla)."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"time={_iso_time(record)}",
            f"level={record.levelname}",
            f"msg={_quote(record.getMessage())}",
        ]
        parts.extend(f"{key}={_quote(value)}" for key, value in flatten(_attrs(record)))
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """Satır başına bir JSON nesnesi; gruplar iç içe nesne olur."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": _iso_time(record),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key, value in _attrs(record).items():
            # time/level/msg/exc ile çakışan alanlar fields.<key> olarak yazılır
            payload[f"fields.{key}" if key in RESERVED_KEYS else key] = value
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_formatter(fmt: str) -> logging.Formatter:
    name = str(fmt).lower()
    if name == "json":
        return JsonFormatter()
    if name == "text":
        return TextFormatter()
    raise ValueError(f"Unknown log format: {fmt!r}")
