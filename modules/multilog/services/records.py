"""Yapılandırılmış log kaydı ve seviye yardımcıları."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

Attrs = Tuple[Tuple[str, Any], ...]
ExcInfo = Optional[Tuple[Any, Any, Any]]

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL


def parse_level(level: Union[int, str]) -> int:
    """'info', 'INFO' veya 20 -> 20. Bilinmeyen isimde ValueError."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def level_name(level: int) -> str:
    return logging.getLevelName(level)


def to_attrs(attrs: Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]) -> Attrs:
    if not attrs:
        return ()
    items = attrs.items() if isinstance(attrs, Mapping) else attrs
    return tuple((str(k), v) for k, v in items)


@dataclass(frozen=True)
class Record:
    time: datetime
    level: int
    message: str
    attrs: Attrs = ()
    exc_info: ExcInfo = field(default=None, compare=False)

    @classmethod
    def create(
        cls,
        level: int,
        message: str,
        attrs: Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None] = None,
        exc_info: ExcInfo = None,
    ) -> "Record":
        return cls(
            time=datetime.now(timezone.utc).astimezone(),
            level=level,
            message=message,
            attrs=to_attrs(attrs),
            exc_info=exc_info,
        )

    @property
    def level_name(self) -> str:
        return level_name(self.level)

    def with_attrs(self, attrs: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]) -> "Record":
        extra = to_attrs(attrs)
        if not extra:
            return self
        return Record(self.time, self.level, self.message, self.attrs + extra, self.exc_info)
