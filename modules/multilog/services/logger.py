"""Uygulama kodunun kullandığı seviyeli loglama cephesi (facade).

Kayıt yalnızca handler.is_enabled(level) True ise oluşturulur. Handler
hataları (HandlerError) varsayılan olarak çağırana fırlatılmaz; logging
modülünün politikası gibi logging.raiseExceptions açıksa stderr'e basılır.
"""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import datetime
from typing import Any, Callable, Dict, Mapping

from .handlers import Handler, HandlerError, MultiHandler
from .records import CRITICAL, DEBUG, ERROR, INFO, WARNING, ExcInfo, Record, to_attrs


class Logger:
    def __init__(self, handler: Handler, raise_errors: bool = False) -> None:
        self.handler = handler
        self.raise_errors = raise_errors

    def enabled(self, level: int) -> bool:
        return self.handler.is_enabled(level)

    def handle(self, record: Record) -> None:
        try:
            self.handler.handle(record)
        except HandlerError as err:
            self._report(err)

    def _report(self, err: HandlerError) -> None:
        if self.raise_errors:
            raise err
        if logging.raiseExceptions:
            sys.stderr.write("--- Logging error ---\n")
            traceback.print_exception(type(err), err, err.__traceback__, file=sys.stderr)

    def _log(self, level: int, msg: str, attrs: Dict[str, Any], exc_info: ExcInfo = None) -> None:
        if not self.enabled(level):
            return
        self.handle(Record.create(level, msg, attrs, exc_info=exc_info))

    def log(self, level: int, msg: str, /, *, exc_info: ExcInfo = None, **attrs: Any) -> None:
        self._log(level, msg, attrs, exc_info)

    def debug(self, msg: str, /, **attrs: Any) -> None:
        self._log(DEBUG, msg, attrs)

    def info(self, msg: str, /, **attrs: Any) -> None:
        self._log(INFO, msg, attrs)

    def warning(self, msg: str, /, **attrs: Any) -> None:
        self._log(WARNING, msg, attrs)

    def error(self, msg: str, /, **attrs: Any) -> None:
        self._log(ERROR, msg, attrs)

    def critical(self, msg: str, /, **attrs: Any) -> None:
        self._log(CRITICAL, msg, attrs)

    def exception(self, msg: str, /, **attrs: Any) -> None:
        """except bloğu içinde ERROR seviyesinde, aktif hatayla birlikte loglar."""
        self._log(ERROR, msg, attrs, sys.exc_info())

    def with_attributes(self, /, **attrs: Any) -> "Logger":
        return Logger(self.handler.with_attributes(attrs), self.raise_errors)

    def with_group(self, name: str) -> "Logger":
        return Logger(self.handler.with_group(name), self.raise_errors)

    def close(self) -> None:
        self.handler.close()


class StdlibBridgeHandler(logging.Handler):
    """logging modülüne gelen kayıtları facade logger'a aktarır.

    extra={"attrs": {...}} ile verilen alanlar kayda eklenir; kaynak logger
    adı 'logger' alanında taşınır.
    """

    def __init__(self, resolve: Callable[[], Logger], level: int = logging.NOTSET) -> None:
        super().__init__(level=level)
        self._resolve = resolve

    def emit(self, record: logging.LogRecord) -> None:
        logger = self._resolve()
        if not logger.enabled(record.levelno):
            return
        attrs = {"logger": record.name}
        extra = getattr(record, "attrs", None)
        if isinstance(extra, Mapping):
            attrs.update(extra)
        logger.handle(
            Record(
                time=datetime.fromtimestamp(record.created).astimezone(),
                level=record.levelno,
                message=record.getMessage(),
                attrs=to_attrs(attrs),
                exc_info=record.exc_info,
            )
        )


def isolated_logger(*handlers: Handler, raise_errors: bool = False) -> Logger:
    """Global varsayılana dokunmadan bağımsız bir logger kurar (testler için)."""
    return Logger(MultiHandler(*handlers), raise_errors=raise_errors)


__all__ = ["Logger", "StdlibBridgeHandler", "isolated_logger"]
