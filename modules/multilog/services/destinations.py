"""Hazır stdlib hedefleri: konsol, dönen dosya, bellek içi buffer.

Konsol ve dosya handler'ları yazma hatalarını stderr'e basıp yutmak yerine
yukarı fırlatır; LoggingHandler bunları HandlerError olarak iletir.
"""

from __future__ import annotations

import gzip
import logging
import logging.handlers
import os
import re
import shutil
import sys
import time
from collections import deque
from typing import Deque, Iterable, List, Optional, TextIO


class _RaiseErrorsMixin:
    # emit() handleError'ı except bloğu içinden çağırır; aktif hata yeniden fırlar
    def handleError(self, record: logging.LogRecord) -> None:  # noqa: N802
        raise


class ConsoleHandler(_RaiseErrorsMixin, logging.StreamHandler):
    def __init__(self, stream: Optional[TextIO] = None, level: int = logging.NOTSET) -> None:
        super().__init__(stream if stream is not None else sys.stdout)
        self.setLevel(level)


def _gzip_namer(name: str) -> str:
    return name + ".gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


class RotatingFileHandler(_RaiseErrorsMixin, logging.handlers.RotatingFileHandler):
    """Boyuta göre dönen dosya handler'ı.

    - max_bytes aşılınca döner, en fazla backup_count yedek tutar
    - compress=True ise yedekler gzip'lenir (app.log.1.gz)
    - max_age_days > 0 ise her dönüşte daha eski yedekler silinir
    - dosya ilk kayıtta açılır (delay)
    """

    def __init__(
        self,
        filename: str,
        max_bytes: int = 1024 * 1024,
        backup_count: int = 5,
        max_age_days: float = 30,
        compress: bool = True,
        level: int = logging.NOTSET,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(
            filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding=encoding,
            delay=True,
        )
        self.setLevel(level)
        self.max_age_days = max_age_days
        self.compress = compress
        if compress:
            self.namer = _gzip_namer
            self.rotator = _gzip_rotator

    def doRollover(self) -> None:  # noqa: N802
        super().doRollover()
        if self.max_age_days > 0:
            self.remove_expired()

    def backups(self) -> List[str]:
        directory, base = os.path.split(self.baseFilename)
        pattern = re.compile(re.escape(base) + r"\.\d+(\.gz)?$")
        return sorted(
            os.path.join(directory, name)
            for name in os.listdir(directory or ".")
            if pattern.match(name)
        )

    def remove_expired(self, now: Optional[float] = None) -> List[str]:
        cutoff = (now if now is not None else time.time()) - self.max_age_days * 86400
        removed = []
        for path in self.backups():
            if os.path.getmtime(path) < cutoff:
                os.remove(path)
                removed.append(path)
        return removed


class InMemoryLogHandler(logging.Handler):
    """Basit halka buffer log handler.

    - thread-safe: logging.Handler zaten lock içerir
    - formatlanmış stringleri saklar (emit sonrası)
    """

    def __init__(self, maxlen: int = 1000, level: int = logging.NOTSET) -> None:
        super().__init__(level=level)
        self.buffer: Deque[str] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self.buffer.append(self.format(record))

    def tail(self, n: int = 100) -> List[str]:
        if n <= 0:
            return []
        items = list(self.buffer)
        return items[max(0, len(items) - n):]

    def iter(self) -> Iterable[str]:
        return iter(self.buffer)
