"""Handler sözleşmesi, fan-out (multi) handler ve stdlib adaptörü.

Her Handler dört işlem sunar:
- handle(record): kaydı hedefe yazar, hata durumunda HandlerError
- is_enabled(level): bu seviye için kayıt üretmeye değer mi
- with_attributes(attrs): ek alanlar bağlanmış yeni handler
- with_group(name): sonraki alanları gruba alan yeni handler

MultiHandler da bir Handler olduğu için iç içe kullanılabilir.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple, Union

from .records import Record, level_name, to_attrs

AttrsLike = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


class HandlerError(Exception):
    """Bir alt handler kaydı yazamadığında yükseltilir."""

    def __init__(self, handler: "Handler", error: BaseException) -> None:
        super().__init__(f"{handler!r} failed: {error}")
        self.handler = handler
        self.error = error


class Handler(ABC):
    @abstractmethod
    def handle(self, record: Record) -> None:
        ...

    @abstractmethod
    def is_enabled(self, level: int) -> bool:
        ...

    @abstractmethod
    def with_attributes(self, attrs: AttrsLike) -> "Handler":
        ...

    @abstractmethod
    def with_group(self, name: str) -> "Handler":
        ...

    def close(self) -> None:
        pass


class MultiHandler(Handler):
    """Kayıtları sabit sıradaki alt handler'ların hepsine iletir.

    - handle: sırayla iletir, ilk hatada HandlerError ile durur
      (sonraki alt handler'lar o kayıt için atlanır)
    - is_enabled: alt handler'lardan biri açıksa True
    - with_attributes / with_group: her alt handler türetilir, sıra korunur
    """

    def __init__(self, *handlers: Handler) -> None:
        self._handlers: Tuple[Handler, ...] = tuple(handlers)

    @property
    def handlers(self) -> Tuple[Handler, ...]:
        return self._handlers

    def handle(self, record: Record) -> None:
        for handler in self._handlers:
            try:
                handler.handle(record)
            except HandlerError:
                raise
            except Exception as exc:
                raise HandlerError(handler, exc) from exc

    def is_enabled(self, level: int) -> bool:
        return any(handler.is_enabled(level) for handler in self._handlers)

    def with_attributes(self, attrs: AttrsLike) -> "MultiHandler":
        attrs = to_attrs(attrs)
        return MultiHandler(*(handler.with_attributes(attrs) for handler in self._handlers))

    def with_group(self, name: str) -> "MultiHandler":
        return MultiHandler(*(handler.with_group(name) for handler in self._handlers))

    def close(self) -> None:
        for handler in self._handlers:
            handler.close()

    def __repr__(self) -> str:
        return f"MultiHandler({', '.join(repr(h) for h in self._handlers)})"


GroupPath = Tuple[str, ...]

# Aynı isimde hem değer hem grup varsa değer grubun "" anahtarında durur
LEAF = ""


def _descend(node: Dict[str, Any], group: str) -> Dict[str, Any]:
    current = node.get(group)
    if not isinstance(current, dict):
        node[group] = {LEAF: current} if group in node else {}
    return node[group]


def _place(node: Dict[str, Any], key: str, value: Any) -> None:
    if isinstance(value, Mapping):
        target = _descend(node, key)
        for k, v in value.items():
            _place(target, str(k), v)
    elif isinstance(node.get(key), dict):
        node[key][LEAF] = value
    else:
        node[key] = value


def nest(pairs: Sequence[Tuple[GroupPath, Any]]) -> Dict[str, Any]:
    """[(('req', 'id'), 1)] -> {'req': {'id': 1}}

    [(('req',), 'r-1'), (('req', 'id'), 2)] -> {'req': {'': 'r-1', 'id': 2}}
    """
    root: Dict[str, Any] = {}
    for path, value in pairs:
        node = root
        for group in path[:-1]:
            node = _descend(node, group)
        _place(node, path[-1], value)
    return root


class LoggingHandler(Handler):
    """logging.Handler örneğini Handler sözleşmesine uyarlar.

    Türetilen adaptörler aynı hedef handler'ı paylaşır; bağlı alanlar ve
    açık grup yolu her türetmede kopyalanır.
    """

    def __init__(
        self,
        target: logging.Handler,
        name: str = "multilog",
        _bound: Tuple[Tuple[GroupPath, Any], ...] = (),
        _groups: GroupPath = (),
    ) -> None:
        self.target = target
        self.name = name
        self._bound = _bound
        self._groups = _groups

    def is_enabled(self, level: int) -> bool:
        return level >= self.target.level

    def handle(self, record: Record) -> None:
        if not self.is_enabled(record.level):
            return
        pairs = self._bound + tuple((self._groups + (k,), v) for k, v in record.attrs)
        log_record = logging.LogRecord(
            name=self.name,
            level=record.level,
            pathname="",
            lineno=0,
            msg=record.message,
            args=None,
            exc_info=record.exc_info,
        )
        created = record.time.timestamp()
        log_record.created = created
        log_record.msecs = (created - int(created)) * 1000
        log_record.attrs = nest(pairs)
        try:
            self.target.handle(log_record)
        except Exception as exc:
            raise HandlerError(self, exc) from exc

    def with_attributes(self, attrs: AttrsLike) -> "LoggingHandler":
        attrs = to_attrs(attrs)
        if not attrs:
            return self
        bound = self._bound + tuple((self._groups + (k,), v) for k, v in attrs)
        return LoggingHandler(self.target, self.name, bound, self._groups)

    def with_group(self, name: str) -> "LoggingHandler":
        if not name:
            return self
        return LoggingHandler(self.target, self.name, self._bound, self._groups + (name,))

    def close(self) -> None:
        self.target.close()

    def __repr__(self) -> str:
        kind = type(self.target).__name__
        return f"<LoggingHandler {kind} level={level_name(self.target.level)}>"
