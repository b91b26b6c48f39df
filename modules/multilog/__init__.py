"""
multilog modülü: tek logger arkasında çoklu hedefe (konsol + dönen dosya) loglama.

Dışa açılan basit API:
- init_multi_logger(overrides: dict | None) -> Logger
- get_default() / set_default(logger) / shutdown()
- info(msg, **attrs), error(...) vb. varsayılan logger üzerinden
- MultiHandler, LoggingHandler, HandlerError, Record
- get_memory_handler() -> InMemoryLogHandler | None
"""
from .services.handlers import Handler, HandlerError, LoggingHandler, MultiHandler
from .services.logger import Logger, StdlibBridgeHandler, isolated_logger
from .services.records import Record
from .xMultiLogService import (
    critical,
    debug,
    error,
    get_default,
    get_memory_handler,
    info,
    init_multi_logger,
    set_default,
    shutdown,
    warning,
)

__all__ = [
    "Handler",
    "HandlerError",
    "LoggingHandler",
    "MultiHandler",
    "Logger",
    "StdlibBridgeHandler",
    "isolated_logger",
    "Record",
    "init_multi_logger",
    "get_default",
    "set_default",
    "get_memory_handler",
    "shutdown",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
]
