from __future__ import annotations

import logging
import logging.config
import os
import sys
import warnings
from typing import Any, Dict, List, Optional, Tuple

from .config_loader import load_config
from .services.destinations import ConsoleHandler, InMemoryLogHandler, RotatingFileHandler
from .services.formatters import build_formatter
from .services.handlers import Handler, LoggingHandler, MultiHandler
from .services.logger import Logger, StdlibBridgeHandler
from .services.records import parse_level

_DEFAULT: Optional[Logger] = None
_INITIALIZED = False
_MEMORY_HANDLER: Optional[InMemoryLogHandler] = None
_BRIDGE: Optional[StdlibBridgeHandler] = None


def _ensure_log_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def build_handlers(cfg: Dict[str, Any]) -> Tuple[List[Handler], Optional[InMemoryLogHandler]]:
    """Konfigürasyondan alt handler listesini kurar: konsol, dosya, bellek.

    Sıra sabittir; fan-out handler kayıtları bu sırayla iletir.
    """
    children: List[Handler] = []
    memory: Optional[InMemoryLogHandler] = None

    if cfg.get("enable_console", True):
        stream = sys.stderr if str(cfg.get("console_stream", "stdout")).lower() == "stderr" else sys.stdout
        console = ConsoleHandler(stream, level=parse_level(cfg.get("console_level", "INFO")))
        console.setFormatter(build_formatter(cfg.get("console_format", "text")))
        children.append(LoggingHandler(console, name="console"))

    if cfg.get("enable_file", True):
        path = str(cfg.get("file_path", "logs/app.log"))
        _ensure_log_dir(path)
        rotating = RotatingFileHandler(
            path,
            max_bytes=int(cfg.get("rotate_bytes", 1024 * 1024)),
            backup_count=int(cfg.get("backup_count", 5)),
            max_age_days=float(cfg.get("max_age_days", 30)),
            compress=bool(cfg.get("compress", True)),
            level=parse_level(cfg.get("file_level", "INFO")),
        )
        rotating.setFormatter(build_formatter(cfg.get("file_format", "json")))
        children.append(LoggingHandler(rotating, name="file"))

    buffer_size = int(cfg.get("buffer_size", 1000))
    if buffer_size > 0:
        memory = InMemoryLogHandler(maxlen=buffer_size, level=parse_level(cfg.get("buffer_level", "INFO")))
        memory.setFormatter(build_formatter("text"))
        children.append(LoggingHandler(memory, name="in_memory"))

    return children, memory


def init_multi_logger(overrides: Optional[Dict[str, Any]] = None) -> Logger:
    """Süreç genelindeki varsayılan logger'ı kurar ve döner.

    - Konsol, dönen dosya ve bellek hedefleri tek MultiHandler altında
    - logging modülü kayıtları köprü handler ile aynı hedeflere gider
    - Warnings capture, modül bazlı stdlib seviyeleri
    Bir kez kurulur; sonraki çağrılar mevcut logger'ı döner.
    """
    global _DEFAULT, _INITIALIZED, _MEMORY_HANDLER, _BRIDGE

    # Zaten kuruluysa tekrar yapılandırma
    if _INITIALIZED and _DEFAULT is not None:
        return _DEFAULT

    cfg = load_config(overrides=overrides)
    children, memory = build_handlers(cfg)
    logger = Logger(MultiHandler(*children))

    _DEFAULT = logger
    _MEMORY_HANDLER = memory
    _INITIALIZED = True

    if cfg.get("bridge_stdlib", True):
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "handlers": {
                    "multilog": {
                        "()": StdlibBridgeHandler,
                        "resolve": get_default,
                        "level": "DEBUG",
                    }
                },
                "root": {
                    "level": "DEBUG",
                    "handlers": ["multilog"],
                },
            }
        )
        for h in logging.getLogger().handlers:
            if isinstance(h, StdlibBridgeHandler):
                _BRIDGE = h
                break

    # Warnings -> logging -> multilog
    if cfg.get("capture_warnings", True):
        logging.captureWarnings(True)
        warnings.simplefilter("default")

    # Module bazlı level override
    for name, level in (cfg.get("module_levels") or {}).items():
        logging.getLogger(name).setLevel(parse_level(level))

    logger.info(
        "multilog initialized",
        destinations=[h.name for h in children if isinstance(h, LoggingHandler)],
    )
    return logger


def get_default() -> Logger:
    """Varsayılan logger; kurulmadıysa stderr'e INFO yazan geçici bir logger."""
    global _DEFAULT
    if _DEFAULT is None:
        console = ConsoleHandler(sys.stderr, level=logging.INFO)
        console.setFormatter(build_formatter("text"))
        _DEFAULT = Logger(MultiHandler(LoggingHandler(console, name="console")))
    return _DEFAULT


def set_default(logger: Logger) -> None:
    global _DEFAULT
    _DEFAULT = logger


def get_memory_handler() -> Optional[InMemoryLogHandler]:
    return _MEMORY_HANDLER


def shutdown() -> None:
    """Handler'ları kapatır, köprüyü söker ve varsayılanı unutur."""
    global _DEFAULT, _INITIALIZED, _MEMORY_HANDLER, _BRIDGE
    if _BRIDGE is not None:
        logging.getLogger().removeHandler(_BRIDGE)
        _BRIDGE = None
    logging.captureWarnings(False)
    if _DEFAULT is not None:
        _DEFAULT.close()
    _DEFAULT = None
    _INITIALIZED = False
    _MEMORY_HANDLER = None


def debug(msg: str, /, **attrs: Any) -> None:
    get_default().debug(msg, **attrs)


def info(msg: str, /, **attrs: Any) -> None:
    get_default().info(msg, **attrs)


def warning(msg: str, /, **attrs: Any) -> None:
    get_default().warning(msg, **attrs)


def error(msg: str, /, **attrs: Any) -> None:
    get_default().error(msg, **attrs)


def critical(msg: str, /, **attrs: Any) -> None:
    get_default().critical(msg, **attrs)


if __name__ == "__main__":
    # Servis gibi çalıştırıldığında basit demo
    log = init_multi_logger()
    log.info("Multilog service started", pid=os.getpid())
    req = log.with_group("request").with_attributes(request_id="abc")
    req.warning("slow request", elapsed_ms=1250)
    logging.getLogger("multilog.demo").error("stdlib logger error")
    shutdown()
