from __future__ import annotations

import os
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG: Dict[str, Any] = {
    "enable_console": True,
    "console_level": "INFO",
    "console_format": "text",
    "console_stream": "stdout",  # stdout | stderr
    "enable_file": True,
    "file_path": "logs/app.log",
    "file_level": "INFO",
    "file_format": "json",
    "rotate_bytes": 1024 * 1024,  # 1MB
    "backup_count": 5,
    "max_age_days": 30,  # 0 -> yaşa göre silme kapalı
    "compress": True,  # dönen dosyaları gzip'le
    "buffer_size": 1000,  # in-memory ring buffer size, 0 disables
    "buffer_level": "INFO",
    "bridge_stdlib": True,  # logging.getLogger(...) kayıtlarını da topla
    "capture_warnings": True,
    # Per-module level overrides, e.g. {"urllib3": "WARNING"}
    "module_levels": {},
}


def load_config(base_dir: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """YAML config.yml dosyasını ve opsiyonel override'ları yükler.

    Arama sırası:
    - base_dir altında config/config.yml (eğer verildiyse)
    - modules/multilog/config/config.yml

    overrides sözlüğü sağlanırsa, YAML üzerindeki değerlere baskın gelir.
    LOG_LEVEL ve LOG_FILE ortam değişkenleri en son uygulanır.
    """
    cfg: Dict[str, Any] = dict(DEFAULT_CONFIG)

    candidates = []
    if base_dir:
        candidates.append(os.path.join(base_dir, "config", "config.yml"))
    here = os.path.dirname(__file__)
    candidates.append(os.path.join(here, "config", "config.yml"))

    for path in candidates:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if isinstance(data, dict):
                cfg.update(data)
            break

    if overrides:
        cfg.update({k: v for k, v in overrides.items() if v is not None})

    env_level = os.getenv("LOG_LEVEL")
    if env_level:
        cfg["console_level"] = env_level
    env_file = os.getenv("LOG_FILE")
    if env_file:
        cfg["file_path"] = env_file

    return cfg
