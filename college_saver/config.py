from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from college_saver.domain.pricing import DEFAULT_FALLBACK_PRICES

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    fallback_prices: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FALLBACK_PRICES))


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _parse_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def _parse_prices(value: Any) -> Dict[str, float]:
    """Accepts a mapping (YAML) or "VTI=280,VOO=500" (environment)."""
    if isinstance(value, dict):
        items = value.items()
    else:
        items = []
        for part in str(value).split(","):
            if not part.strip():
                continue
            if "=" not in part:
                raise ValueError(f"fallback price entry {part!r} is not TICKER=PRICE")
            sym, price = part.split("=", 1)
            items.append((sym, price))
    return {str(sym).strip().upper(): float(price) for sym, price in items}


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Loads an optional YAML file + overrides from .env/environment variables.
    """
    load_dotenv()

    path = config_path or os.getenv("COLLEGE_SAVER_CONFIG", "config.yaml")
    cfg: Dict[str, Any] = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # empty env vars count as "not set"
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None or v.strip() == "":
            return _deep_get(cfg, cfg_path, default)
        return v.strip()

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = str(_env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")).upper()
    cors_origins = _parse_list(_env_or_cfg("CORS_ORIGINS", "api.cors_origins", DEFAULT_CORS_ORIGINS))
    fallback_prices = _parse_prices(
        _env_or_cfg("FALLBACK_PRICES", "pricing.fallback_prices", DEFAULT_FALLBACK_PRICES)
    )

    return Settings(
        env=env,
        log_level=log_level,
        cors_origins=cors_origins,
        fallback_prices=fallback_prices,
    )
