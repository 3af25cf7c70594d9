from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"
_LEVEL_ENV_VAR = "JSONCLIENT_LOG_LEVEL"
_DEBUG_FLAG = "JSONCLIENT_DEBUG"
# Transport loggers that are only useful while debugging.
_NOISY_LOGGERS = ("urllib3", "cachecontrol")


def _coerce_level(value: Optional[str], fallback: int) -> int:
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    candidate = getattr(logging, text.upper(), None)
    return candidate if isinstance(candidate, int) else fallback


def _env_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _env_level() -> Optional[int]:
    explicit = os.getenv(_LEVEL_ENV_VAR)
    if explicit:
        return _coerce_level(explicit, logging.INFO)
    if _env_truthy(os.getenv(_DEBUG_FLAG)):
        return logging.DEBUG
    return None


def configure_root(default_level: int | str = logging.INFO) -> int:
    """
    Configure the root logger with a compact format and return the level.

    Environment overrides:
      - JSONCLIENT_LOG_LEVEL: explicit log level
      - JSONCLIENT_DEBUG: truthy -> DEBUG

    ``urllib3`` connection-pool and ``cachecontrol`` cache-decision messages
    stay at WARNING unless the effective level is DEBUG.
    """
    if isinstance(default_level, str):
        fallback = _coerce_level(default_level, logging.INFO)
    else:
        fallback = int(default_level)
    env_level = _env_level()
    effective = env_level if env_level is not None else fallback

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(effective)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if effective <= logging.DEBUG else logging.WARNING
        )
    return effective
