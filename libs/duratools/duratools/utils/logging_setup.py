"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from duratools.config import LoggingSettings, Settings

_LEVEL_ATTR = "_duratools_level"


def _resolve_level(name: str | None) -> int:
    return getattr(logging, str(name or "INFO").upper(), logging.INFO)


def _log_file(settings: Settings) -> Path | None:
    if not settings.logging.file:
        return None
    path = Path(str(settings.logging.file))
    if not path.is_absolute():
        path = Path(settings.log_dir) / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _build_handlers(settings: Settings, level: int) -> list[logging.Handler]:
    cfg: LoggingSettings = settings.logging
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))

    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    file_path = _log_file(settings)
    if file_path is not None:
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(cfg.max_bytes),
                backupCount=int(cfg.backup_count),
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings, *, level: str | None = None) -> None:
    """Configure the `duratools` logger tree for a tool run.

    Only the `duratools` logger (and its children) is touched; botocore and
    httpx loggers keep their own configuration. ``level`` overrides
    ``settings.logging.level`` (the tools' ``--verbose`` flags pass ``DEBUG``).
    Repeated calls are no-ops unless an explicit ``level`` differs from the
    configured one, in which case the old handlers are closed and replaced.
    """
    logger = logging.getLogger("duratools")
    current = getattr(logger, _LEVEL_ATTR, None)
    if current is not None and (level is None or _resolve_level(level) == current):
        return

    resolved = _resolve_level(level or settings.logging.level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    for handler in _build_handlers(settings, resolved):
        logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    setattr(logger, _LEVEL_ATTR, resolved)
