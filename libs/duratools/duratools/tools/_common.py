"""Shared command-line plumbing for the tools."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

from duratools.config import DuraStoreSettings, Settings
from duratools.exceptions import ConfigurationError, DuraToolsError
from duratools.utils.logging_setup import setup_logging

logger = logging.getLogger("duratools.tools")

BANNER_RULE = "-" * 41
DRY_RUN_NOTICE = "This execution is a DRY RUN - no changes will be made!"


def add_durastore_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("DuraStore connection")
    group.add_argument("-H", "--host", help="the host address of the DuraCloud DuraStore application")
    group.add_argument(
        "-t",
        "--port",
        type=int,
        help="the port of the DuraCloud DuraStore application (default 443)",
    )
    group.add_argument("-u", "--username", help="the username necessary to perform writes to DuraStore")
    group.add_argument("-p", "--password", help="the password necessary to perform writes to DuraStore")
    group.add_argument("-i", "--store-id", help="the ID of the store (optional, default is the primary store)")


def durastore_settings(args: argparse.Namespace, base: DuraStoreSettings) -> DuraStoreSettings:
    """Apply command-line overrides on top of environment-derived settings."""
    # Not every tool offers every connection option.
    fields = ("host", "port", "username", "password", "store_id")
    overrides = {name: getattr(args, name, None) for name in fields}
    merged = base.model_copy(update={k: v for k, v in overrides.items() if v not in (None, "")})
    merged.require_credentials()
    return merged


def log_banner(title: str, config: dict[str, object], *, dry_run: bool = False) -> None:
    lines = [BANNER_RULE, f"Running {title} with config:"]
    lines.extend(f"{name}={value}" for name, value in config.items())
    if dry_run:
        lines.append(DRY_RUN_NOTICE)
    lines.append(BANNER_RULE)
    logger.info("\n" + "\n".join(lines))


def read_id_list(path: str | Path, *, what: str) -> list[str]:
    """Read one identifier per line, trimmed; blank lines are ignored."""
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"The {what} list file does not exist at {file_path}")
    with open(file_path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def timestamp_plain(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")


def timestamp_short(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m-%d")


def run_tool(
    args: argparse.Namespace,
    body: Callable[[Settings], None],
    *,
    settings: Settings | None = None,
) -> int:
    settings = settings or Settings()
    setup_logging(settings, level="DEBUG" if getattr(args, "verbose", False) else None)
    try:
        body(settings)
    except DuraToolsError as exc:
        logger.error("%s", exc)
        return 1
    except (BotoCoreError, ClientError) as exc:
        logger.error("AWS request failed: %s", exc)
        return 1
    return 0
