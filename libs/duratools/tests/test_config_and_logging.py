from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from duratools.config import DuraStoreSettings, ListingSettings, LoggingSettings, Settings
from duratools.exceptions import ConfigurationError
from duratools.tools import snapshot_report
from duratools.tools._common import add_durastore_arguments, durastore_settings, read_id_list
from duratools.utils.logging_setup import setup_logging


def test_durastore_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DURACLOUD_HOST", "env.example.org")
    monkeypatch.setenv("DURACLOUD_PORT", "8443")
    monkeypatch.setenv("DURACLOUD_USERNAME", "env-user")
    monkeypatch.setenv("DURACLOUD_PASSWORD", "env-pass")

    settings = DuraStoreSettings()

    assert settings.base_url == "https://env.example.org:8443/durastore"
    settings.require_credentials()


def test_command_line_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DURACLOUD_HOST", "env.example.org")
    monkeypatch.setenv("DURACLOUD_USERNAME", "env-user")
    monkeypatch.setenv("DURACLOUD_PASSWORD", "env-pass")
    parser = argparse.ArgumentParser()
    add_durastore_arguments(parser)

    merged = durastore_settings(parser.parse_args(["-H", "cli.example.org", "-i", "5"]), DuraStoreSettings())

    assert merged.host == "cli.example.org"
    assert merged.username == "env-user"
    assert merged.store_id == "5"
    assert merged.port == 443


def test_missing_credentials_are_rejected() -> None:
    parser = argparse.ArgumentParser()
    add_durastore_arguments(parser)

    with pytest.raises(ConfigurationError, match="username"):
        durastore_settings(
            parser.parse_args(["-H", "h", "-p", "pw"]),
            DuraStoreSettings(host="", username="", password=""),
        )


def test_listing_page_size_bounds() -> None:
    assert ListingSettings().page_size == 10000
    with pytest.raises(ValidationError):
        ListingSettings(page_size=0)


def test_read_id_list(tmp_path: Path) -> None:
    path = tmp_path / "spaces.txt"
    path.write_text("space-a\n  space-b  \n\n", encoding="utf-8")

    assert read_id_list(path, what="spaces") == ["space-a", "space-b"]
    with pytest.raises(ConfigurationError):
        read_id_list(tmp_path / "missing.txt", what="spaces")


def test_setup_logging_configures_file_handler_once(tmp_path: Path) -> None:
    settings = Settings(
        log_dir=str(tmp_path / "logs"),
        logging=LoggingSettings(file="duratools.log", console=False),
    )

    setup_logging(settings, level="debug")
    setup_logging(settings)

    logger = logging.getLogger("duratools")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    logging.getLogger("duratools.tests").debug("hello")
    logger.handlers[0].flush()
    assert "hello" in (tmp_path / "logs" / "duratools.log").read_text(encoding="utf-8")
    logger.handlers[0].close()


def test_setup_logging_reconfigures_when_level_changes(tmp_path: Path) -> None:
    settings = Settings(
        log_dir=str(tmp_path / "logs"),
        logging=LoggingSettings(file="duratools.log", console=False),
    )
    logger = logging.getLogger("duratools")

    setup_logging(settings)
    first = logger.handlers[0]
    assert logger.level == logging.INFO

    setup_logging(settings, level="DEBUG")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.handlers[0] is not first
    assert logger.handlers[0].level == logging.DEBUG
    logging.getLogger("duratools.tools").debug("verbose detail")
    logger.handlers[0].flush()
    assert "verbose detail" in (tmp_path / "logs" / "duratools.log").read_text(encoding="utf-8")


def test_overrides_tolerate_parsers_without_port_or_store_id() -> None:
    args = snapshot_report.build_parser().parse_args(["-H", "cli.example.org", "-u", "user", "-p", "pw"])
    assert not hasattr(args, "port") and not hasattr(args, "store_id")

    merged = durastore_settings(args, DuraStoreSettings(host="", username="", password="", store_id="7"))

    assert merged.host == "cli.example.org"
    assert merged.port == 443
    assert merged.store_id == "7"
