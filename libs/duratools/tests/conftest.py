from __future__ import annotations

import logging
from typing import Any

import pytest

from duratools.config import DuraStoreSettings, Settings


class FakeS3Client:
    """Minimal stand-in for a boto3 S3 client that serves canned listing pages."""

    def __init__(self, pages: list[tuple[list[str], bool]] | None = None) -> None:
        self._pages = list(pages or [])
        self.list_calls: list[dict[str, Any]] = []
        self.put_calls: list[dict[str, Any]] = []
        self.errors: list[BaseException] = []

    def list_objects(self, **kwargs: Any) -> dict[str, Any]:
        self.list_calls.append(kwargs)
        if self.errors:
            raise self.errors.pop(0)
        if not self._pages:
            raise AssertionError(f"unexpected list_objects call: {kwargs}")
        keys, truncated = self._pages.pop(0)
        resp: dict[str, Any] = {"IsTruncated": truncated, "Name": kwargs["Bucket"]}
        if keys:
            resp["Contents"] = [{"Key": key, "Size": 1} for key in keys]
        return resp

    def put_object(self, **kwargs: Any) -> dict[str, Any]:
        self.put_calls.append(kwargs)
        return {"ETag": '"etag"'}


class FakeTranscoderClient:
    def __init__(self) -> None:
        self.jobs: list[dict[str, Any]] = []

    def create_job(self, **kwargs: Any) -> dict[str, Any]:
        self.jobs.append(kwargs)
        return {"Job": {"Id": f"job-{len(self.jobs)}", "Status": "Submitted"}}


@pytest.fixture(autouse=True)
def _reset_duratools_logger():
    yield
    logger = logging.getLogger("duratools")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    if hasattr(logger, "_duratools_level"):
        delattr(logger, "_duratools_level")


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        log_dir=str(tmp_path / "logs"),
        output_dir=str(tmp_path / "out"),
    )


@pytest.fixture()
def durastore_settings() -> DuraStoreSettings:
    return DuraStoreSettings(
        host="dura.example.org",
        username="user",
        password="pass",
        store_id="1",
    )


@pytest.fixture()
def fake_s3_factory():
    return FakeS3Client


@pytest.fixture()
def fake_transcoder() -> FakeTranscoderClient:
    return FakeTranscoderClient()
