"""boto3 session and client construction."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from duratools.config import AWSSettings

# Clients are only ever driven from one thread.
_CLIENT_CONFIG = Config(max_pool_connections=4)


def build_session(settings: AWSSettings) -> boto3.Session:
    return boto3.Session(
        profile_name=settings.profile or None,
        region_name=settings.region or None,
    )


def s3_client(session: boto3.Session) -> Any:
    return session.client("s3", config=_CLIENT_CONFIG)


def transcoder_client(session: boto3.Session) -> Any:
    return session.client("elastictranscoder", config=_CLIENT_CONFIG)


def s3_client_for_keys(access_key: str, secret_key: str, *, region: str | None = None) -> Any:
    """S3 client for an explicit access key pair (used when no profile is configured)."""
    return boto3.client(
        "s3",
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name=region or None,
        config=_CLIENT_CONFIG,
    )
