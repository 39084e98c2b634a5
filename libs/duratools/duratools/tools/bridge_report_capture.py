"""Capture a DuraCloud bridge report and archive it in S3.

The tool runs in one of two modes. Given every option it writes a properties
file holding the bridge and S3 connection details; given only ``-f`` it reads
that file, fetches the report from the bridge and stores it in the bucket.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

import httpx
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import dotenv_values, set_key
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from duratools.aws import s3_client_for_keys
from duratools.config import Settings
from duratools.exceptions import ConfigurationError, DuraToolsError
from duratools.tools._common import run_tool, timestamp_short

logger = logging.getLogger(__name__)

REPORT_NAME_PREFIX = "dcv-snapshot-report-"


class BridgeCaptureProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    bridge_url: str = Field(alias="bridge-url", min_length=1)
    bridge_username: str = Field(alias="bridge-username", min_length=1)
    bridge_password: str = Field(alias="bridge-password", min_length=1)
    s3_access_key: str = Field(alias="s3-access-key", min_length=1)
    s3_secret_key: str = Field(alias="s3-secret-key", min_length=1)
    s3_bucket_name: str = Field(alias="s3-bucket-name", min_length=1)


def read_props(path: str | Path) -> BridgeCaptureProperties:
    props_path = Path(path)
    if not props_path.is_file():
        raise ConfigurationError(f"No file exists at path: {props_path}")
    values = {k: v for k, v in dotenv_values(props_path, encoding="utf-8").items() if v is not None}
    try:
        return BridgeCaptureProperties.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Properties file is incomplete: {props_path}") from exc


def write_props(path: str | Path, props: BridgeCaptureProperties) -> None:
    props_path = Path(path)
    props_path.parent.mkdir(parents=True, exist_ok=True)
    props_path.write_text("", encoding="utf-8")
    for key, value in props.model_dump(by_alias=True).items():
        set_key(props_path, key, value, encoding="utf-8")


class BridgeReportCaptureTool:
    def __init__(
        self,
        props: BridgeCaptureProperties,
        *,
        http_client: httpx.Client | None = None,
        s3: Any | None = None,
        timeout: float = 300.0,
    ) -> None:
        self.props = props
        self._s3 = s3 or s3_client_for_keys(props.s3_access_key, props.s3_secret_key)
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(timeout))

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BridgeReportCaptureTool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def fetch_report(self) -> bytes:
        try:
            response = self._http.get(
                self.props.bridge_url,
                auth=(self.props.bridge_username, self.props.bridge_password),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DuraToolsError(f"Failed to retrieve bridge report due to: {exc}") from exc
        if not response.content:
            raise DuraToolsError("Call to bridge to request report failed: empty response.")
        return response.content

    def run(self, report_name: str | None = None) -> str:
        report = self.fetch_report()
        name = report_name or f"{REPORT_NAME_PREFIX}{timestamp_short()}"
        try:
            self._s3.put_object(Bucket=self.props.s3_bucket_name, Key=name, Body=report)
        except (BotoCoreError, ClientError) as exc:
            raise DuraToolsError(f"Failed to write bridge report to S3 due to: {exc}") from exc

        logger.info("Successfully wrote bridge report %s to S3 bucket %s", name, self.props.s3_bucket_name)
        return name


_PROPERTY_OPTIONS = (
    "bridge_url",
    "bridge_username",
    "bridge_password",
    "s3_access_key",
    "s3_secret_key",
    "s3_bucket_name",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bridge-report-capture-tool",
        description=(
            "Run with all parameters to create the properties file; run with only -f "
            "to retrieve a bridge report and store it in S3."
        ),
    )
    parser.add_argument(
        "-f",
        "--props-file",
        required=True,
        help="the full path to the properties file where tool configuration params reside",
    )
    parser.add_argument("-r", "--bridge-url", help="the URL at which the bridge app can be found")
    parser.add_argument("-u", "--bridge-username", help="the username necessary to read from the bridge")
    parser.add_argument("-p", "--bridge-password", help="the password necessary to read from the bridge")
    parser.add_argument("-a", "--s3-access-key", help="the AWS access key ID")
    parser.add_argument("-s", "--s3-secret-key", help="the AWS secret access key")
    parser.add_argument("-b", "--s3-bucket-name", help="the S3 bucket name")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    given = {name: getattr(args, name) for name in _PROPERTY_OPTIONS if getattr(args, name)}
    if given and len(given) != len(_PROPERTY_OPTIONS):
        parser.error("To write properties file, all parameters are required.")

    def _body(settings: Settings) -> None:
        if given:
            write_props(args.props_file, BridgeCaptureProperties(**given))
            logger.info("Successfully wrote properties file to: %s", args.props_file)
            return
        with BridgeReportCaptureTool(read_props(args.props_file)) as tool:
            tool.run()

    return run_tool(args, _body)


if __name__ == "__main__":
    raise SystemExit(main())
