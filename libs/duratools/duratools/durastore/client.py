"""Synchronous client for the DuraCloud DuraStore REST API."""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any
from urllib.parse import quote

import httpx

from duratools.config import DuraStoreSettings
from duratools.durastore.models import SnapshotDetails, SnapshotSummary, StorageAccount
from duratools.exceptions import ContentNotFoundError, DuraStoreError
from duratools.storage.listing import DEFAULT_PAGE_SIZE, ContentIterator, ListingPage

logger = logging.getLogger(__name__)

PROPERTY_HEADER_PREFIX = "x-dura-meta-"
COPY_SOURCE_HEADER = "x-dura-meta-copy-source"

CONTENT_CHECKSUM = "content-checksum"
CONTENT_MIMETYPE = "content-mimetype"
CONTENT_SIZE = "content-size"
CONTENT_MODIFIED = "content-modified"

_STANDARD_HEADERS = {
    "content-md5": CONTENT_CHECKSUM,
    "content-type": CONTENT_MIMETYPE,
    "content-length": CONTENT_SIZE,
    "last-modified": CONTENT_MODIFIED,
}


def _path(*parts: str) -> str:
    return "/" + "/".join(quote(str(p), safe="/") for p in parts)


class DuraStoreClient:
    """DuraStore client bound to one store (the primary store unless configured)."""

    def __init__(
        self,
        settings: DuraStoreSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings.require_credentials()
        self.settings = settings
        self.store_id: str | None = settings.store_id or None
        self._client = httpx.Client(
            base_url=settings.base_url,
            auth=(settings.username, settings.password),
            timeout=httpx.Timeout(settings.timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DuraStoreClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def _params(self, **extra: Any) -> dict[str, Any]:
        params = {k: v for k, v in extra.items() if v is not None and v != ""}
        if self.store_id:
            params["storeID"] = self.store_id
        return params

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> httpx.Response:
        try:
            response = self._client.request(
                method,
                path,
                params=params,
                headers=headers,
                content=content,
            )
        except httpx.HTTPError as exc:
            raise DuraStoreError(operation, str(exc)) from exc

        if response.status_code == 404:
            raise ContentNotFoundError(operation, f"not found: {path}", status_code=404)
        if response.is_error:
            raise DuraStoreError(
                operation,
                response.text.strip() or response.reason_phrase,
                status_code=response.status_code,
            )
        return response

    def _xml(self, response: httpx.Response, operation: str) -> ET.Element:
        try:
            return ET.fromstring(response.content)
        except ET.ParseError as exc:
            raise DuraStoreError(operation, f"invalid XML response: {exc}") from exc

    # Stores

    def get_stores(self) -> list[StorageAccount]:
        response = self._request("GET", "/stores", "get_stores")
        root = self._xml(response, "get_stores")
        accounts: list[StorageAccount] = []
        for acct in root.iter("storageAcct"):
            accounts.append(
                StorageAccount(
                    store_id=(acct.findtext("id") or "").strip(),
                    provider_type=(acct.findtext("storageProviderType") or "").strip(),
                    is_primary=str(acct.get("isPrimary", "")).lower() == "true",
                )
            )
        return accounts

    def primary_store_id(self) -> str:
        accounts = self.get_stores()
        for acct in accounts:
            if acct.is_primary:
                return acct.store_id
        if accounts:
            return accounts[0].store_id
        raise DuraStoreError("get_stores", "no storage accounts available")

    # Spaces

    def get_spaces(self) -> list[str]:
        response = self._request("GET", "/spaces", "get_spaces", params=self._params())
        root = self._xml(response, "get_spaces")
        return [str(space.get("id")) for space in root.iter("space") if space.get("id")]

    def space_exists(self, space_id: str) -> bool:
        try:
            self._request("HEAD", _path(space_id), "space_exists", params=self._params())
        except ContentNotFoundError:
            return False
        return True

    def create_space(self, space_id: str) -> None:
        self._request("PUT", _path(space_id), "create_space", params=self._params())
        logger.debug("space created (space_id=%s)", space_id)

    def list_page(
        self,
        container: str,
        *,
        prefix: str | None = None,
        marker: str | None = None,
        delimiter: str | None = None,
        max_results: int = DEFAULT_PAGE_SIZE,
    ) -> ListingPage:
        # DuraStore listings have no delimiter support; keys are always returned flat.
        params = self._params(prefix=prefix, marker=marker, maxResults=int(max_results))
        response = self._request("GET", _path(container), "list_space", params=params)
        root = self._xml(response, "list_space")
        keys = [item.text for item in root.iter("item") if item.text]
        return ListingPage(keys=keys, truncated=len(keys) >= int(max_results))

    def get_space_contents(self, space_id: str, *, page_size: int = DEFAULT_PAGE_SIZE) -> ContentIterator:
        return ContentIterator(self, space_id, page_size=page_size)

    # Content

    def get_content_properties(self, space_id: str, content_id: str) -> dict[str, str]:
        response = self._request(
            "HEAD",
            _path(space_id, content_id),
            "get_content_properties",
            params=self._params(),
        )
        props: dict[str, str] = {}
        for name, value in response.headers.items():
            lname = name.lower()
            if lname.startswith(PROPERTY_HEADER_PREFIX):
                props[lname[len(PROPERTY_HEADER_PREFIX):]] = value
        for header, prop in _STANDARD_HEADERS.items():
            value = response.headers.get(header)
            if value is not None:
                props.setdefault(prop, value)
        return props

    def copy_content(
        self,
        src_space_id: str,
        src_content_id: str,
        dest_space_id: str,
        dest_content_id: str,
    ) -> str:
        # Header values must be ASCII; the server decodes the source path.
        source = f"{quote(src_space_id, safe='')}/{quote(src_content_id, safe='/')}"
        response = self._request(
            "PUT",
            _path(dest_space_id, dest_content_id),
            "copy_content",
            params=self._params(),
            headers={COPY_SOURCE_HEADER: source},
        )
        return str(response.headers.get("content-md5") or "")

    def delete_content(self, space_id: str, content_id: str) -> None:
        self._request(
            "DELETE",
            _path(space_id, content_id),
            "delete_content",
            params=self._params(),
        )

    def move_content(
        self,
        src_space_id: str,
        src_content_id: str,
        dest_space_id: str,
        dest_content_id: str,
    ) -> str:
        checksum = self.copy_content(src_space_id, src_content_id, dest_space_id, dest_content_id)
        self.delete_content(src_space_id, src_content_id)
        return checksum

    # Tasks

    def perform_task(self, task_name: str, body: str = "") -> str:
        response = self._request(
            "POST",
            _path("task", task_name),
            f"task:{task_name}",
            params=self._params(),
            content=body,
        )
        return response.text

    def _task_json(self, task_name: str, body: str = "") -> dict[str, Any]:
        raw = self.perform_task(task_name, body)
        try:
            data = json.loads(raw or "{}")
        except json.JSONDecodeError as exc:
            raise DuraStoreError(f"task:{task_name}", f"invalid JSON response: {exc}") from exc
        if not isinstance(data, dict):
            raise DuraStoreError(f"task:{task_name}", "unexpected response shape")
        return data

    def get_snapshots(self) -> list[SnapshotSummary]:
        data = self._task_json("get-snapshots")
        return [SnapshotSummary.from_dict(item) for item in data.get("snapshots") or []]

    def get_snapshot(self, snapshot_id: str) -> SnapshotDetails:
        data = self._task_json("get-snapshot", json.dumps({"snapshotId": snapshot_id}))
        return SnapshotDetails.from_dict(data)
