"""S3 bucket listing backed by the marker-based `list_objects` call."""

from __future__ import annotations

from typing import Any

from duratools.storage.listing import DEFAULT_PAGE_SIZE, ContentIterator, ListingPage


class S3ListingSource:
    """Adapts a boto3 S3 client to the listing-source shape used by ContentIterator."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def list_page(
        self,
        container: str,
        *,
        prefix: str | None = None,
        marker: str | None = None,
        delimiter: str | None = None,
        max_results: int = DEFAULT_PAGE_SIZE,
    ) -> ListingPage:
        call_kwargs: dict[str, Any] = {"Bucket": container, "MaxKeys": int(max_results)}
        if prefix:
            call_kwargs["Prefix"] = prefix
        if marker:
            call_kwargs["Marker"] = marker
        if delimiter:
            call_kwargs["Delimiter"] = delimiter

        resp: dict[str, Any] = dict(self.client.list_objects(**call_kwargs))
        keys = [str(obj["Key"]) for obj in resp.get("Contents") or [] if obj.get("Key")]
        return ListingPage(keys=keys, truncated=bool(resp.get("IsTruncated")))


def iter_bucket_keys(client: Any, bucket: str, *, page_size: int = DEFAULT_PAGE_SIZE) -> ContentIterator:
    return ContentIterator(S3ListingSource(client), bucket, page_size=page_size)
