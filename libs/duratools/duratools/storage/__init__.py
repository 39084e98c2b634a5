"""Container listing helpers."""

from duratools.storage.listing import DEFAULT_PAGE_SIZE, ContentIterator, ListingPage, ListingSource
from duratools.storage.s3_listing import S3ListingSource, iter_bucket_keys

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "ContentIterator",
    "ListingPage",
    "ListingSource",
    "S3ListingSource",
    "iter_bucket_keys",
]
