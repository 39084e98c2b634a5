"""Lazy, cursor-paginated listing of the keys in a storage container."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from duratools.exceptions import ExhaustedIterationError, ListingFetchError

DEFAULT_PAGE_SIZE = 10000


@dataclass(frozen=True)
class ListingPage:
    """One batch of listing results returned by a single store call."""

    keys: Sequence[str] = field(default_factory=tuple)
    truncated: bool = False


class ListingSource(Protocol):
    def list_page(
        self,
        container: str,
        *,
        prefix: str | None = None,
        marker: str | None = None,
        delimiter: str | None = None,
        max_results: int = DEFAULT_PAGE_SIZE,
    ) -> ListingPage:
        """Return the keys following ``marker`` (exclusive), in store order."""


class ContentIterator:
    """Forward-only view over every key in a container.

    The first page is fetched on construction. Further pages are requested one
    at a time, using the last key of the current page as the marker, once the
    consumer has read past the end of the buffered page. An empty page ends the
    iteration for good. The truncation flag is not consulted, so a listing
    always finishes with one empty fetch.

    Failed fetches raise :class:`ListingFetchError` and leave the buffer as it
    was; calling :meth:`has_next` again repeats the same request.
    """

    def __init__(
        self,
        source: ListingSource,
        container: str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1 (got {page_size})")
        self._source = source
        self.container = container
        self.page_size = int(page_size)

        self._index = 0
        self._page: list[str] = self._fetch(None)

    def _fetch(self, marker: str | None) -> list[str]:
        try:
            page = self._source.list_page(
                self.container,
                prefix=None,
                marker=marker,
                delimiter=None,
                max_results=self.page_size,
            )
        except ListingFetchError:
            raise
        except Exception as exc:
            raise ListingFetchError(self.container, exc) from exc
        return list(page.keys)

    def has_next(self) -> bool:
        if self._index < len(self._page):
            return True
        if not self._page:
            return False

        page = self._fetch(self._page[-1])
        self._page = page
        self._index = 0
        return bool(page)

    def next(self) -> str:
        if not self.has_next():
            raise ExhaustedIterationError(f"No more content in {self.container!r}")
        key = self._page[self._index]
        self._index += 1
        return key

    def __iter__(self) -> ContentIterator:
        return self

    def __next__(self) -> str:
        if not self.has_next():
            raise StopIteration
        return self.next()
