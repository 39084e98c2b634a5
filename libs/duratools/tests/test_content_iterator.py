from __future__ import annotations

import math

import pytest

from duratools.exceptions import ExhaustedIterationError, ListingFetchError
from duratools.storage import ContentIterator, ListingPage


class _PagedSource:
    """Serves a flat key list page by page, honouring marker and max_results."""

    def __init__(self, keys: list[str]) -> None:
        self._keys = keys
        self.calls: list[dict[str, object]] = []
        self.fail_next: list[BaseException] = []

    def list_page(self, container, *, prefix=None, marker=None, delimiter=None, max_results=10000):  # noqa: ANN001
        self.calls.append(
            {
                "container": container,
                "prefix": prefix,
                "marker": marker,
                "delimiter": delimiter,
                "max_results": max_results,
            }
        )
        if self.fail_next:
            raise self.fail_next.pop(0)
        start = 0 if marker is None else self._keys.index(marker) + 1
        keys = self._keys[start : start + max_results]
        return ListingPage(keys=keys, truncated=start + max_results < len(self._keys))


class _ScriptedSource:
    def __init__(self, pages: list[ListingPage]) -> None:
        self._pages = list(pages)
        self.markers: list[str | None] = []

    def list_page(self, container, *, prefix=None, marker=None, delimiter=None, max_results=10000):  # noqa: ANN001
        self.markers.append(marker)
        return self._pages.pop(0)


@pytest.mark.parametrize(("total", "page_size"), [(1, 1), (5, 2), (10, 3), (7, 10), (25, 5)])
def test_iterates_every_key_once_in_store_order(total: int, page_size: int) -> None:
    keys = [f"key-{i:04d}" for i in range(total)]
    source = _PagedSource(keys)

    result = list(ContentIterator(source, "bucket", page_size=page_size))

    assert result == keys
    # ceil(N/P) non-empty pages plus one terminal empty page
    assert len(source.calls) == math.ceil(total / page_size) + 1
    assert all(call["max_results"] == page_size for call in source.calls)
    assert all(call["prefix"] is None and call["delimiter"] is None for call in source.calls)


def test_empty_container_reports_no_elements_after_one_fetch() -> None:
    source = _PagedSource([])
    it = ContentIterator(source, "empty-bucket")

    assert it.has_next() is False
    assert it.has_next() is False
    assert len(source.calls) == 1
    assert source.calls[0]["marker"] is None


def test_single_full_page_issues_one_trailing_fetch() -> None:
    keys = [f"k{i}" for i in range(4)]
    source = _PagedSource(keys)

    result = list(ContentIterator(source, "bucket", page_size=4))

    assert result == keys
    assert [c["marker"] for c in source.calls] == [None, "k3"]


def test_two_pages_then_empty_page_scenario() -> None:
    first = [f"item-{i}" for i in range(1, 1001)]
    second = [f"item-{i}" for i in range(1001, 1322)]
    source = _ScriptedSource(
        [
            ListingPage(keys=first, truncated=True),
            ListingPage(keys=second, truncated=False),
            ListingPage(keys=[], truncated=False),
        ]
    )

    it = ContentIterator(source, "bucket-name", page_size=1000)
    counter = 0
    while it.has_next():
        counter += 1
        assert it.next() == f"item-{counter}"

    assert counter == 1321
    assert source.markers == [None, "item-1000", "item-1321"]


def test_next_past_end_raises_without_fetching() -> None:
    source = _PagedSource(["a"])
    it = ContentIterator(source, "bucket")

    assert it.next() == "a"
    assert it.has_next() is False
    calls = len(source.calls)

    with pytest.raises(ExhaustedIterationError):
        it.next()
    with pytest.raises(StopIteration):
        next(it)
    assert len(source.calls) == calls


def test_exhausted_next_propagates_out_of_generators() -> None:
    it = ContentIterator(_PagedSource(["a"]), "bucket")

    def pull_three():
        for _ in range(3):
            yield it.next()

    with pytest.raises(ExhaustedIterationError):
        list(pull_three())


def test_exhausted_next_propagates_out_of_map() -> None:
    source = _PagedSource(["a", "b"])
    first = ContentIterator(source, "bucket")
    other = ContentIterator(_PagedSource(["x"]), "other")

    with pytest.raises(ExhaustedIterationError):
        list(map(lambda key: (key, other.next()), first))


def test_construction_fetch_failure_surfaces_container_and_cause() -> None:
    source = _PagedSource(["a"])
    boom = ConnectionError("network down")
    source.fail_next.append(boom)

    with pytest.raises(ListingFetchError) as excinfo:
        ContentIterator(source, "broken-bucket")

    assert excinfo.value.container == "broken-bucket"
    assert excinfo.value.cause is boom
    assert excinfo.value.__cause__ is boom
    assert "broken-bucket" in str(excinfo.value)


def test_refill_failure_keeps_position_and_retries_same_marker() -> None:
    source = _PagedSource(["a", "b", "c"])
    it = ContentIterator(source, "bucket", page_size=2)
    assert [it.next(), it.next()] == ["a", "b"]

    source.fail_next.append(TimeoutError("slow"))
    with pytest.raises(ListingFetchError):
        it.has_next()

    assert it.has_next() is True
    assert it.next() == "c"
    assert it.has_next() is False
    assert [c["marker"] for c in source.calls] == [None, "b", "b", "c"]


def test_rejects_non_positive_page_size() -> None:
    with pytest.raises(ValueError):
        ContentIterator(_PagedSource([]), "bucket", page_size=0)
