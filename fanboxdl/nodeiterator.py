from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator

from .structures import PostSummary


class NodeIterator(Iterator[PostSummary]):
    """Flattens an ordered list of opaque page URLs into one stream of summaries.

    Only the remaining page URLs and the current page's remaining items are held.
    ``fetch`` is called for the next page once the current one runs dry; a page
    is never fetched twice.
    """

    def __init__(self, page_urls: Iterable[str], fetch: Callable[[str], list[PostSummary]]):
        self._pages: deque[str] = deque(page_urls)
        self._buffer: deque[PostSummary] = deque()
        self._fetch = fetch
        self.pages_fetched = 0

    def __iter__(self) -> NodeIterator:
        return self

    def __next__(self) -> PostSummary:
        while not self._buffer and self._pages:
            url = self._pages.popleft()
            self._buffer.extend(self._fetch(url))
            self.pages_fetched += 1

        if not self._buffer:
            raise StopIteration

        return self._buffer.popleft()

    @property
    def pages_remaining(self) -> int:
        return len(self._pages)
