"""Stateless pagination over an ordered result sequence."""

import math
from typing import Optional, Sequence, TypeVar

from papersift.models.paper import PageInfo, RankedPaper

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for *count* items (0 when empty)."""
    if count <= 0:
        return 0
    return math.ceil(count / page_size)


def clamp_page(page_number: int, count: int, page_size: int) -> int:
    """Clamp *page_number* into ``[1, total_pages]`` (1 when empty)."""
    last = max(1, total_pages(count, page_size))
    return min(max(1, page_number), last)


def page(results: Sequence[T], page_size: int, page_number: int) -> list[T]:
    """Slice one page out of *results*; out-of-range pages are clamped."""
    if not results:
        return []
    number = clamp_page(page_number, len(results), page_size)
    start = (number - 1) * page_size
    return list(results[start:start + page_size])


def page_window(current: int, total: int, radius: int = 2) -> list[Optional[int]]:
    """Page numbers to show in a pagination bar.

    First page, pages within *radius* of *current*, last page; ``None``
    marks an ellipsis gap.  Empty when there is at most one page.

    >>> page_window(5, 10)
    [1, None, 3, 4, 5, 6, 7, None, 10]
    """
    if total <= 1:
        return []
    current = min(max(1, current), total)
    start = max(1, current - radius)
    end = min(total, current + radius)

    window: list[Optional[int]] = []
    if start > 1:
        window.append(1)
        if start > 2:
            window.append(None)
    window.extend(range(start, end + 1))
    if end < total:
        if end < total - 1:
            window.append(None)
        window.append(total)
    return window


class ResultPager:
    """Fixed-size page slicing with a configurable page size."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size

    def total_pages(self, count: int) -> int:
        return total_pages(count, self.page_size)

    def clamp(self, page_number: int, count: int) -> int:
        return clamp_page(page_number, count, self.page_size)

    def page(self, results: Sequence[T], page_number: int) -> list[T]:
        return page(results, self.page_size, page_number)

    def page_info(self, results: Sequence[RankedPaper], page_number: int) -> PageInfo:
        """One page of *results* together with its pagination metadata."""
        return PageInfo(
            number=self.clamp(page_number, len(results)),
            size=self.page_size,
            total_items=len(results),
            total_pages=self.total_pages(len(results)),
            items=self.page(results, page_number),
        )
