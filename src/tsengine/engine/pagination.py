"""1-based page slicing over a fully computed sequence."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: tuple[T, ...]
    page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        if self.total_items == 0:
            return 0
        return math.ceil(self.total_items / self.page_size)

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice page ``page`` out of ``items``; pages past the end are empty.

    Indices are clamped to ``[0, len(items)]`` so any page number >= 1 is
    safe. Callers validate ``page`` and ``page_size`` beforehand.
    """
    n = len(items)
    from_index = min(max(0, (page - 1) * page_size), n)
    to_index = min(from_index + page_size, n)
    return Page(
        items=tuple(items[from_index:to_index]),
        page=page,
        page_size=page_size,
        total_items=n,
    )
