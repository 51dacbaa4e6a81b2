"""
core.domain.pagination — Framework-free page container returned by stores.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of an ordered result set (``page`` is 1-based)."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def normalise_window(page: int | None, limit: int | None, default_limit: int) -> tuple[int, int, int]:
    """
    Clamp ``page``/``limit`` to sane values.

    Returns ``(page, limit, offset)``.
    """
    page = max(int(page or 1), 1)
    limit = int(limit or default_limit)
    if limit < 1:
        limit = default_limit
    return page, limit, (page - 1) * limit
