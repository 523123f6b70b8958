"""Display ordering for block collections.

:func:`sort_for_display` produces the read-only visual order of a block
collection. It accepts anything the tolerant reader understands (typed blocks
or raw mappings, including malformed ones) and never raises for bad layout
fields.

Sort key, ascending::

    (row, position rank, order, original index)

with ranks left=0, right=1, full=2. The trailing index makes the order total,
so equal keys keep their input order.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from .reader import read_order, read_position, read_row

T = TypeVar("T")


def display_key(item: object, index: int) -> tuple[int, int, float, int]:
    """Return the display sort key of ``item`` found at ``index``."""
    return read_row(item), read_position(item).rank, read_order(item), index


def sort_for_display(blocks: Iterable[T]) -> list[T]:
    """Return the items of ``blocks`` in visual order.

    The input is not modified; the result is a new list holding the same
    objects, so calling this twice on the same input yields equal lists.
    """
    indexed = list(enumerate(blocks))
    indexed.sort(key=lambda pair: display_key(pair[1], pair[0]))
    return [item for _, item in indexed]


__all__ = ["display_key", "sort_for_display"]
