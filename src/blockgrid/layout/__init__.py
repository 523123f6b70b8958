"""Grid layout: tolerant reading, display order, normalization and placement."""

from __future__ import annotations

from .edits import append_block, move_block, remove_block
from .normalizer import normalize
from .placement import place
from .reader import coerce_block, ingest_blocks, read_order, read_position, read_row
from .sorter import sort_for_display

__all__ = [
    "append_block",
    "coerce_block",
    "ingest_blocks",
    "move_block",
    "normalize",
    "place",
    "read_order",
    "read_position",
    "read_row",
    "remove_block",
    "sort_for_display",
]
