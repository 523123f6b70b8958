"""Pydantic contracts shared across the layout, sync, storage and API layers."""

from __future__ import annotations

from .block import (
    Block,
    ChecklistBlock,
    ChecklistItem,
    CodeBlock,
    ImageBlock,
    Position,
    TextBlock,
)
from .changeset import BlockChangeSet
from .task import Task, TaskCreate, TaskUpdate

__all__ = [
    "Block",
    "BlockChangeSet",
    "ChecklistBlock",
    "ChecklistItem",
    "CodeBlock",
    "ImageBlock",
    "Position",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TextBlock",
]
