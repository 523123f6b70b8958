"""
Request/response models for the BlockGrid HTTP API.

Task bodies reuse the core contracts (:class:`TaskCreate`, :class:`TaskUpdate`,
:class:`Task`); this module only adds the envelopes specific to the API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blockgrid.core.contracts.block import Block
from blockgrid.core.contracts.task import Task


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class TaskUpdateResult(_ApiModel):
    """The stored task after an update, plus what the update changed."""

    task: Task
    changes: dict[str, int] = Field(
        default_factory=dict, description="Counts of added/updated/removed/unchanged blocks."
    )


class LayoutResponse(_ApiModel):
    """A normalized block layout."""

    blocks: list[Block] = Field(default_factory=list)


class PlaceRequest(_ApiModel):
    """Move one block of a layout to a target slot."""

    blocks: list[Block] = Field(default_factory=list)
    moving_id: str = Field(..., min_length=1)
    target_row: int
    target_position: str = Field(..., description="'left', 'right' or 'full'.")


class RawBlocksRequest(_ApiModel):
    """Loosely-shaped blocks as a client or legacy store sent them."""

    blocks: list[dict[str, Any]] = Field(default_factory=list)


__all__ = ["LayoutResponse", "PlaceRequest", "RawBlocksRequest", "TaskUpdateResult"]
