"""
Stateless layout endpoints for the edit surface.

- `POST /layout/sort`: Display order of loosely-shaped blocks (never fails on
  malformed layout fields).
- `POST /layout/normalize`: Tolerant ingestion followed by normalization.
- `POST /layout/place`: Move one block, then normalize.

Nothing here is persisted; the client submits the resulting layout through
`PUT /tasks/{task_id}`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from blockgrid.api.schemas import LayoutResponse, PlaceRequest, RawBlocksRequest
from blockgrid.layout.edits import move_block
from blockgrid.layout.normalizer import normalize
from blockgrid.layout.reader import ingest_blocks
from blockgrid.layout.sorter import sort_for_display

router = APIRouter(prefix="/layout", tags=["Layout"])


@router.post("/sort", summary="Sort raw blocks for display")
async def sort_blocks(payload: RawBlocksRequest) -> list[dict[str, Any]]:
    return sort_for_display(payload.blocks)


@router.post("/normalize", response_model=LayoutResponse, summary="Normalize a layout")
async def normalize_blocks(payload: RawBlocksRequest) -> LayoutResponse:
    return LayoutResponse(blocks=normalize(ingest_blocks(payload.blocks)))


@router.post("/place", response_model=LayoutResponse, summary="Move a block and normalize")
async def place_block(payload: PlaceRequest) -> LayoutResponse:
    blocks = move_block(
        payload.blocks,
        payload.moving_id,
        payload.target_row,
        payload.target_position,
    )
    return LayoutResponse(blocks=blocks)


__all__ = ["router"]
