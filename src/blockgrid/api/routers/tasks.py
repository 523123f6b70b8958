"""
API Routes for Tasks and their Blocks.

Endpoints
---------
- `POST /tasks`: Create a task with an optional initial layout.
- `GET /tasks`: List tasks.
- `GET /tasks/{task_id}`: Fetch one task.
- `GET /tasks/{task_id}/blocks`: Blocks in display order.
- `PUT /tasks/{task_id}`: Full-replacement update (normalize, reconcile, apply).
- `DELETE /tasks/{task_id}`: Delete a task and its blocks.

Domain errors (missing task, duplicate ids, variant changes) propagate to the
handlers registered in :mod:`blockgrid.api.app`.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from blockgrid.api.schemas import LayoutResponse, TaskUpdateResult
from blockgrid.core.contracts.task import Task, TaskCreate, TaskUpdate
from blockgrid.layout.sorter import sort_for_display
from blockgrid.storage.memory import get_task_store

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post(
    "",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(payload: TaskCreate) -> Task:
    """Create a task; submitted blocks are normalized and assigned ids."""
    return get_task_store().create_task(payload)


@router.get("", response_model=list[Task], summary="List tasks")
async def list_tasks() -> list[Task]:
    return get_task_store().list_tasks()


@router.get("/{task_id}", response_model=Task, summary="Get a task")
async def get_task(task_id: str) -> Task:
    return get_task_store().require_task(task_id)


@router.get(
    "/{task_id}/blocks",
    response_model=LayoutResponse,
    summary="Get a task's blocks in display order",
)
async def get_task_blocks(task_id: str) -> LayoutResponse:
    task = get_task_store().require_task(task_id)
    return LayoutResponse(blocks=sort_for_display(task.blocks))


@router.put("/{task_id}", response_model=TaskUpdateResult, summary="Replace a task's state")
async def update_task(task_id: str, payload: TaskUpdate) -> TaskUpdateResult:
    """
    Apply the complete desired state of a task.

    The submitted `blocks` list replaces the stored collection: blocks without
    an id are added, known ids are updated, and stored blocks missing from the
    list are removed. Any validation failure aborts the whole update.
    """
    task, changes = get_task_store().update_task(task_id, payload)
    return TaskUpdateResult(task=task, changes=changes.summary())


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a task")
async def delete_task(task_id: str) -> Response:
    get_task_store().delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
