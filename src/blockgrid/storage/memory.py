"""
In-Memory Task Store.

This module implements the storage collaborator for tasks and their blocks:
it supplies ``existing_by_id`` to the reconciler and applies the resulting
change sets.

Responsibilities
----------------
- **Create**: Generate ids for new tasks (and their initial blocks).
- **Read**: Retrieve tasks by id, list all tasks.
- **Update**: Normalize the submitted layout, reconcile it against the stored
  blocks and apply the change set all-or-nothing.
- **Delete**: Drop a task together with its blocks.

Atomicity
---------
A change set is applied copy-on-write: the new block map is built and
validated first, then swapped in with the updated task. A failure at any step
leaves the stored task untouched. A re-entrant lock serializes edits, so a
read-reconcile-apply cycle never interleaves with another edit.

Note on Persistence
-------------------
This is a volatile memory store; everything is lost on restart. A database
implementation would run :meth:`TaskStore.apply_changes` inside one
transaction.
"""

from __future__ import annotations

import threading
import uuid
from datetime import UTC, datetime
from typing import ClassVar

from blockgrid.core.contracts.block import Block
from blockgrid.core.contracts.changeset import BlockChangeSet
from blockgrid.core.contracts.task import Task, TaskCreate, TaskUpdate
from blockgrid.core.errors import ConflictError, NotFoundError
from blockgrid.core.settings import get_logger, load_settings
from blockgrid.layout.normalizer import normalize
from blockgrid.sync.reconciler import reconcile

logger = get_logger(__name__)


class TaskStore:
    """
    A dictionary-backed store of :class:`Task` snapshots.
    """

    # Singleton instance placeholder (initialized in app startup)
    _instance: ClassVar[TaskStore | None] = None

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> TaskStore:
        """Accessor for the global singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # ------------------------------- Read API -------------------------------

    def get_task(self, task_id: str) -> Task | None:
        """Retrieve a task, or None if not found."""
        return self._tasks.get(task_id)

    def require_task(self, task_id: str) -> Task:
        """Retrieve a task or raise :class:`NotFoundError`."""
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(task_id, kind="task")
        return task

    def list_tasks(self) -> list[Task]:
        """Return all tasks, oldest first."""
        return sorted(self._tasks.values(), key=lambda t: t.created_at)

    def existing_by_id(self, task_id: str) -> dict[str, Block]:
        """Return the stored blocks of ``task_id`` keyed by block id."""
        return {b.id: b for b in self.require_task(task_id).blocks if b.id is not None}

    # ------------------------------ Write API -------------------------------

    def create_task(self, payload: TaskCreate) -> Task:
        """
        Register a new task; its initial blocks are normalized and given ids.

        Returns
        -------
        Task
            The stored task at revision 1.
        """
        changes = reconcile({}, normalize(payload.blocks))
        task = Task(
            id=str(uuid.uuid4()),
            title=payload.title,
            blocks=changes.to_add,
            revision=1,
        )
        with self._lock:
            self._tasks[task.id] = task
        logger.info("Created task %s with %d blocks", task.id, len(task.blocks))
        return task

    def apply_changes(
        self,
        task_id: str,
        changes: BlockChangeSet,
        *,
        title: str | None = None,
        is_completed: bool | None = None,
    ) -> Task:
        """
        Apply a reconciliation change set to ``task_id`` all-or-nothing.

        Raises
        ------
        NotFoundError
            If the task, or a block to update/remove, does not exist.
        ConflictError
            If a block to add collides with a stored id.
        """
        with self._lock:
            task = self.require_task(task_id)
            blocks: dict[str, Block] = {b.id: b for b in task.blocks if b.id is not None}

            for block in changes.to_remove:
                if block.id not in blocks:
                    raise NotFoundError(str(block.id))
                del blocks[block.id]
            for block in changes.to_update:
                if block.id not in blocks:
                    raise NotFoundError(str(block.id))
                blocks[block.id] = block
            for block in changes.to_add:
                if block.id is None or block.id in blocks:
                    raise ConflictError([str(block.id)])
                blocks[block.id] = block

            update: dict[str, object] = {
                "blocks": normalize(blocks.values()),
                "updated_at": datetime.now(UTC),
                "revision": task.revision + 1,
            }
            if title is not None:
                update["title"] = title
            if is_completed is not None:
                update["is_completed"] = is_completed
            stored = task.model_copy(update=update)
            self._tasks[task_id] = stored

        logger.info("Task %s -> rev %d %s", task_id, stored.revision, changes.summary())
        return stored

    def update_task(
        self,
        task_id: str,
        payload: TaskUpdate,
        *,
        allow_implicit_create: bool | None = None,
    ) -> tuple[Task, BlockChangeSet]:
        """
        Replace a task's state with ``payload`` (full replacement of blocks).

        The submitted layout is normalized, reconciled against the stored
        blocks and applied atomically. ``allow_implicit_create`` defaults to
        the ``BLOCKGRID_ALLOW_IMPLICIT_CREATE`` setting.
        """
        if allow_implicit_create is None:
            allow_implicit_create = load_settings().allow_implicit_create

        with self._lock:
            changes = reconcile(
                self.existing_by_id(task_id),
                normalize(payload.blocks),
                allow_implicit_create=allow_implicit_create,
            )
            task = self.apply_changes(
                task_id,
                changes,
                title=payload.title,
                is_completed=payload.is_completed,
            )
        return task, changes

    def delete_task(self, task_id: str) -> None:
        """Remove a task and all of its blocks."""
        with self._lock:
            self.require_task(task_id)
            del self._tasks[task_id]
        logger.info("Deleted task %s", task_id)


# Global accessor for convenience
def get_task_store() -> TaskStore:
    return TaskStore.get_instance()


__all__ = ["TaskStore", "get_task_store"]
