# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Task records and the owner-scoped operations on them.

Every operation takes the owner id resolved by the access gateway. Lookups
always filter by ``(id, ownerId)``, so a task owned by someone else behaves
exactly like a task that does not exist.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

from tasklist.errors import NotFoundError, ValidationError
from tasklist.infra.document_store import Collection, DocumentStore
from tasklist.schemas import TaskCreate, TaskPatch, parse

logger = logging.getLogger(__name__)

TASKS_COLLECTION = "tasks"
TASK_NOT_FOUND = "Task not found"
TASK_DELETED = "Task deleted successfully"


def _utcnow_iso() -> str:
    """UTC timestamp in the ``2026-01-31T10:00:00.000Z`` form clients expect."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TaskRecord:
    id: str
    title: str
    description: str
    completed: bool
    createdAt: str
    ownerId: str

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


def _from_doc(doc: Dict[str, Any]) -> TaskRecord:
    return TaskRecord(
        id=str(doc["id"]),
        title=str(doc.get("title") or ""),
        description=str(doc.get("description") or ""),
        completed=bool(doc.get("completed", False)),
        createdAt=str(doc.get("createdAt") or ""),
        ownerId=str(doc["ownerId"]),
    )


class TaskStore:
    def __init__(self, store: DocumentStore):
        self._tasks: Collection = store.collection(TASKS_COLLECTION)

    def create(self, owner_id: str, body: Any) -> TaskRecord:
        data = parse(TaskCreate, body)
        doc = {
            "id": uuid.uuid4().hex,
            "title": data.title,
            "description": data.description,
            "completed": data.completed,
            "createdAt": _utcnow_iso(),
            "ownerId": owner_id,
        }
        self._tasks.insert_one(doc)
        logger.info("Task created id=%s owner=%s", doc["id"], owner_id)
        return _from_doc(doc)

    def list_by_owner(self, owner_id: str) -> List[TaskRecord]:
        """Newest first. Equal timestamps keep the later insert first."""
        docs = self._tasks.find({"ownerId": owner_id})
        docs.reverse()
        docs.sort(key=lambda d: str(d.get("createdAt") or ""), reverse=True)
        return [_from_doc(d) for d in docs]

    def update_by_id_and_owner(self, owner_id: str, task_id: str, body: Any) -> TaskRecord:
        # Ownership first: a foreign or deleted id is a 404 whatever the body says.
        filt = {"id": task_id, "ownerId": owner_id}
        current = self._tasks.find_one(filt)
        if current is None:
            raise NotFoundError(TASK_NOT_FOUND)

        patch = parse(TaskPatch, body)
        changes = patch.changes()

        # Identity fields may be echoed back, never changed.
        echoed = {
            "id": (patch.id, current["id"]),
            "_id": (patch.mongo_id, current["id"]),
            "ownerId": (patch.ownerId, current["ownerId"]),
            "createdAt": (patch.createdAt, current.get("createdAt")),
        }
        for field, (sent, stored) in echoed.items():
            if sent is not None and sent != stored:
                raise ValidationError(f"Field '{field}' cannot be changed")

        if not changes:
            return _from_doc(current)

        updated = self._tasks.find_one_and_update(filt, changes)
        if updated is None:
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("Task updated id=%s fields=%s", task_id, sorted(changes))
        return _from_doc(updated)

    def delete_by_id_and_owner(self, owner_id: str, task_id: str) -> Dict[str, str]:
        removed = self._tasks.find_one_and_delete({"id": task_id, "ownerId": owner_id})
        if removed is None:
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("Task deleted id=%s", task_id)
        return {"message": TASK_DELETED}
