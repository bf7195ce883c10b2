# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from tasklist.errors import ConflictError
from tasklist.infra.document_store import Collection, DocumentStore, DuplicateKeyError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str
    name: str
    password_hash: str

    def public(self) -> Dict[str, str]:
        """What clients may see. Never includes the hash."""
        return {"id": self.id, "email": self.email, "name": self.name}


def _from_doc(doc: Dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=str(doc.get("id") or ""),
        email=str(doc.get("email") or ""),
        name=str(doc.get("name") or ""),
        password_hash=str(doc.get("password_hash") or ""),
    )


class CredentialStore:
    """User identity records. Only the authenticator writes here."""

    def __init__(self, store: DocumentStore):
        self._users: Collection = store.collection(USERS_COLLECTION)

    def create(self, *, email: str, name: str, password_hash: str) -> UserRecord:
        doc = {
            "id": uuid.uuid4().hex,
            "email": email,
            "name": name,
            "password_hash": password_hash,
        }
        try:
            self._users.insert_one(doc, unique=("email",))
        except DuplicateKeyError:
            logger.info("Registration rejected: duplicate email")
            raise ConflictError("Email already registered")
        return _from_doc(doc)

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        if not email:
            return None
        doc = self._users.find_one({"email": email})
        return _from_doc(doc) if doc else None

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        if not user_id:
            return None
        doc = self._users.find_one({"id": user_id})
        return _from_doc(doc) if doc else None

    def count(self) -> int:
        return self._users.count()
