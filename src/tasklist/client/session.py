# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client session: token, current user and the local task list.

Local state only changes after the server confirms a write; a failed
request leaves everything as it was and sets ``error``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import yaml

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
DEFAULT_STORAGE_PATH = Path(
    os.getenv("TASKLIST_CLIENT_STORAGE", str(Path.home() / ".tasklist" / "storage.yml"))
)

TITLE_REQUIRED = "Task title is required"
GENERIC_ERROR = "An error occurred"


class SessionState(str, Enum):
    LOGGED_OUT = "loggedOut"
    LOGGED_IN = "loggedIn"


class TokenStorage:
    """Durable key/value storage (one YAML mapping) holding the token under ``token``."""

    def __init__(self, path: Path = DEFAULT_STORAGE_PATH):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        return raw if isinstance(raw, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")

    def get(self) -> Optional[str]:
        token = self._load().get(TOKEN_KEY)
        return str(token) if token else None

    def set(self, token: str) -> None:
        data = self._load()
        data[TOKEN_KEY] = token
        self._save(data)

    def remove(self) -> None:
        data = self._load()
        if data.pop(TOKEN_KEY, None) is not None:
            self._save(data)


@dataclass
class AuthForm:
    email: str = ""
    password: str = ""
    name: str = ""


@dataclass
class TaskDraft:
    title: str = ""
    description: str = ""


class RequestFailed(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class SessionController:
    http: httpx.Client
    storage: TokenStorage
    api_base: str = "/api"

    user: Optional[Dict[str, Any]] = None
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    auth_form: AuthForm = field(default_factory=AuthForm)
    task_draft: TaskDraft = field(default_factory=TaskDraft)
    is_login: bool = True
    error: Optional[str] = None
    loading: bool = False

    @property
    def token(self) -> Optional[str]:
        return self.storage.get()

    @property
    def state(self) -> SessionState:
        return SessionState.LOGGED_IN if self.token else SessionState.LOGGED_OUT

    # ---- transport ----

    def _request(self, method: str, path: str, *, json: Any = None, auth: bool = True, fallback: str = GENERIC_ERROR) -> Any:
        headers: Dict[str, str] = {}
        token = self.token if auth else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.api_base.rstrip('/')}/{path.lstrip('/')}"
        try:
            resp = self.http.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise RequestFailed(str(e) or fallback)

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_error:
            msg = data.get("error") if isinstance(data, dict) else None
            raise RequestFailed(str(msg or fallback), status_code=resp.status_code)
        return data

    def _fail(self, exc: RequestFailed) -> bool:
        logger.info("Request failed status=%s error=%s", exc.status_code, exc.message)
        self.error = exc.message
        return False

    # ---- session ----

    def resume(self) -> bool:
        """Page load: refetch the task list if a token survived the restart."""
        if not self.token:
            return False
        return self.fetch_tasks()

    def submit_auth(self) -> bool:
        """Log in or register with ``auth_form`` depending on ``is_login``."""
        self.error = None
        self.loading = True
        try:
            endpoint = "login" if self.is_login else "register"
            form = self.auth_form
            body = {"email": form.email, "password": form.password}
            if not self.is_login:
                body["name"] = form.name
            data = self._request("POST", endpoint, json=body, auth=False)
        except RequestFailed as e:
            return self._fail(e)
        finally:
            self.loading = False

        self.storage.set(data["token"])
        self.user = data["user"]
        self.auth_form = AuthForm()
        self.fetch_tasks()
        return True

    def login(self, email: str, password: str) -> bool:
        self.is_login = True
        self.auth_form = AuthForm(email=email, password=password)
        return self.submit_auth()

    def register(self, email: str, password: str, name: str) -> bool:
        self.is_login = False
        self.auth_form = AuthForm(email=email, password=password, name=name)
        return self.submit_auth()

    def logout(self) -> None:
        self.storage.remove()
        self.user = None
        self.tasks = []
        self.auth_form = AuthForm()
        self.task_draft = TaskDraft()
        self.error = None

    def dismiss_error(self) -> None:
        self.error = None

    # ---- tasks ----

    def fetch_tasks(self) -> bool:
        self.error = None
        try:
            data = self._request("GET", "tasks", fallback="Failed to fetch tasks")
        except RequestFailed as e:
            return self._fail(e)
        self.tasks = list(data or [])
        return True

    def create_task(self, title: Optional[str] = None, description: Optional[str] = None) -> bool:
        self.error = None
        if title is not None:
            self.task_draft.title = title
        if description is not None:
            self.task_draft.description = description

        draft = self.task_draft
        if not draft.title.strip():
            self.error = TITLE_REQUIRED
            return False

        try:
            created = self._request(
                "POST",
                "tasks",
                json={"title": draft.title, "description": draft.description},
                fallback="Failed to create task",
            )
        except RequestFailed as e:
            return self._fail(e)
        self.tasks = [created] + self.tasks
        self.task_draft = TaskDraft()
        return True

    def toggle_complete(self, task_id: str) -> bool:
        self.error = None
        task = next((t for t in self.tasks if t.get("id") == task_id), None)
        if task is None:
            return False
        try:
            updated = self._request(
                "PUT",
                f"tasks/{task_id}",
                json={**task, "completed": not task.get("completed", False)},
                fallback="Failed to update task",
            )
        except RequestFailed as e:
            return self._fail(e)
        self.tasks = [updated if t.get("id") == task_id else t for t in self.tasks]
        return True

    def delete_task(self, task_id: str) -> bool:
        self.error = None
        try:
            self._request("DELETE", f"tasks/{task_id}", fallback="Failed to delete task")
        except RequestFailed as e:
            return self._fail(e)
        self.tasks = [t for t in self.tasks if t.get("id") != task_id]
        return True
