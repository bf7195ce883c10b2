# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from tasklist.auth.authenticator import Authenticator
from tasklist.auth.users import CredentialStore
from tasklist.errors import TaskListError
from tasklist.infra.document_store import DocumentStore
from tasklist.permissions import require_owner
from tasklist.services.task_service import TaskStore

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("TASKLIST_DATA_DIR", "data")).resolve()
STORE_KIND = os.getenv("TASKLIST_STORE", "yaml")
API_PREFIX = "/" + os.getenv("TASKLIST_API_PREFIX", "/api").strip().strip("/")
if API_PREFIX == "/":
    API_PREFIX = ""
CORS_ORIGINS = [o.strip() for o in os.getenv("TASKLIST_CORS_ORIGINS", "*").split(",") if o.strip()]
INTERNAL_ERROR = "Internal server error"

STORE = DocumentStore(STORE_KIND, DATA_DIR)

app = FastAPI()
app.state.authenticator = Authenticator(CredentialStore(STORE))
app.state.tasks = TaskStore(STORE)


@app.middleware("http")
async def _error_middleware(request: Request, call_next):
    # Registered before CORS so CORS headers also land on 500 responses.
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": INTERNAL_ERROR}, status_code=500)


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------ Errors ------------------


@app.exception_handler(TaskListError)
async def _tasklist_error(request: Request, exc: TaskListError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


def _authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def _tasks(request: Request) -> TaskStore:
    return request.app.state.tasks


# ------------------ Routes ------------------


@app.get(API_PREFIX or "/", response_class=PlainTextResponse)
def hello():
    return "Hello World!"


@app.post(f"{API_PREFIX}/register", status_code=201)
def register(body: Any = Body(default=None), auth: Authenticator = Depends(_authenticator)):
    return auth.register(body)


@app.post(f"{API_PREFIX}/login")
def login(body: Any = Body(default=None), auth: Authenticator = Depends(_authenticator)):
    return auth.login(body)


@app.post(f"{API_PREFIX}/tasks", status_code=201)
def create_task(
    body: Any = Body(default=None),
    owner_id: str = Depends(require_owner),
    tasks: TaskStore = Depends(_tasks),
):
    return tasks.create(owner_id, body).to_json()


@app.get(f"{API_PREFIX}/tasks")
def list_tasks(owner_id: str = Depends(require_owner), tasks: TaskStore = Depends(_tasks)):
    return [t.to_json() for t in tasks.list_by_owner(owner_id)]


@app.put(f"{API_PREFIX}/tasks/{{task_id}}")
def update_task(
    task_id: str,
    body: Any = Body(default=None),
    owner_id: str = Depends(require_owner),
    tasks: TaskStore = Depends(_tasks),
):
    return tasks.update_by_id_and_owner(owner_id, task_id, body).to_json()


@app.delete(f"{API_PREFIX}/tasks/{{task_id}}")
def delete_task(task_id: str, owner_id: str = Depends(require_owner), tasks: TaskStore = Depends(_tasks)):
    return tasks.delete_by_id_and_owner(owner_id, task_id)
