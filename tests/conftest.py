import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import importlib
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tasklist.auth.authenticator import Authenticator
from tasklist.auth.users import CredentialStore
from tasklist.infra.document_store import DocumentStore
from tasklist.services.task_service import TaskStore


@pytest.fixture(autouse=True)
def secret_key(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.delenv("TASKLIST_SECRET_KEY", raising=False)
    monkeypatch.delenv("TASKLIST_TOKEN_SALT", raising=False)


@pytest.fixture()
def store() -> DocumentStore:
    return DocumentStore("memory")


@pytest.fixture()
def users(store) -> CredentialStore:
    return CredentialStore(store)


@pytest.fixture()
def authenticator(users) -> Authenticator:
    return Authenticator(users)


@pytest.fixture()
def tasks(store) -> TaskStore:
    return TaskStore(store)


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture()
def app_module(data_dir, monkeypatch):
    """``tasklist.app`` reloaded against a temporary yaml data dir."""
    monkeypatch.setenv("TASKLIST_DATA_DIR", str(data_dir))
    monkeypatch.setenv("TASKLIST_STORE", "yaml")
    monkeypatch.setenv("TASKLIST_API_PREFIX", "/api")

    import tasklist.app as app_module
    importlib.reload(app_module)
    return app_module


@pytest.fixture()
def client(app_module) -> TestClient:
    return TestClient(app_module.app)