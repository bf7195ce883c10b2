import pytest

from tasklist.client.session import SessionController, SessionState, TokenStorage


@pytest.fixture()
def storage(tmp_path) -> TokenStorage:
    return TokenStorage(tmp_path / "client" / "storage.yml")


@pytest.fixture()
def session(client, storage) -> SessionController:
    return SessionController(http=client, storage=storage, api_base="/api")


def test_token_storage_round_trip(storage):
    assert storage.get() is None
    storage.set("tok")
    assert TokenStorage(storage.path).get() == "tok"
    storage.remove()
    assert storage.get() is None


def test_register_logs_in_and_persists_token(session, storage):
    assert session.state is SessionState.LOGGED_OUT
    assert session.register("a@x.com", "pw", "Ann")
    assert session.state is SessionState.LOGGED_IN
    assert session.user["email"] == "a@x.com"
    assert storage.get()
    assert session.tasks == []
    assert session.loading is False
    assert session.auth_form.email == ""


def test_failed_login_keeps_logged_out(session):
    assert not session.login("a@x.com", "pw")
    assert session.state is SessionState.LOGGED_OUT
    assert session.error == "Invalid credentials"
    assert session.loading is False


def test_create_toggle_delete_reconcile_from_server(session):
    session.register("a@x.com", "pw", "Ann")

    assert session.create_task("Older", "first")
    assert session.create_task("Buy milk", "")
    assert [t["title"] for t in session.tasks] == ["Buy milk", "Older"]
    assert session.task_draft.title == ""

    milk = session.tasks[0]
    assert session.toggle_complete(milk["id"])
    assert session.tasks[0] == {**milk, "completed": True}

    assert session.delete_task(milk["id"])
    assert [t["title"] for t in session.tasks] == ["Older"]


def test_empty_title_is_rejected_locally(session, client):
    session.register("a@x.com", "pw", "Ann")
    assert not session.create_task("   ")
    assert session.error == "Task title is required"
    assert session.tasks == []
    assert client.get("/api/tasks", headers={"Authorization": f"Bearer {session.token}"}).json() == []


def test_failure_leaves_local_state_untouched(session, client):
    session.register("a@x.com", "pw", "Ann")
    session.create_task("Buy milk")
    before = list(session.tasks)
    task_id = before[0]["id"]

    # Removed behind the session's back.
    client.delete(f"/api/tasks/{task_id}", headers={"Authorization": f"Bearer {session.token}"})

    assert not session.toggle_complete(task_id)
    assert session.error == "Task not found"
    assert session.tasks == before

    assert not session.delete_task(task_id)
    assert session.tasks == before


def test_error_is_cleared_on_the_next_attempt(session):
    session.register("a@x.com", "pw", "Ann")
    session.create_task("")
    assert session.error
    assert session.create_task("Buy milk")
    assert session.error is None


def test_toggle_of_unknown_task_is_a_no_op(session):
    session.register("a@x.com", "pw", "Ann")
    assert not session.toggle_complete("missing")
    assert session.error is None


def test_logout_clears_everything(session, storage):
    session.register("a@x.com", "pw", "Ann")
    session.create_task("Buy milk")
    session.logout()
    assert session.state is SessionState.LOGGED_OUT
    assert storage.get() is None
    assert session.user is None
    assert session.tasks == []


def test_resume_refetches_with_stored_token(session, client, storage):
    session.register("a@x.com", "pw", "Ann")
    session.create_task("Buy milk")

    reloaded = SessionController(http=client, storage=storage, api_base="/api")
    assert reloaded.state is SessionState.LOGGED_IN
    assert reloaded.resume()
    assert [t["title"] for t in reloaded.tasks] == ["Buy milk"]


def test_resume_without_token_does_nothing(session):
    assert not session.resume()
    assert session.error is None


def test_rejected_token_surfaces_error_without_logout(client, storage):
    storage.set("stale-token")
    session = SessionController(http=client, storage=storage, api_base="/api")
    assert not session.resume()
    assert session.error == "Please authenticate"
    assert session.state is SessionState.LOGGED_IN
    assert storage.get() == "stale-token"
