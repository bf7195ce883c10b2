import pytest

from tasklist.errors import NotFoundError, ValidationError


def test_create_assigns_server_fields(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk", "description": "2 litres"})
    assert t.id
    assert t.title == "Buy milk"
    assert t.description == "2 litres"
    assert t.completed is False
    assert t.ownerId == "owner-a"
    assert t.createdAt.endswith("Z")


def test_description_is_optional(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk"})
    assert t.description == ""


@pytest.mark.parametrize("body", [{"title": ""}, {"title": "   "}, {"description": "x"}, {}, None])
def test_create_requires_a_title_and_persists_nothing(tasks, body):
    with pytest.raises(ValidationError):
        tasks.create("owner-a", body)
    assert tasks.list_by_owner("owner-a") == []


@pytest.mark.parametrize("field", ["ownerId", "createdAt", "id", "_id", "userId"])
def test_create_refuses_client_controlled_fields(tasks, field):
    with pytest.raises(ValidationError):
        tasks.create("owner-a", {"title": "x", field: "forged"})
    assert tasks.list_by_owner("owner-a") == []


def test_list_is_newest_first(tasks):
    first = tasks.create("owner-a", {"title": "one"})
    second = tasks.create("owner-a", {"title": "two"})
    third = tasks.create("owner-a", {"title": "three"})
    assert [t.id for t in tasks.list_by_owner("owner-a")] == [third.id, second.id, first.id]


def test_owners_are_isolated(tasks):
    a_task = tasks.create("owner-a", {"title": "A's"})
    tasks.create("owner-b", {"title": "B's"})

    assert [t.title for t in tasks.list_by_owner("owner-b")] == ["B's"]
    with pytest.raises(NotFoundError):
        tasks.update_by_id_and_owner("owner-b", a_task.id, {"completed": True})
    with pytest.raises(NotFoundError):
        tasks.delete_by_id_and_owner("owner-b", a_task.id)

    # A's task is untouched
    assert tasks.list_by_owner("owner-a") == [a_task]


def test_update_applies_only_sent_fields(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk", "description": "2 litres"})
    updated = tasks.update_by_id_and_owner("owner-a", t.id, {"completed": True})
    assert updated.completed is True
    assert (updated.id, updated.title, updated.description, updated.createdAt, updated.ownerId) == (
        t.id,
        t.title,
        t.description,
        t.createdAt,
        t.ownerId,
    )


def test_update_is_idempotent(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk"})
    once = tasks.update_by_id_and_owner("owner-a", t.id, {"completed": True})
    twice = tasks.update_by_id_and_owner("owner-a", t.id, {"completed": True})
    assert once == twice
    assert tasks.list_by_owner("owner-a") == [twice]


def test_update_accepts_echoed_identity_fields(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk"})
    body = {**t.to_json(), "completed": True}
    assert tasks.update_by_id_and_owner("owner-a", t.id, body).completed is True


@pytest.mark.parametrize(
    "patch",
    [
        {"ownerId": "owner-b"},
        {"createdAt": "2000-01-01T00:00:00.000Z"},
        {"id": "other"},
        {"_id": "other"},
        {"userId": "owner-b"},
        {"title": ""},
        {"completed": None},
    ],
)
def test_update_rejects_changes_outside_the_allow_list(tasks, patch):
    t = tasks.create("owner-a", {"title": "Buy milk"})
    with pytest.raises(ValidationError):
        tasks.update_by_id_and_owner("owner-a", t.id, patch)
    assert tasks.list_by_owner("owner-a") == [t]


def test_update_unknown_id_is_not_found(tasks):
    with pytest.raises(NotFoundError):
        tasks.update_by_id_and_owner("owner-a", "missing", {"completed": True})


def test_delete_is_terminal(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk"})
    assert tasks.delete_by_id_and_owner("owner-a", t.id) == {"message": "Task deleted successfully"}
    assert tasks.list_by_owner("owner-a") == []
    with pytest.raises(NotFoundError):
        tasks.update_by_id_and_owner("owner-a", t.id, {"completed": True})
    with pytest.raises(NotFoundError):
        tasks.delete_by_id_and_owner("owner-a", t.id)


@pytest.mark.parametrize("patch", [{"title": ""}, {"userId": "x"}, {"completed": None}, ["not", "an", "object"]])
def test_foreign_or_deleted_task_is_not_found_whatever_the_patch(tasks, patch):
    a_task = tasks.create("owner-a", {"title": "A's"})
    gone = tasks.create("owner-b", {"title": "gone"})
    tasks.delete_by_id_and_owner("owner-b", gone.id)

    with pytest.raises(NotFoundError):
        tasks.update_by_id_and_owner("owner-b", a_task.id, patch)
    with pytest.raises(NotFoundError):
        tasks.update_by_id_and_owner("owner-b", gone.id, patch)
    assert tasks.list_by_owner("owner-a") == [a_task]


def test_title_is_stored_as_sent(tasks):
    t = tasks.create("owner-a", {"title": "  Buy milk "})
    assert t.title == "  Buy milk "
    updated = tasks.update_by_id_and_owner("owner-a", t.id, {"title": " Buy bread"})
    assert updated.title == " Buy bread"


def test_blank_title_update_is_rejected(tasks):
    t = tasks.create("owner-a", {"title": "Buy milk"})
    with pytest.raises(ValidationError):
        tasks.update_by_id_and_owner("owner-a", t.id, {"title": "   "})
    assert tasks.list_by_owner("owner-a") == [t]
