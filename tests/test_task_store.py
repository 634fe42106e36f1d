# tests/test_task_store.py

from __future__ import annotations

from datetime import timedelta

from taskboard.schemas import (
    ErrorKind,
    TaskFilter,
    TaskFormData,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from taskboard.storage import TASKS, USERS

from .fakes import NOW, make_task


def _form(**overrides) -> TaskFormData:
    data = dict(
        title="Ship release",
        description="Tag and publish 2.0",
        status=TaskStatus.PENDING,
        priority=TaskPriority.HIGH,
        assignee_id="u-john",
        deadline=NOW + timedelta(days=3),
    )
    data.update(overrides)
    return TaskFormData(**data)


def _seed(storage, store, *tasks) -> None:
    for task in tasks:
        storage.put(TASKS, task.to_record())
    store.fetch_tasks()


def test_create_requires_login(store, storage) -> None:
    result = store.create_task(_form())

    assert result.success is False
    assert result.error == ErrorKind.AUTHORIZATION
    assert result.message == "You must be logged in to create a task."
    assert storage.get(TASKS) == []


def test_create_then_get_roundtrips_form_fields(store, identity, storage, users, clock) -> None:
    identity.login("ada@example.com", "")
    form = _form()

    result = store.create_task(form)

    assert result.success is True
    assert result.message == "Task created successfully!"
    task = store.get_task(result.task_id)
    assert task is not None
    assert task.title == form.title
    assert task.description == form.description
    assert task.status == form.status
    assert task.priority == form.priority
    assert task.assignee_id == form.assignee_id
    assert task.deadline == form.deadline
    assert task.assignee_name == users.john.name
    assert task.created_by_id == users.admin.id
    assert task.created_by_name == users.admin.name
    assert task.created_at == task.updated_at == clock.now
    assert task.comments == ()
    assert storage.find(TASKS, task.id) == task.to_record()


def test_create_notifies_assignee_but_not_self(store, identity, storage) -> None:
    identity.login("ada@example.com", "")
    store.create_task(_form(title="For John"))

    identity.login("john@example.com", "")
    store.create_task(_form(title="Note to self"))

    messages = [n.message for n in storage.get_notifications("u-john")]
    assert messages == ["New task assigned: For John"]


def test_create_with_unknown_assignee_leaves_name_blank(store, identity) -> None:
    identity.login("ada@example.com", "")

    result = store.create_task(_form(assignee_id="ghost"))

    assert store.get_task(result.task_id).assignee_name == ""


def test_create_storage_failure_is_reported(store, identity, backend) -> None:
    identity.login("ada@example.com", "")
    backend.fail_writes = True

    result = store.create_task(_form())

    assert result.success is False
    assert result.error == ErrorKind.UNEXPECTED
    assert result.message == "Failed to create task."
    assert store.tasks == []


def test_update_missing_task(store) -> None:
    result = store.update_task("nope", TaskUpdate(title="x"))

    assert result.success is False
    assert result.error == ErrorKind.NOT_FOUND
    assert result.message == "Task not found."


def test_update_merges_fields_and_refreshes_assignee_name(store, storage, clock) -> None:
    _seed(storage, store, make_task("t1", title="Old", description="keep me"))
    clock.advance(hours=1)

    result = store.update_task("t1", TaskUpdate(title="New", assignee_id="u-jane"))

    assert result.success is True
    assert result.message == "Task updated successfully!"
    task = store.get_task("t1")
    assert task.title == "New"
    assert task.description == "keep me"
    assert task.assignee_id == "u-jane"
    assert task.assignee_name == "Jane Employee"
    assert task.updated_at == NOW + timedelta(hours=1)
    assert task.created_at == NOW
    assert storage.find(TASKS, "t1")["title"] == "New"


def test_update_keeps_stale_creator_name_after_rename(store, storage, users) -> None:
    _seed(storage, store, make_task("t1"))
    renamed = users.admin.model_copy(update={"name": "Ada Renamed"})
    storage.put(USERS, renamed.to_record())

    store.update_task("t1", TaskUpdate(description="touch"))

    assert store.get_task("t1").created_by_name == "Ada Admin"


def test_delete_is_idempotent(store, storage) -> None:
    _seed(storage, store, make_task("t1"), make_task("t2"))

    first = store.delete_task("t1")
    snapshot = storage.get(TASKS)
    second = store.delete_task("t1")

    assert first.success is True
    assert second.success is True
    assert second.message == "Task deleted successfully!"
    assert storage.get(TASKS) == snapshot
    assert [t.id for t in store.tasks] == ["t2"]


def test_update_status_changes_only_status(store, storage, clock) -> None:
    original = make_task("t1", title="Same")
    _seed(storage, store, original)
    clock.advance(minutes=5)

    result = store.update_task_status("t1", TaskStatus.COMPLETED)

    assert result.success is True
    task = store.get_task("t1")
    assert task.status == TaskStatus.COMPLETED
    assert task.updated_at == clock.now
    reverted = task.model_copy(update={"status": original.status, "updated_at": original.updated_at})
    assert reverted.to_record() == original.to_record()


def test_update_status_missing_task(store) -> None:
    result = store.update_task_status("missing", TaskStatus.COMPLETED)

    assert result.success is False
    assert result.message == "Task not found."


def test_add_comment_requires_login_and_task(store, storage, identity) -> None:
    _seed(storage, store, make_task("t1"))

    assert store.add_comment("t1", "hi").message == "You must be logged in to add a comment."

    identity.login("john@example.com", "")
    assert store.add_comment("missing", "hi").message == "Task not found."


def test_comments_append_in_order(store, storage, identity, clock) -> None:
    _seed(storage, store, make_task("t1"))
    identity.login("john@example.com", "")

    store.add_comment("t1", "first")
    clock.advance(minutes=1)
    identity.login("ada@example.com", "")
    store.add_comment("t1", "second")

    task = store.get_task("t1")
    assert [(c.text, c.user_name) for c in task.comments] == [
        ("first", "John Employee"),
        ("second", "Ada Admin"),
    ]
    assert task.updated_at == clock.now
    assert task.comments[0].id != task.comments[1].id


def test_fetch_replaces_in_memory_copy(store, storage) -> None:
    _seed(storage, store, make_task("t1"))
    storage.delete(TASKS, "t1")
    storage.put(TASKS, make_task("t9").to_record())

    store.fetch_tasks()

    assert [t.id for t in store.tasks] == ["t9"]
    assert store.loading is False


def test_empty_filter_for_admin_returns_everything(store, storage, identity) -> None:
    _seed(storage, store, make_task("t1"), make_task("t2", assignee_id="u-jane"))
    identity.login("ada@example.com", "")

    assert [t.id for t in store.filtered_tasks] == ["t1", "t2"]


def test_employee_only_sees_own_tasks_even_with_assignee_filter(store, storage, identity) -> None:
    _seed(
        storage,
        store,
        make_task("t1"),
        make_task("t2", assignee_id="u-jane"),
        make_task("t3"),
    )
    identity.login("john@example.com", "")

    assert [t.id for t in store.filtered_tasks] == ["t1", "t3"]

    store.set_filter(TaskFilter(assignee_id="u-jane"))
    assert store.filtered_tasks == []

    store.set_filter(TaskFilter(assignee_id="all"))
    assert [t.id for t in store.filtered_tasks] == ["t1", "t3"]


def test_search_is_case_insensitive_over_title_and_description(store, storage, identity) -> None:
    _seed(
        storage,
        store,
        make_task("t1", title="Ship"),
        make_task("t2", title="Docs", description="before we SHIP it"),
        make_task("t3", title="Other"),
    )
    identity.login("ada@example.com", "")

    for text in ("sh", "SHIP"):
        store.set_filter(TaskFilter(search=text))
        assert [t.id for t in store.filtered_tasks] == ["t1", "t2"]


def test_filters_combine_and_skip_all_sentinel(store, storage, identity) -> None:
    _seed(
        storage,
        store,
        make_task("t1", status=TaskStatus.PENDING, priority=TaskPriority.HIGH),
        make_task("t2", status=TaskStatus.PENDING, priority=TaskPriority.LOW),
        make_task("t3", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH),
    )
    identity.login("ada@example.com", "")

    store.set_filter(TaskFilter(status="pending", priority="high"))
    assert [t.id for t in store.filtered_tasks] == ["t1"]

    store.set_filter(TaskFilter(status="all", priority="high"))
    assert [t.id for t in store.filtered_tasks] == ["t1", "t3"]
    assert store.filter.priority == "high"


def test_filtered_view_follows_identity_changes(store, storage, identity) -> None:
    _seed(storage, store, make_task("t1"), make_task("t2", assignee_id="u-jane"))

    identity.login("jane@example.com", "")
    assert [t.id for t in store.filtered_tasks] == ["t2"]

    identity.logout()
    assert [t.id for t in store.filtered_tasks] == ["t1", "t2"]


def test_returned_tasks_cannot_be_mutated(store, storage) -> None:
    _seed(storage, store, make_task("t1"))

    listing = store.tasks
    listing.clear()

    assert store.get_task("t1") is not None
    assert isinstance(store.get_task("t1").comments, tuple)


def test_invalid_stored_task_is_skipped(store, storage) -> None:
    storage.put(TASKS, {"id": "broken", "title": "No deadline"})
    _seed(storage, store, make_task("t1"))

    assert [t.id for t in store.tasks] == ["t1"]
    result = store.update_task("broken", TaskUpdate(title="x"))
    assert result.error == ErrorKind.NOT_FOUND


def test_update_with_full_form_resets_omitted_fields_to_defaults(store, storage) -> None:
    _seed(
        storage,
        store,
        make_task("t1", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH),
    )
    form = TaskFormData(title="Rewritten", assignee_id="u-john", deadline=NOW + timedelta(days=1))

    result = store.update_task("t1", form)

    assert result.success is True
    task = store.get_task("t1")
    assert task.title == "Rewritten"
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.MEDIUM
