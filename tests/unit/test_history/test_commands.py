"""Tests for the undoable commands, run against a real store."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from floq.database.store import TaskStore
from floq.domain.entities import CommentDTO, TaskDTO
from floq.domain.exceptions import StoreError, ValidationError
from floq.history import (
    COMMAND_TYPES,
    ConvertToProjectCommand,
    CreateCommentCommand,
    CreateTaskCommand,
    DeleteCommentCommand,
    DeleteTaskCommand,
    LinkTaskCommand,
    MoveTaskCommand,
    SetContextCommand,
    UndoableCommand,
)


def now() -> datetime:
    return datetime.now(timezone.utc)


def make_task(task_id: str = "task-1", **overrides) -> TaskDTO:
    values = {
        "id": task_id,
        "title": "Buy milk",
        "created_at": now(),
        "updated_at": now(),
    }
    values.update(overrides)
    return TaskDTO(**values)


async def insert_task(store: TaskStore, task_id: str = "task-1", **overrides) -> TaskDTO:
    task = make_task(task_id, **overrides)
    await store.insert("tasks", task.to_row())
    return task


async def fetch_task(store: TaskStore, task_id: str = "task-1") -> dict | None:
    rows = await store.select("tasks", {"id": task_id})
    return rows[0] if rows else None


class TestCreateTaskCommand:
    """Tests for CreateTaskCommand."""

    async def test_execute_and_undo(self, store):
        command = CreateTaskCommand(store=store, task=make_task(), description='Added: "Buy milk"')

        await command.execute()
        row = await fetch_task(store)
        assert row is not None
        assert row["title"] == "Buy milk"
        assert row["status"] == "inbox"

        await command.undo()
        assert await fetch_task(store) is None

    def test_requires_id(self, store):
        with pytest.raises(ValidationError):
            CreateTaskCommand(store=store, task=make_task(""), description="x")

    def test_rejects_blank_title(self, store):
        with pytest.raises(ValidationError):
            CreateTaskCommand(store=store, task=make_task(title="   "), description="x")

    def test_rejects_waiting_without_waiting_for(self, store):
        with pytest.raises(ValidationError):
            CreateTaskCommand(store=store, task=make_task(status="waiting"), description="x")

    def test_requires_timestamps(self, store):
        task = TaskDTO(id="task-1", title="Buy milk")

        with pytest.raises(ValidationError):
            CreateTaskCommand(store=store, task=task, description="x")

    def test_rejects_nested_project(self, store):
        task = make_task(is_project=True, parent_id="other", status="next")

        with pytest.raises(ValidationError):
            CreateTaskCommand(store=store, task=task, description="x")


class TestDeleteTaskCommand:
    """Tests for DeleteTaskCommand."""

    async def test_execute_and_undo_restore_task_and_comments(self, store):
        await insert_task(store, context="@home")
        for i, text in enumerate(["first", "second"]):
            comment = CommentDTO(id=f"c{i}", task_id="task-1", content=text, created_at=now())
            await store.insert("comments", comment.to_row())

        task_row = await fetch_task(store)
        comment_rows = await store.select("comments", {"task_id": "task-1"})
        command = DeleteTaskCommand(
            store=store,
            task=TaskDTO.from_row(task_row),
            comments=tuple(CommentDTO.from_row(r) for r in comment_rows),
            description='Deleted: "Buy milk"',
        )

        await command.execute()
        assert await fetch_task(store) is None
        assert await store.select("comments", {"task_id": "task-1"}) == []

        await command.undo()
        assert await fetch_task(store) == task_row
        assert await store.select("comments", {"task_id": "task-1"}) == comment_rows

    def test_rejects_comments_of_other_tasks(self, store):
        stray = CommentDTO(id="c1", task_id="someone-else", content="hi", created_at=now())

        with pytest.raises(ValidationError):
            DeleteTaskCommand(store=store, task=make_task(), comments=(stray,), description="x")

    def test_comments_are_stored_as_tuple(self, store):
        comment = CommentDTO(id="c1", task_id="task-1", content="hi", created_at=now())

        command = DeleteTaskCommand(
            store=store, task=make_task(), comments=[comment], description="x"
        )

        assert command.comments == (comment,)


class TestMoveTaskCommand:
    """Tests for MoveTaskCommand."""

    async def test_move_to_waiting_and_back(self, store):
        await insert_task(store)
        command = MoveTaskCommand(
            store=store,
            task_id="task-1",
            from_status="inbox",
            to_status="waiting",
            to_waiting_for="Bob",
            description='Moved "Buy milk" to waiting (Bob)',
        )

        await command.execute()
        row = await fetch_task(store)
        assert row["status"] == "waiting"
        assert row["waiting_for"] == "Bob"

        await command.undo()
        row = await fetch_task(store)
        assert row["status"] == "inbox"
        assert row["waiting_for"] is None

    async def test_undo_restores_previous_waiting_for(self, store):
        await insert_task(store, status="waiting", waiting_for="Alice")
        command = MoveTaskCommand(
            store=store,
            task_id="task-1",
            from_status="waiting",
            to_status="next",
            from_waiting_for="Alice",
            description="x",
        )

        await command.execute()
        assert (await fetch_task(store))["waiting_for"] is None

        await command.undo()
        row = await fetch_task(store)
        assert row["status"] == "waiting"
        assert row["waiting_for"] == "Alice"

    def test_waiting_requires_waiting_for(self, store):
        with pytest.raises(ValidationError):
            MoveTaskCommand(
                store=store,
                task_id="task-1",
                from_status="inbox",
                to_status="waiting",
                to_waiting_for="   ",
                description="x",
            )

    def test_rejects_unknown_status(self, store):
        with pytest.raises(ValidationError):
            MoveTaskCommand(
                store=store,
                task_id="task-1",
                from_status="inbox",
                to_status="archived",
                description="x",
            )

    def test_rejects_waiting_for_on_previous_non_waiting_status(self, store):
        with pytest.raises(ValidationError):
            MoveTaskCommand(
                store=store,
                task_id="task-1",
                from_status="inbox",
                from_waiting_for="Bob",
                to_status="next",
                description="x",
            )

    def test_rejects_previous_waiting_status_without_waiting_for(self, store):
        with pytest.raises(ValidationError):
            MoveTaskCommand(
                store=store,
                task_id="task-1",
                from_status="waiting",
                from_waiting_for="  ",
                to_status="next",
                description="x",
            )


class TestLinkTaskCommand:
    """Tests for LinkTaskCommand."""

    async def test_link_and_undo(self, store):
        await insert_task(store, "project-1", title="Garden", is_project=True, status="next")
        await insert_task(store)
        command = LinkTaskCommand(
            store=store, task_id="task-1", to_parent_id="project-1", description="x"
        )

        await command.execute()
        assert (await fetch_task(store))["parent_id"] == "project-1"

        await command.undo()
        assert (await fetch_task(store))["parent_id"] is None

    async def test_unlink_and_undo(self, store):
        await insert_task(store, "project-1", title="Garden", is_project=True, status="next")
        await insert_task(store, parent_id="project-1")
        command = LinkTaskCommand(
            store=store, task_id="task-1", from_parent_id="project-1", description="x"
        )

        await command.execute()
        assert (await fetch_task(store))["parent_id"] is None

        await command.undo()
        assert (await fetch_task(store))["parent_id"] == "project-1"

    def test_rejects_self_link(self, store):
        with pytest.raises(ValidationError):
            LinkTaskCommand(store=store, task_id="task-1", to_parent_id="task-1", description="x")


class TestConvertToProjectCommand:
    """Tests for ConvertToProjectCommand."""

    async def test_convert_and_undo(self, store):
        await insert_task(store, status="someday")
        command = ConvertToProjectCommand(
            store=store, task_id="task-1", original_status="someday", description="x"
        )

        await command.execute()
        row = await fetch_task(store)
        assert row["is_project"] is True
        assert row["status"] == "next"

        await command.undo()
        row = await fetch_task(store)
        assert row["is_project"] is False
        assert row["status"] == "someday"

    async def test_convert_waiting_task_restores_waiting_for(self, store):
        await insert_task(store, status="waiting", waiting_for="Bob")
        command = ConvertToProjectCommand(
            store=store,
            task_id="task-1",
            original_status="waiting",
            original_waiting_for="Bob",
            description="x",
        )

        await command.execute()
        row = await fetch_task(store)
        assert row["status"] == "next"
        assert row["waiting_for"] is None

        await command.undo()
        row = await fetch_task(store)
        assert row["status"] == "waiting"
        assert row["waiting_for"] == "Bob"


class TestSetContextCommand:
    """Tests for SetContextCommand."""

    async def test_change_and_undo(self, store):
        await insert_task(store, context="@home")
        command = SetContextCommand(
            store=store,
            task_id="task-1",
            from_context="@home",
            to_context=" @work ",
            description="x",
        )

        assert command.to_context == "@work"

        await command.execute()
        assert (await fetch_task(store))["context"] == "@work"

        await command.undo()
        assert (await fetch_task(store))["context"] == "@home"

    async def test_clear_and_undo(self, store):
        await insert_task(store, context="@home")
        command = SetContextCommand(
            store=store, task_id="task-1", from_context="@home", to_context="", description="x"
        )

        await command.execute()
        assert (await fetch_task(store))["context"] is None

        await command.undo()
        assert (await fetch_task(store))["context"] == "@home"


class TestCommentCommands:
    """Tests for CreateCommentCommand and DeleteCommentCommand."""

    async def test_create_and_undo(self, store):
        await insert_task(store)
        comment = CommentDTO(
            id="c1", task_id="task-1", content="Ask about oat milk", created_at=now()
        )
        command = CreateCommentCommand(store=store, comment=comment, description="Comment added")

        await command.execute()
        assert len(await store.select("comments", {"task_id": "task-1"})) == 1

        await command.undo()
        assert await store.select("comments", {"task_id": "task-1"}) == []

    async def test_delete_and_undo_keeps_id_and_timestamp(self, store):
        await insert_task(store)
        await store.insert(
            "comments",
            CommentDTO(id="c1", task_id="task-1", content="hi", created_at=now()).to_row(),
        )
        before = await store.select("comments", {"id": "c1"})
        command = DeleteCommentCommand(
            store=store, comment=CommentDTO.from_row(before[0]), description="Comment deleted"
        )

        await command.execute()
        assert await store.select("comments", {"id": "c1"}) == []

        await command.undo()
        assert await store.select("comments", {"id": "c1"}) == before

    def test_create_rejects_blank_content(self, store):
        comment = CommentDTO(id="c1", task_id="task-1", content="  ", created_at=now())

        with pytest.raises(ValidationError):
            CreateCommentCommand(store=store, comment=comment, description="x")

    async def test_comment_on_missing_task_fails_in_store(self, store):
        comment = CommentDTO(id="c1", task_id="missing", content="hi", created_at=now())
        command = CreateCommentCommand(store=store, comment=comment, description="x")

        with pytest.raises(StoreError):
            await command.execute()


class TestCommandShape:
    """Properties shared by every command."""

    def test_all_commands_satisfy_protocol(self, store):
        commands = [
            CreateTaskCommand(store=store, task=make_task(), description="a"),
            DeleteTaskCommand(store=store, task=make_task(), description="b"),
            MoveTaskCommand(
                store=store, task_id="t", from_status="inbox", to_status="next", description="c"
            ),
            LinkTaskCommand(store=store, task_id="t", to_parent_id="p", description="d"),
            ConvertToProjectCommand(
                store=store, task_id="t", original_status="inbox", description="e"
            ),
            SetContextCommand(store=store, task_id="t", to_context="@x", description="f"),
            CreateCommentCommand(
                store=store,
                comment=CommentDTO(id="c", task_id="t", content="g", created_at=now()),
                description="g",
            ),
            DeleteCommentCommand(
                store=store, comment=CommentDTO(id="c", task_id="t", content="h"), description="h"
            ),
        ]

        assert {type(c) for c in commands} == set(COMMAND_TYPES)
        for command in commands:
            assert isinstance(command, UndoableCommand)

    def test_commands_are_frozen(self, store):
        command = LinkTaskCommand(store=store, task_id="t", to_parent_id="p", description="x")

        with pytest.raises(FrozenInstanceError):
            command.to_parent_id = "q"  # type: ignore[misc]

    def test_store_is_not_part_of_equality_or_repr(self, store):
        other_store = AsyncMock()
        a = LinkTaskCommand(store=store, task_id="t", to_parent_id="p", description="x")
        b = LinkTaskCommand(store=other_store, task_id="t", to_parent_id="p", description="x")

        assert a == b
        assert "store" not in repr(a)

    async def test_store_failure_propagates(self):
        failing_store = AsyncMock()
        failing_store.update.side_effect = StoreError("update", "tasks", "database is locked")
        command = SetContextCommand(
            store=failing_store, task_id="t", to_context="@x", description="x"
        )

        with pytest.raises(StoreError, match="database is locked"):
            await command.execute()
