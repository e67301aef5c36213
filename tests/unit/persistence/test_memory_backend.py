"""Gateway behaviour over the in-memory doubles, plus the doubles themselves."""

from __future__ import annotations

from typing import Any

import pytest
from botocore.exceptions import ClientError

from tests.fakes import MemoryAttachmentStore, MemoryTodoTable
from todolist.core.config import AppSettings, DynamoDBConfig, S3Config
from todolist.models.todo import TodoItem, TodoUpdate, new_todo
from todolist.persistence.dynamodb_backend import DynamoDBTodoStore
from todolist.persistence.protocols import IAttachmentStore, ITodoStore, ITodoTable

INDEX = "TodoIdIndex"


@pytest.fixture
def settings():
    return AppSettings(
        dynamodb=DynamoDBConfig(table="unused", todo_id_index=INDEX),
        s3=S3Config(attachment_bucket="memory-bucket", signed_url_expiration=60),
    )


@pytest.fixture
def table():
    return MemoryTodoTable(index_name=INDEX)


@pytest.fixture
def attachments():
    return MemoryAttachmentStore(bucket="memory-bucket")


@pytest.fixture
def store(settings, attachments, table):
    return DynamoDBTodoStore(settings, attachments, table=table)


class _FailingUpdateTable(MemoryTodoTable):
    """Table whose updates always fail, as if the service were throttling."""

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        raise ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "UpdateItem",
        )


class _PagedTable(MemoryTodoTable):
    """Table that returns owner queries one item per page."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []

    def query(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(dict(kwargs))
        items = sorted(super().query(**kwargs)["Items"], key=lambda i: i["todoId"])
        start = 0
        if "ExclusiveStartKey" in kwargs:
            start = [i["todoId"] for i in items].index(kwargs["ExclusiveStartKey"]["todoId"]) + 1
        page = items[start:start + 1]
        resp: dict[str, Any] = {"Items": page}
        if start + 1 < len(items):
            resp["LastEvaluatedKey"] = {"userId": page[0]["userId"], "todoId": page[0]["todoId"]}
        return resp


def test_doubles_satisfy_protocols(store, table, attachments):
    assert isinstance(table, ITodoTable)
    assert isinstance(attachments, IAttachmentStore)
    assert isinstance(store, ITodoStore)


class TestGatewayOverMemory:
    def test_create_then_exists(self, store):
        todo = new_todo("u1", "Buy milk")
        store.create_todo(todo)
        assert store.todo_exists(todo.todo_id, "u1") is True
        assert store.get_todo(todo.todo_id) == todo

    def test_list_empty_owner(self, store):
        assert store.list_todos("u-empty") == []

    def test_update_fields(self, store):
        todo = new_todo("u1", "Buy milk")
        store.create_todo(todo)

        store.update_todo(todo.todo_id, "u1", TodoUpdate(name="X", due_date="2024-01-01", done=True))

        updated = store.get_todo(todo.todo_id)
        assert (updated.name, updated.due_date, updated.done) == ("X", "2024-01-01", True)
        assert (updated.created_at, updated.attachment_url) == (todo.created_at, None)

    def test_update_missing_record_raises(self, store):
        with pytest.raises(ClientError) as exc_info:
            store.update_todo("ghost", "u1", TodoUpdate(name="X", done=False))
        assert exc_info.value.response["Error"]["Code"] == "ConditionalCheckFailedException"

    def test_generate_upload_url_signs_todo_id_with_configured_expiration(self, store, attachments):
        todo = new_todo("u1", "Buy milk")
        store.create_todo(todo)

        url = store.generate_upload_url(todo.todo_id, "u1")

        assert attachments.signed == [(todo.todo_id, 60)]
        assert url.startswith(f"https://memory-bucket.s3.amazonaws.com/{todo.todo_id}?")
        assert store.get_todo(todo.todo_id).attachment_url == url.split("?")[0]

    def test_delete_then_not_exists(self, store):
        todo = new_todo("u1", "Buy milk")
        store.create_todo(todo)
        store.delete_todo(todo.todo_id, "u1")
        assert store.todo_exists(todo.todo_id, "u1") is False


class TestPartialFailure:
    def test_sign_succeeds_persist_fails(self, settings, attachments):
        table = _FailingUpdateTable(index_name=INDEX)
        store = DynamoDBTodoStore(settings, attachments, table=table)
        todo = new_todo("u1", "Buy milk")
        store.create_todo(todo)

        with pytest.raises(ClientError):
            store.generate_upload_url(todo.todo_id, "u1")

        assert attachments.signed == [(todo.todo_id, 60)]
        assert store.get_todo(todo.todo_id).attachment_url is None


class TestPagination:
    def test_list_follows_last_evaluated_key(self, settings, attachments):
        table = _PagedTable()
        store = DynamoDBTodoStore(settings, attachments, table=table)
        for todo_id in ("a", "b", "c"):
            store.create_todo(TodoItem(todo_id=todo_id, user_id="u1", name=todo_id,
                                       created_at="2024-01-01T00:00:00Z"))

        todos = store.list_todos("u1")

        assert [t.todo_id for t in todos] == ["a", "b", "c"]
        assert len(table.calls) == 3
        assert table.calls[-1]["ExclusiveStartKey"] == {"userId": "u1", "todoId": "b"}


class TestMemoryTodoTable:
    def test_query_on_unknown_index_fails(self, table):
        with pytest.raises(ClientError):
            table.query(
                IndexName="Other",
                KeyConditionExpression="todoId = :todoId",
                ExpressionAttributeValues={":todoId": "t1"},
            )

    def test_unsupported_update_expression_rejected(self, table):
        with pytest.raises(ValueError):
            table.update_item(
                Key={"userId": "u1", "todoId": "t1"},
                UpdateExpression="remove attachmentUrl",
            )

    def test_stored_items_are_isolated_from_callers(self, table):
        item = {"userId": "u1", "todoId": "t1", "name": "a"}
        table.put_item(Item=item)
        item["name"] = "mutated"
        assert table.get_item(Key={"userId": "u1", "todoId": "t1"})["Item"]["name"] == "a"
