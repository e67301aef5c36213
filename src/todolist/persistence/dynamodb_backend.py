"""DynamoDB backend implementing ITodoStore, the to-do records gateway."""

from __future__ import annotations

import logging
from typing import Any

import boto3

from todolist.core.config import AppSettings
from todolist.core.protocols import IAttachmentStore, ITodoTable
from todolist.core.types import TodoId, UserId
from todolist.models.todo import TodoItem, TodoUpdate

logger = logging.getLogger(__name__)

# Update paths only touch records that already exist; a missing key fails
# with ConditionalCheckFailedException instead of creating a partial item.
_RECORD_EXISTS = "attribute_exists(todoId)"


class DynamoDBTodoStore:
    """Production ITodoStore backed by a DynamoDB table and an attachment store.

    Every method is a single request against the table (or, for
    ``generate_upload_url``, one signing call followed by one update).
    Backend errors propagate unmodified; nothing is retried.
    """

    def __init__(self, settings: AppSettings, attachments: IAttachmentStore,
                 table: ITodoTable | None = None) -> None:
        self._settings = settings
        self._index_name = settings.dynamodb.todo_id_index
        self._url_expiration = settings.s3.signed_url_expiration
        self._attachments = attachments
        if table is None:
            kwargs: dict = {"region_name": settings.dynamodb.region}
            if settings.dynamodb.endpoint_url:
                kwargs["endpoint_url"] = settings.dynamodb.endpoint_url
            table = boto3.resource("dynamodb", **kwargs).Table(settings.dynamodb.table)
        self._table = table

    @staticmethod
    def _key(todo_id: TodoId, user_id: UserId) -> dict[str, str]:
        return {"todoId": todo_id, "userId": user_id}

    def _query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Run a query, following LastEvaluatedKey until the result is exhausted."""
        items: list[dict[str, Any]] = []
        while True:
            resp = self._table.query(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _set_attachment_url(self, todo_id: TodoId, user_id: UserId, url: str) -> None:
        self._table.update_item(
            Key=self._key(todo_id, user_id),
            UpdateExpression="set #attachmentUrl = :attachmentUrl",
            ConditionExpression=_RECORD_EXISTS,
            ExpressionAttributeNames={"#attachmentUrl": "attachmentUrl"},
            ExpressionAttributeValues={":attachmentUrl": url},
        )

    # ---- ITodoStore methods ----

    def list_todos(self, user_id: UserId) -> list[TodoItem]:
        logger.info("Getting all todos for user %s", user_id)
        items = self._query_all(
            KeyConditionExpression="userId = :userId",
            ExpressionAttributeValues={":userId": user_id},
        )
        return [TodoItem.from_item(item) for item in items]

    def get_todo(self, todo_id: TodoId) -> TodoItem | None:
        logger.info("Getting todo %s by id", todo_id)
        resp = self._table.query(
            IndexName=self._index_name,
            KeyConditionExpression="todoId = :todoId",
            ExpressionAttributeValues={":todoId": todo_id},
        )
        items = resp.get("Items", [])
        if not items:
            return None
        return TodoItem.from_item(items[0])

    def todo_exists(self, todo_id: TodoId, user_id: UserId) -> bool:
        logger.info("Checking todo %s for user %s", todo_id, user_id)
        resp = self._table.get_item(Key=self._key(todo_id, user_id))
        return "Item" in resp

    def create_todo(self, todo: TodoItem) -> TodoItem:
        logger.info("Creating todo %s for user %s", todo.todo_id, todo.user_id)
        self._table.put_item(Item=todo.to_item())
        return todo

    def update_todo(self, todo_id: TodoId, user_id: UserId, update: TodoUpdate) -> None:
        logger.info("Updating todo %s", todo_id)
        self._table.update_item(
            Key=self._key(todo_id, user_id),
            UpdateExpression="set #name = :name, #dueDate = :dueDate, #done = :done",
            ConditionExpression=_RECORD_EXISTS,
            ExpressionAttributeNames={
                "#name": "name",
                "#dueDate": "dueDate",
                "#done": "done",
            },
            ExpressionAttributeValues={
                ":name": update.name,
                ":dueDate": update.due_date,
                ":done": update.done,
            },
        )

    def update_attachment_url(self, todo_id: TodoId, user_id: UserId, attachment_url: str) -> None:
        logger.info("Updating attachment url of todo %s", todo_id)
        self._set_attachment_url(todo_id, user_id, attachment_url)

    def persist_attachment_url(self, todo_id: TodoId, user_id: UserId, image_id: str) -> None:
        logger.info("Persisting attachment url of todo %s", todo_id)
        self._set_attachment_url(todo_id, user_id, self._attachments.object_url(image_id))

    def generate_upload_url(self, todo_id: TodoId, user_id: UserId) -> str:
        """Sign an upload URL for the todo's attachment and record its read URL.

        Two independent calls: the URL is signed first, then the query-string
        free read URL is written to ``attachmentUrl`` before any upload has
        happened. If the write fails the error propagates and the signed URL
        is discarded; there is no compensating action.
        """
        logger.info("Generating upload url for todo %s", todo_id)
        upload_url = self._attachments.presign_put(todo_id, self._url_expiration)
        self._set_attachment_url(todo_id, user_id, upload_url.split("?")[0])
        return upload_url

    def delete_todo(self, todo_id: TodoId, user_id: UserId) -> None:
        logger.info("Deleting todo %s", todo_id)
        self._table.delete_item(Key=self._key(todo_id, user_id))
