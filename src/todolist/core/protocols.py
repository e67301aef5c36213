"""Protocol interfaces for the to-do data layer.

Backends are wired together through these Protocols: structural typing,
no inheritance required. A boto3 ``Table`` resource satisfies ``ITodoTable``
as-is, and the in-memory doubles satisfy it for unit tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from todolist.models.todo import TodoItem, TodoUpdate


# ---------------------------------------------------------------------------
# Persistence: Key-value table
# ---------------------------------------------------------------------------

@runtime_checkable
class ITodoTable(Protocol):
    """Subset of the DynamoDB ``Table`` resource API the gateway relies on."""

    def query(self, **kwargs: Any) -> dict[str, Any]: ...

    def get_item(self, **kwargs: Any) -> dict[str, Any]: ...

    def put_item(self, **kwargs: Any) -> dict[str, Any]: ...

    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...

    def delete_item(self, **kwargs: Any) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# Persistence: Attachment store
# ---------------------------------------------------------------------------

@runtime_checkable
class IAttachmentStore(Protocol):
    """Object store able to hand out pre-signed upload URLs."""

    def presign_put(self, key: str, expires_in: int) -> str: ...

    def object_url(self, key: str) -> str: ...


# ---------------------------------------------------------------------------
# Todo Records Gateway
# ---------------------------------------------------------------------------

@runtime_checkable
class ITodoStore(Protocol):
    """Typed facade over the to-do table and the attachment store."""

    def list_todos(self, user_id: str) -> list[TodoItem]: ...

    def get_todo(self, todo_id: str) -> TodoItem | None: ...

    def todo_exists(self, todo_id: str, user_id: str) -> bool: ...

    def create_todo(self, todo: TodoItem) -> TodoItem: ...

    def update_todo(self, todo_id: str, user_id: str, update: TodoUpdate) -> None: ...

    def update_attachment_url(self, todo_id: str, user_id: str, attachment_url: str) -> None: ...

    def persist_attachment_url(self, todo_id: str, user_id: str, image_id: str) -> None: ...

    def generate_upload_url(self, todo_id: str, user_id: str) -> str: ...

    def delete_todo(self, todo_id: str, user_id: str) -> None: ...
