"""To-do record models: the stored shape every backend reads and writes.

Attributes are stored in camelCase (``todoId``, ``dueDate``...); the models
expose snake_case fields and translate through an alias generator.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TodoItem(BaseModel):
    """Single to-do record as stored in the table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # --- Key Fields ---
    todo_id: str  # Globally unique, immutable
    user_id: str  # Owner; (todo_id, user_id) is the primary key

    # --- Mutable Fields ---
    name: str
    due_date: Optional[str] = None
    done: bool = False

    # --- Bookkeeping ---
    created_at: str
    attachment_url: Optional[str] = None

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> TodoItem:
        return cls.model_validate(item)

    def to_item(self) -> dict[str, Any]:
        """Stored representation; absent optional attributes are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TodoUpdate(BaseModel):
    """Full-field update of the mutable attributes of a record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    due_date: Optional[str] = None
    done: bool


def new_todo(user_id: str, name: str, due_date: str | None = None) -> TodoItem:
    """Build a fully-formed record with a fresh id and creation timestamp."""
    return TodoItem(
        todo_id=str(uuid.uuid4()),
        user_id=user_id,
        name=name,
        due_date=due_date,
        done=False,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
