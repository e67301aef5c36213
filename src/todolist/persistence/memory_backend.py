"""In-memory backends for unit tests: dict-backed fakes.

``MemoryTodoTable`` understands only the expression shapes the gateway
emits: a single ``attr = :value`` key condition, ``set`` update clauses and
an ``attribute_exists(attr)`` condition.
"""

from __future__ import annotations

import copy
import re
from typing import Any

from botocore.exceptions import ClientError

from todolist.core.types import JsonDict

_EQUALS = re.compile(r"^\s*(#?\w+)\s*=\s*(:\w+)\s*$")
_ATTRIBUTE_EXISTS = re.compile(r"^\s*attribute_exists\((#?\w+)\)\s*$")


def _resolve(name: str, names: dict[str, str] | None) -> str:
    if name.startswith("#"):
        return (names or {})[name]
    return name


class MemoryTodoTable:
    """Dict-backed ITodoTable keyed by (userId, todoId) with a GSI on ``index_attr``."""

    def __init__(self, hash_key: str = "userId", range_key: str = "todoId",
                 index_name: str = "TodoIdIndex", index_attr: str = "todoId") -> None:
        self._hash_key = hash_key
        self._range_key = range_key
        self._index_name = index_name
        self._index_attr = index_attr
        self._items: dict[tuple[str, str], JsonDict] = {}

    def _pk(self, key: dict[str, Any]) -> tuple[str, str]:
        return key[self._hash_key], key[self._range_key]

    def query(self, **kwargs: Any) -> dict[str, Any]:
        match = _EQUALS.match(kwargs["KeyConditionExpression"])
        if match is None:
            raise ValueError(f"Unsupported key condition: {kwargs['KeyConditionExpression']!r}")
        attr = _resolve(match.group(1), kwargs.get("ExpressionAttributeNames"))
        value = kwargs["ExpressionAttributeValues"][match.group(2)]

        index = kwargs.get("IndexName")
        expected = self._hash_key if index is None else self._index_attr
        if index is not None and index != self._index_name:
            raise self._error("ValidationException", f"Unknown index {index!r}", "Query")
        if attr != expected:
            raise self._error("ValidationException", f"Query key condition must use {expected!r}", "Query")

        items = [copy.deepcopy(i) for i in self._items.values() if i.get(attr) == value]
        return {"Items": items, "Count": len(items)}

    def get_item(self, **kwargs: Any) -> dict[str, Any]:
        item = self._items.get(self._pk(kwargs["Key"]))
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def put_item(self, **kwargs: Any) -> dict[str, Any]:
        item = copy.deepcopy(kwargs["Item"])
        self._items[self._pk(item)] = item
        return {}

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        key = kwargs["Key"]
        names = kwargs.get("ExpressionAttributeNames")
        values = kwargs.get("ExpressionAttributeValues", {})
        existing = self._items.get(self._pk(key))

        condition = kwargs.get("ConditionExpression")
        if condition is not None:
            match = _ATTRIBUTE_EXISTS.match(condition)
            if match is None:
                raise ValueError(f"Unsupported condition: {condition!r}")
            if existing is None or _resolve(match.group(1), names) not in existing:
                raise self._error(
                    "ConditionalCheckFailedException", "The conditional request failed", "UpdateItem",
                )

        expression = kwargs["UpdateExpression"].strip()
        if not expression.lower().startswith("set "):
            raise ValueError(f"Unsupported update expression: {expression!r}")

        item = existing if existing is not None else dict(key)
        for clause in expression[4:].split(","):
            match = _EQUALS.match(clause)
            if match is None:
                raise ValueError(f"Unsupported update clause: {clause!r}")
            item[_resolve(match.group(1), names)] = copy.deepcopy(values[match.group(2)])
        self._items[self._pk(key)] = item
        return {}

    def delete_item(self, **kwargs: Any) -> dict[str, Any]:
        self._items.pop(self._pk(kwargs["Key"]), None)
        return {}

    @staticmethod
    def _error(code: str, message: str, operation: str) -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class MemoryAttachmentStore:
    """Deterministic IAttachmentStore for unit tests; records every signing."""

    def __init__(self, bucket: str = "todos-attachments-test") -> None:
        self._bucket = bucket
        self.signed: list[tuple[str, int]] = []

    def presign_put(self, key: str, expires_in: int) -> str:
        self.signed.append((key, expires_in))
        return f"{self.object_url(key)}?X-Amz-Expires={expires_in}&X-Amz-Signature=memory"

    def object_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.amazonaws.com/{key}"
