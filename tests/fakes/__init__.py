"""Shared test doubles: re-export memory backends."""

from __future__ import annotations

from todolist.persistence.memory_backend import MemoryAttachmentStore, MemoryTodoTable

__all__ = ["MemoryAttachmentStore", "MemoryTodoTable"]
