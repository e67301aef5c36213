"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from todolist.core.protocols import IAttachmentStore, ITodoStore, ITodoTable

__all__ = ["IAttachmentStore", "ITodoStore", "ITodoTable"]
