"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from todolist.core.config import AppSettings
from todolist.persistence.dynamodb_backend import DynamoDBTodoStore
from todolist.persistence.s3_backend import S3AttachmentStore


def create_persistence(settings: AppSettings | None = None):
    """Create the wired-up to-do gateway from application settings.

    Returns:
        Tuple of (todo_store, attachments).
    """
    if settings is None:
        settings = AppSettings()

    attachments = S3AttachmentStore(
        bucket=settings.s3.attachment_bucket,
        region=settings.s3.region,
        endpoint_url=settings.s3.endpoint_url,
    )

    todo_store = DynamoDBTodoStore(settings, attachments)

    return todo_store, attachments
