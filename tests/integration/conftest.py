"""Integration test fixtures for LocalStack DynamoDB and S3."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import boto3
import pytest

from todolist.core.config import AppSettings, DynamoDBConfig, S3Config

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")
TABLE = "Todos-inttest"
INDEX = "TodoIdIndex-inttest"
BUCKET = "todos-attachments-inttest"


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("dynamodb", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)
        client.list_tables()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def localstack_ddb():
    """DynamoDB resource pointing at LocalStack."""
    if not _localstack_available():
        pytest.skip("LocalStack not available")
    return boto3.resource("dynamodb", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)


@pytest.fixture(scope="session")
def localstack_s3(localstack_ddb):
    """S3 client pointing at LocalStack."""
    return boto3.client("s3", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)


@pytest.fixture(scope="session")
def provisioned(localstack_ddb, localstack_s3):
    """Create the table, index and bucket via the provisioning script."""
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))
    from create_todos_table import create_bucket, create_table

    create_table(localstack_ddb, TABLE, INDEX)
    localstack_ddb.meta.client.get_waiter("table_exists").wait(TableName=TABLE)
    create_bucket(localstack_s3, BUCKET)
    return AppSettings(
        dynamodb=DynamoDBConfig(table=TABLE, todo_id_index=INDEX, endpoint_url=LOCALSTACK_URL),
        s3=S3Config(attachment_bucket=BUCKET, endpoint_url=LOCALSTACK_URL),
    )
