"""Provision the to-do table, its todo-id index and the attachment bucket.

Usage:
    python scripts/create_todos_table.py --endpoint-url http://localhost:4566 --seed
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

import boto3

from todolist.core.config import AppSettings
from todolist.models.todo import TodoItem

logger = logging.getLogger(__name__)

SAMPLE_TODOS: list[dict[str, Any]] = [
    {
        "todoId": "sample-0001", "userId": "sample-user",
        "name": "Buy milk", "dueDate": "2024-01-02",
        "done": False, "createdAt": "2024-01-01T00:00:00Z",
    },
    {
        "todoId": "sample-0002", "userId": "sample-user",
        "name": "Water the plants", "dueDate": "2024-01-03",
        "done": True, "createdAt": "2024-01-01T08:30:00Z",
    },
]


def create_table(ddb: Any, table_name: str, index_name: str) -> bool:
    """Create the to-do table with its todo-id GSI. Skips if the table already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])
    if table_name in existing:
        logger.info("Table %s already exists, skipping", table_name)
        return False

    client.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "userId", "KeyType": "HASH"},
            {"AttributeName": "todoId", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "userId", "AttributeType": "S"},
            {"AttributeName": "todoId", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": index_name,
                "KeySchema": [{"AttributeName": "todoId", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    logger.info("Created table %s with index %s", table_name, index_name)
    return True


def create_bucket(s3: Any, bucket: str, region: str = "us-east-1") -> bool:
    """Create the attachment bucket. Skips if the bucket already exists."""
    existing = [b["Name"] for b in s3.list_buckets().get("Buckets", [])]
    if bucket in existing:
        logger.info("Bucket %s already exists, skipping", bucket)
        return False

    kwargs: dict[str, Any] = {"Bucket": bucket}
    if region != "us-east-1":
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
    s3.create_bucket(**kwargs)
    logger.info("Created bucket %s", bucket)
    return True


def seed_sample_todos(ddb: Any, table_name: str) -> int:
    """Write the sample records, validating each against the TodoItem model."""
    tbl = ddb.Table(table_name)
    with tbl.batch_writer() as batch:
        for raw in SAMPLE_TODOS:
            batch.put_item(Item=TodoItem.from_item(raw).to_item())
    logger.info("Seeded %d sample todos", len(SAMPLE_TODOS))
    return len(SAMPLE_TODOS)


def main() -> None:
    settings = AppSettings()

    parser = argparse.ArgumentParser(description="Provision DynamoDB and S3 resources for the to-do app")
    parser.add_argument("--endpoint-url", default=None, help="AWS endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--region", default=settings.dynamodb.region, help="AWS region")
    parser.add_argument("--table", default=settings.dynamodb.table, help="To-do table name")
    parser.add_argument("--index", default=settings.dynamodb.todo_id_index, help="Todo-id GSI name")
    parser.add_argument("--bucket", default=settings.s3.attachment_bucket, help="Attachment bucket name")
    parser.add_argument("--seed", action="store_true", help="Write sample records")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)
    s3 = boto3.client("s3", **kwargs)

    create_table(ddb, args.table, args.index)
    create_bucket(s3, args.bucket, region=args.region)

    if args.seed:
        seed_sample_todos(ddb, args.table)

    logger.info("Done")


if __name__ == "__main__":
    main()
