"""S3 attachment storage backend implementing IAttachmentStore."""

from __future__ import annotations

import boto3
from botocore.config import Config


class S3AttachmentStore:
    """Production IAttachmentStore backed by S3."""

    def __init__(self, bucket: str, region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._bucket = bucket
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region, "config": Config(signature_version="s3v4")}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    @property
    def bucket(self) -> str:
        return self._bucket

    def presign_put(self, key: str, expires_in: int) -> str:
        """Return a time-limited URL authorising a single PUT of ``key``."""
        return self._client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    def object_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.amazonaws.com/{key}"
