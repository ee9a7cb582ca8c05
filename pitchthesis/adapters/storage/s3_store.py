# pitchthesis/adapters/storage/s3_store.py
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pitchthesis.config import Settings
from pitchthesis.core.errors import StorageError

class S3BlobStore:
    """
    Thin blob-store wrapper: put, signed GET url, delete.
    Every botocore failure comes out as StorageError.
    """

    def __init__(self, bucket: str, client: Any = None, region: Optional[str] = None):
        self.bucket = bucket
        # s3v4 so every presigned url carries X-Amz-Expires
        self._client = client or boto3.client(
            "s3", region_name=region, config=Config(signature_version="s3v4")
        )

    def _require_bucket(self) -> None:
        if not self.bucket:
            raise StorageError("S3 bucket not configured")

    def put(self, key: str, body: bytes, content_type: str) -> None:
        self._require_bucket()
        try:
            self._client.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"upload of {key} failed: {e}") from e

    def signed_url(self, key: str, expires_in: int) -> str:
        self._require_bucket()
        try:
            return self._client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"signing {key} failed: {e}") from e

    def delete(self, key: str) -> None:
        self._require_bucket()
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"delete of {key} failed: {e}") from e


def build_blob_store(cfg: Settings) -> S3BlobStore:
    # credentials come from the usual AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY chain
    return S3BlobStore(bucket=cfg.s3_bucket_name, region=cfg.aws_region)
