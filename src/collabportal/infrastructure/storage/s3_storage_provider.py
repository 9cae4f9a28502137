"""Amazon S3 (and S3-compatible) storage provider."""

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict

from collabportal.infrastructure.storage.base import StorageError, StoredObject, StorageProvider


class S3StorageSettings(BaseModel):
    """Configuration settings for the S3 storage provider."""

    model_config = ConfigDict(from_attributes=True)

    bucket: str
    region: str
    access_key_id: str | None = None
    secret_access_key: str | None = None
    endpoint_url: str | None = None


class S3StorageProvider(StorageProvider):
    """Storage provider for Amazon S3.

    Logical buckets become key prefixes inside the one configured S3 bucket.
    """

    def __init__(self, settings: S3StorageSettings) -> None:
        self.settings = settings
        self._client = None

    def _get_client(self):
        """Get or create the S3 client."""
        if self._client is None:
            client_kwargs = {"region_name": self.settings.region}
            if self.settings.access_key_id and self.settings.secret_access_key:
                client_kwargs["aws_access_key_id"] = self.settings.access_key_id
                client_kwargs["aws_secret_access_key"] = self.settings.secret_access_key
            if self.settings.endpoint_url:
                client_kwargs["endpoint_url"] = self.settings.endpoint_url
            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    def public_url(self, object_key: str) -> str:
        """Public URL of an object key."""
        if self.settings.endpoint_url:
            return f"{self.settings.endpoint_url.rstrip('/')}/{self.settings.bucket}/{object_key}"
        return f"https://{self.settings.bucket}.s3.{self.settings.region}.amazonaws.com/{object_key}"

    async def upload(self, bucket: str, key: str, content: bytes, content_type: str) -> StoredObject:
        object_key = f"{bucket}/{key}"
        try:
            await asyncio.to_thread(
                self._get_client().put_object,
                Bucket=self.settings.bucket,
                Key=object_key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload file to S3: {str(e)}") from e

        return StoredObject(
            bucket=bucket,
            key=key,
            url=self.public_url(object_key),
            size=len(content),
            content_type=content_type,
        )

    async def delete(self, bucket: str, key: str) -> None:
        try:
            await asyncio.to_thread(
                self._get_client().delete_object,
                Bucket=self.settings.bucket,
                Key=f"{bucket}/{key}",
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to delete file from S3: {str(e)}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        try:
            await asyncio.to_thread(self._get_client().head_bucket, Bucket=self.settings.bucket)
            return True, f"S3 connection successful. Bucket '{self.settings.bucket}' is accessible."
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))
            return False, f"S3 connection failed ({error_code}): {error_message}"
        except BotoCoreError as e:
            return False, f"S3 connection failed: {str(e)}"
