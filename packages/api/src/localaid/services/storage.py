# This project was developed with assistance from AI tools.
"""S3-compatible blob storage for uploaded documents and profile photos.

Uses boto3 synchronous client run in a thread-pool executor for async
compatibility. The module exposes a singleton initialised at app startup
via ``init_storage_service()``.
"""

import asyncio
import logging
import os
import re
import time
from functools import partial

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from ..core.config import Settings

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
}

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
}

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.\-]")


def sanitize_filename(filename: str) -> str:
    """Strip path components and replace anything outside [A-Za-z0-9.-] with '_'."""
    base = os.path.basename(filename or "")
    return _UNSAFE_CHARS.sub("_", base) or "file"


def generate_file_name(owner_id: str, file_type: str, original_name: str) -> str:
    """``{owner}-{type}-{epoch ms}-{sanitized name}``."""
    return f"{owner_id}-{file_type}-{int(time.time() * 1000)}-{sanitize_filename(original_name)}"


def build_compliance_key(user_id: str, document_type: str, filename: str) -> str:
    """Object key for a worker compliance upload."""
    stamp = int(time.time() * 1000)
    return f"compliance-documents/{user_id}/{document_type}-{stamp}-{sanitize_filename(filename)}"


def _validate(content_type: str | None, size: int, allowed: set[str], label: str) -> str | None:
    if content_type not in allowed:
        kinds = ", ".join(sorted(t.split("/")[1].upper() for t in allowed))
        return f"Invalid file type. Allowed {label} types: {kinds}"
    if size > MAX_FILE_SIZE:
        return f"File too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)}MB"
    if size == 0:
        return "File is empty"
    return None


def validate_document_file(content_type: str | None, size: int) -> str | None:
    """Return an error message, or None when the upload is acceptable."""
    return _validate(content_type, size, ALLOWED_DOCUMENT_TYPES, "document")


def validate_image_file(content_type: str | None, size: int) -> str | None:
    return _validate(content_type, size, ALLOWED_IMAGE_TYPES, "image")


class StorageService:
    """Thin wrapper around a boto3 S3 client."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        bucket: str,
        region: str = "us-east-1",
        public_base_url: str | None = None,
    ):
        self._bucket = bucket
        self._public_base_url = (public_base_url or f"{endpoint.rstrip('/')}/{bucket}").rstrip("/")
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=BotoConfig(
                signature_version="s3v4",
                s3={
                    "addressing_style": "path",
                    "use_accelerate_endpoint": False,
                },
            ),
        )
        self._ensure_bucket()

    def _ensure_bucket(self) -> None:
        """Create the bucket if it doesn't already exist (dev convenience)."""
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except ClientError:
            logger.info("Creating S3 bucket: %s", self._bucket)
            self._client.create_bucket(Bucket=self._bucket)

    def get_public_url(self, object_key: str) -> str:
        return f"{self._public_base_url}/{object_key}"

    def key_from_url(self, url: str) -> str | None:
        """Inverse of get_public_url; None for URLs outside this bucket."""
        prefix = f"{self._public_base_url}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    async def upload_file(
        self,
        file_data: bytes,
        object_key: str,
        content_type: str,
    ) -> str:
        """Upload bytes to S3 and return the public URL."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            partial(
                self._client.put_object,
                Bucket=self._bucket,
                Key=object_key,
                Body=file_data,
                ContentType=content_type,
            ),
        )
        return self.get_public_url(object_key)

    async def download_file(self, object_key: str) -> bytes:
        """Download file bytes from S3."""
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            partial(self._client.get_object, Bucket=self._bucket, Key=object_key),
        )
        return response["Body"].read()

    async def delete_file(self, object_key: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            partial(self._client.delete_object, Bucket=self._bucket, Key=object_key),
        )


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_service: StorageService | None = None


def init_storage_service(cfg: Settings) -> StorageService:
    """Initialise the singleton (called once from app lifespan)."""
    global _service  # noqa: PLW0603
    _service = StorageService(
        endpoint=cfg.S3_ENDPOINT,
        access_key=cfg.S3_ACCESS_KEY,
        secret_key=cfg.S3_SECRET_KEY,
        bucket=cfg.S3_BUCKET,
        region=cfg.S3_REGION,
        public_base_url=cfg.S3_PUBLIC_BASE_URL,
    )
    logger.info("StorageService initialised (bucket=%s)", cfg.S3_BUCKET)
    return _service


def get_storage_service() -> StorageService:
    """Return the initialised StorageService singleton."""
    if _service is None:
        raise RuntimeError("StorageService not initialised -- call init_storage_service() first")
    return _service
