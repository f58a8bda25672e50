"""
Image hosting for event posters.

Objects go to an S3 bucket (or MinIO locally) under a fixed folder and are
served from a public URL. boto3 is blocking, so uploads run in a worker
thread and are awaited; callers never continue before the object is stored.
"""

import asyncio
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional
from urllib.parse import quote
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from devevent.core.config import get_settings
from devevent.core.logging import get_logger
from devevent.core.metrics import asset_upload_latency
from devevent.domain.errors import UploadFailedError

logger = get_logger(__name__)


class AssetStore(ABC):
    """Interface for binary asset hosting."""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        namespace: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        """Store ``data`` under ``namespace`` and return its public URL.

        Raises UploadFailedError when the store rejects the object or cannot
        be reached.
        """
        ...


class S3AssetStore(AssetStore):
    def __init__(self, client, bucket: str, public_base_url: Optional[str] = None):
        self._client = client
        self.bucket = bucket
        self.public_base_url = public_base_url

    async def upload(
        self,
        data: bytes,
        namespace: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        suffix = os.path.splitext(filename or "")[1].lower()
        key = f"{namespace.strip('/')}/{uuid4().hex}{suffix}"
        extra = {"ContentType": content_type} if content_type else {}

        try:
            with asset_upload_latency.time():
                await asyncio.to_thread(
                    self._client.put_object,
                    Bucket=self.bucket,
                    Key=key,
                    Body=data,
                    **extra,
                )
        except (BotoCoreError, ClientError) as exc:
            logger.error("asset_upload_failed", bucket=self.bucket, key=key, error=str(exc))
            raise UploadFailedError(str(exc)) from exc

        url = self.url_for(key)
        logger.info("asset_uploaded", bucket=self.bucket, key=key, size=len(data))
        return url

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{quote(key)}"
        endpoint = self._client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket}/{quote(key)}"


def get_s3_client():
    """
    Build an S3 client from settings.
    AWS_S3_ENDPOINT_URL points it at MinIO or another S3-compatible store.
    """
    settings = get_settings()
    kwargs = {
        "aws_access_key_id": settings.AWS_ACCESS_KEY_ID,
        "aws_secret_access_key": settings.AWS_SECRET_ACCESS_KEY,
        "region_name": settings.AWS_S3_REGION,
    }
    if settings.AWS_S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.AWS_S3_ENDPOINT_URL
    return boto3.client("s3", **kwargs)


@lru_cache()
def get_asset_store() -> AssetStore:
    settings = get_settings()
    return S3AssetStore(
        get_s3_client(),
        bucket=settings.ASSET_BUCKET,
        public_base_url=settings.ASSET_PUBLIC_BASE_URL,
    )
