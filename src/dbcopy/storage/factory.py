"""Factory for creating the object store client from settings."""

import logging

from ..config import Settings
from .base import ObjectStoreClient
from .s3_client import S3StorageClient, resolve_bucket_region

log = logging.getLogger(__name__)


def create_storage_client(settings: Settings) -> ObjectStoreClient:
    """Create an S3StorageClient for ``settings.store``.

    When no region is configured and no custom endpoint is used, the
    bucket's region is looked up first so requests are signed for it.

    Raises:
        StorageError: If the bucket region cannot be determined.
    """
    store = settings.store
    region = store.region
    if not region and not store.endpoint_url:
        region = resolve_bucket_region(
            store.bucket,
            aws_access_key_id=store.aws_access_key_id,
            aws_secret_access_key=store.aws_secret_access_key,
            aws_session_token=store.aws_session_token,
        )

    log.debug("Using bucket %r in region %s", store.bucket, region or "default")
    return S3StorageClient(
        bucket_name=store.bucket,
        region=region or "us-east-1",
        endpoint_url=store.endpoint_url,
        aws_access_key_id=store.aws_access_key_id,
        aws_secret_access_key=store.aws_secret_access_key,
        aws_session_token=store.aws_session_token,
        min_delay=settings.wait.poll_min_delay,
        max_delay=settings.wait.poll_max_delay,
    )
