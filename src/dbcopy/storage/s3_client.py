"""S3-compatible storage client (AWS S3, SeaweedFS, MinIO)."""

import asyncio
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base import DEFAULT_MAX_DELAY, DEFAULT_MIN_DELAY, ObjectMeta, ObjectStoreClient
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)

log = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

_ERROR_CODE_MAP = {
    "NoSuchKey": StorageNotFoundError,
    "NotFound": StorageNotFoundError,
    "404": StorageNotFoundError,
    "NoSuchBucket": StorageNotFoundError,
    "AccessDenied": StoragePermissionError,
    "403": StoragePermissionError,
    "InvalidAccessKeyId": StoragePermissionError,
    "SignatureDoesNotMatch": StoragePermissionError,
    "ExpiredToken": StoragePermissionError,
}


class S3StorageClient(ObjectStoreClient):
    """S3-compatible object storage client.

    boto3 is synchronous, so every request runs in a worker thread via
    ``asyncio.to_thread``; the awaiting task stays cancellable.
    """

    def __init__(
        self,
        bucket_name: str,
        region: str = DEFAULT_REGION,
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        min_delay: float = DEFAULT_MIN_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
    ):
        super().__init__(min_delay=min_delay, max_delay=max_delay)
        self._bucket = bucket_name
        self._region = region

        kwargs: dict = {
            "config": Config(
                region_name=region,
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "standard"},
            ),
        }
        kwargs.update(
            _credential_kwargs(aws_access_key_id, aws_secret_access_key, aws_session_token)
        )
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._client = boto3.client("s3", **kwargs)

    @property
    def bucket(self) -> str:
        return self._bucket

    async def head_object(self, key: str) -> ObjectMeta:
        return await asyncio.to_thread(self._head_object, key)

    async def get_object(self, key: str) -> bytes:
        return await asyncio.to_thread(self._get_object, key)

    def _head_object(self, key: str) -> ObjectMeta:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key) from e
        return ObjectMeta(
            key=key,
            size=int(response.get("ContentLength", 0)),
            etag=(response.get("ETag") or "").strip('"') or None,
            last_modified=response.get("LastModified"),
        )

    def _get_object(self, key: str) -> bytes:
        log.debug("Downloading s3://%s/%s", self._bucket, key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key) from e

    def _translate_error(self, error: Exception, key: str | None = None) -> StorageError:
        if isinstance(error, BotoCoreError):
            return StorageConnectionError(str(error), key=key, cause=error)
        code = error.response.get("Error", {}).get("Code", "")
        exc_cls = _ERROR_CODE_MAP.get(code, StorageError)
        return exc_cls(str(error), key=key, cause=error)


def resolve_bucket_region(
    bucket_name: str,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
    aws_session_token: str | None = None,
) -> str:
    """Return the region a bucket lives in.

    S3 reports it in the ``x-amz-bucket-region`` header of a HEAD bucket
    response, including the 301/403 error responses of a wrong-region
    request.
    """
    kwargs: dict = {"region_name": DEFAULT_REGION}
    kwargs.update(
        _credential_kwargs(aws_access_key_id, aws_secret_access_key, aws_session_token)
    )
    client = boto3.client("s3", **kwargs)

    try:
        response = client.head_bucket(Bucket=bucket_name)
    except ClientError as e:
        response = e.response
        headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})
        if "x-amz-bucket-region" not in headers:
            code = response.get("Error", {}).get("Code", "")
            exc_cls = _ERROR_CODE_MAP.get(code, StorageError)
            raise exc_cls(f"region of bucket {bucket_name!r}: {e}", cause=e) from e
    except BotoCoreError as e:
        raise StorageConnectionError(f"region of bucket {bucket_name!r}: {e}", cause=e) from e

    headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})
    region = headers.get("x-amz-bucket-region") or DEFAULT_REGION
    log.debug("Bucket %r is in region %s", bucket_name, region)
    return region


def _credential_kwargs(
    aws_access_key_id: str | None,
    aws_secret_access_key: str | None,
    aws_session_token: str | None,
) -> dict:
    kwargs: dict = {}
    if aws_access_key_id and aws_secret_access_key:
        kwargs["aws_access_key_id"] = aws_access_key_id
        kwargs["aws_secret_access_key"] = aws_secret_access_key
    if aws_session_token:
        kwargs["aws_session_token"] = aws_session_token
    return kwargs
