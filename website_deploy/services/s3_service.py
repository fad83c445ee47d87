from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import aioboto3
from botocore.exceptions import ClientError

from website_deploy.models.s3 import FileItem
from website_deploy.services.config import S3Config
from website_deploy.services.content_types import content_type_for


logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchBucket", "NoSuchKey", "NotFound"}

# Regions whose website endpoint is s3-website-{region}; all others use s3-website.{region}.
_DASH_WEBSITE_REGIONS = {
    "us-east-1",
    "us-west-1",
    "us-west-2",
    "eu-west-1",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-northeast-1",
    "sa-east-1",
}


class S3ServiceError(RuntimeError):
    pass


def _is_not_found(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code", "")) in _NOT_FOUND_CODES


def website_endpoint(region_name: str) -> str:
    separator = "-" if region_name in _DASH_WEBSITE_REGIONS else "."
    return f"s3-website{separator}{region_name}.amazonaws.com"


class S3Service:
    def __init__(self, config: S3Config, *, session: Optional[Any] = None) -> None:
        self._config = config
        self._session = session or aioboto3.Session()

    @property
    def bucket_name(self) -> str:
        return self._config.bucket_name

    @property
    def website_url(self) -> str:
        return f"http://{self._config.bucket_name}.{website_endpoint(self._config.region_name)}"

    def _client(self) -> Any:
        return self._session.client(
            "s3",
            region_name=self._config.region_name,
            endpoint_url=self._config.endpoint_url,
        )

    async def bucket_exists(self) -> bool:
        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.head_bucket(Bucket=self._config.bucket_name)
            return True
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            logger.exception("S3 head_bucket failed")
            raise S3ServiceError(f"Failed to check bucket {self._config.bucket_name}") from exc

    async def create_bucket(self) -> bool:
        """Create the site bucket unless it already exists.

        Returns:
            True when the bucket was created by this call.
        """

        if await self.bucket_exists():
            logger.info("Bucket %s already exists", self._config.bucket_name)
            return False

        kwargs: dict[str, Any] = {"Bucket": self._config.bucket_name}
        region = self._config.region_name
        # us-east-1 rejects an explicit LocationConstraint.
        if region and region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.create_bucket(**kwargs)
        except Exception as exc:
            logger.exception("S3 create_bucket failed")
            raise S3ServiceError(f"Failed to create bucket {self._config.bucket_name}") from exc

        logger.info("Bucket %s created successfully", self._config.bucket_name)
        return True

    async def configure_website(self, *, index_document: str = "index.html", error_document: str = "error.html") -> None:
        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.put_bucket_website(
                    Bucket=self._config.bucket_name,
                    WebsiteConfiguration={
                        "IndexDocument": {"Suffix": index_document},
                        "ErrorDocument": {"Key": error_document},
                    },
                )
        except Exception as exc:
            logger.exception("S3 put_bucket_website failed")
            raise S3ServiceError(
                f"Failed to configure bucket {self._config.bucket_name} for website hosting"
            ) from exc

        logger.info("Bucket %s is configured for static website hosting", self._config.bucket_name)

    async def list_files(self, *, prefix: Optional[str] = None, max_keys: int = 1000) -> list[FileItem]:
        try:
            kwargs: dict[str, Any] = {"Bucket": self._config.bucket_name, "MaxKeys": max_keys}
            if prefix:
                kwargs["Prefix"] = prefix

            s3_client: Any = self._client()
            async with s3_client as s3:
                response = await s3.list_objects_v2(**kwargs)

            objects = response.get("Contents", [])
            return [FileItem.from_s3_object(o) for o in objects]
        except Exception as exc:
            logger.exception("S3 list_files failed")
            raise S3ServiceError("Failed to list files from S3") from exc

    async def upload_local_file(
        self,
        *,
        path: Path,
        key: str,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
    ) -> str:
        """Upload a local file to the site bucket.

        Args:
            path: Local file path.
            key: Destination S3 object key.
            content_type: Optional content type override; defaults to the site
                content-type table.
            cache_control: Optional Cache-Control header value.

        Returns:
            The uploaded object key.
        """

        try:
            if not key:
                raise ValueError("'key' must be provided")
            if not path.exists() or not path.is_file():
                raise FileNotFoundError(str(path))

            body = path.read_bytes()
            extra_args: dict[str, Any] = {"ContentType": content_type or content_type_for(path)}
            if cache_control:
                extra_args["CacheControl"] = cache_control

            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.put_object(
                    Bucket=self._config.bucket_name,
                    Key=key,
                    Body=body,
                    **extra_args,
                )

            return key
        except Exception as exc:
            logger.exception("S3 upload_local_file failed")
            raise S3ServiceError(f"Failed to upload local file to S3 (key={key})") from exc

    async def file_exists(self, *, key: str) -> bool:
        if not key:
            raise ValueError("'key' must be provided")

        try:
            s3_client: Any = self._client()
            async with s3_client as s3:
                await s3.head_object(Bucket=self._config.bucket_name, Key=key)
            return True
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            logger.exception("S3 head_object failed")
            raise S3ServiceError(f"Failed to verify file in S3 (key={key})") from exc
