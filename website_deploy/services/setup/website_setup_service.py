from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from tqdm import tqdm

from website_deploy.models.s3 import UploadSummary
from website_deploy.services.config import WebsiteConfig
from website_deploy.services.content_types import content_type_for
from website_deploy.services.orchestrator import Context, ProvisioningOrchestrator, ProvisioningStep
from website_deploy.services.s3_service import S3Service, S3ServiceError

logger = logging.getLogger(__name__)


class WebsiteSetupService:
    """Bucket provisioning and asset upload for the static site."""

    def __init__(self, *, s3: S3Service, config: WebsiteConfig) -> None:
        self._s3 = s3
        self._config = config

    def _local_files(self) -> list[Path]:
        folder = self._config.local_folder
        if not folder.exists() or not folder.is_dir():
            raise FileNotFoundError(f"Website folder not found: {folder}")
        return sorted(p for p in folder.rglob("*") if p.is_file())

    def _key_for(self, path: Path) -> str:
        return path.relative_to(self._config.local_folder).as_posix()

    async def upload_site_files(self) -> UploadSummary:
        """Upload every file under the site folder.

        A failed file is logged and counted; it does not stop the others. With
        the default concurrency of 1 files go up one at a time.
        """

        planned = [(path, self._key_for(path)) for path in self._local_files()]
        summary = UploadSummary(planned=len(planned))
        if not planned:
            logger.info("No website files found in %s", self._config.local_folder)
            return summary

        semaphore = asyncio.Semaphore(self._config.upload_concurrency)

        async def _upload_one(path: Path, key: str) -> tuple[str, bool, Optional[str]]:
            async with semaphore:
                try:
                    await self._s3.upload_local_file(path=path, key=key)
                    return (key, True, None)
                except S3ServiceError as exc:
                    return (key, False, str(exc))

        tasks = [asyncio.create_task(_upload_one(path, key)) for path, key in planned]

        for fut in tqdm(
            asyncio.as_completed(tasks),
            total=len(tasks),
            desc="Uploading website files",
            unit="file",
        ):
            key, ok, err = await fut
            if ok:
                summary.succeeded.append(key)
            else:
                summary.failed[key] = err or "unknown error"
                logger.error("Website upload failed (key=%s): %s", key, err)

        logger.info(
            "Website upload complete: planned=%d, succeeded=%d, failed=%d",
            summary.planned,
            len(summary.succeeded),
            len(summary.failed),
        )
        return summary

    async def update_site_files(self) -> UploadSummary:
        """Re-upload the configured files with no-cache headers and verify each one."""

        summary = UploadSummary(planned=len(self._config.update_files))
        for name in self._config.update_files:
            path = self._config.local_folder / name
            key = Path(name).as_posix()
            try:
                await self._s3.upload_local_file(
                    path=path,
                    key=key,
                    content_type=content_type_for(path),
                    cache_control="no-cache",
                )
                logger.info("Updated %s in bucket %s", path, self._s3.bucket_name)

                if not await self._s3.file_exists(key=key):
                    raise S3ServiceError(f"Uploaded file not found in bucket (key={key})")
                logger.info("Verified %s in bucket %s", key, self._s3.bucket_name)
                summary.succeeded.append(key)
            except S3ServiceError as exc:
                logger.error("Updating %s failed: %s", path, exc)
                summary.failed[key] = str(exc)

        return summary

    # -----------------
    # Orchestrated flow
    # -----------------

    async def _create_bucket(self, context: Context) -> dict[str, Any]:
        return {"bucket_created": await self._s3.create_bucket()}

    async def _configure_website(self, context: Context) -> dict[str, Any]:
        await self._s3.configure_website(
            index_document=self._config.index_document,
            error_document=self._config.error_document,
        )
        return {"website_configured": True}

    async def _upload_files(self, context: Context) -> dict[str, Any]:
        return {"upload_summary": await self.upload_site_files()}

    def orchestrator(self) -> ProvisioningOrchestrator:
        return ProvisioningOrchestrator(
            "s3-website",
            [
                ProvisioningStep("create-bucket", self._create_bucket, fatal=False),
                ProvisioningStep("configure-website", self._configure_website, fatal=False),
                ProvisioningStep("upload-site-files", self._upload_files),
            ],
        )

    async def provision(self) -> dict[str, Any]:
        context = await self.orchestrator().run({"bucket_name": self._s3.bucket_name})
        context["website_url"] = self._s3.website_url
        return context
