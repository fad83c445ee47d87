from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from website_deploy.services.config._env import int_env, optional_env, required_env


@dataclass(frozen=True)
class WebsiteConfig:
    """Static site settings shared by the provisioning flows.

    `update_files` are names relative to `local_folder` that the file update
    flow re-uploads with `no-cache`.
    """

    domain_name: str
    local_folder: Path = Path("./website")
    index_document: str = "index.html"
    error_document: str = "error.html"
    upload_concurrency: int = 1
    update_files: tuple[str, ...] = ("favicon.ico",)

    @staticmethod
    def from_env() -> "WebsiteConfig":
        concurrency = int_env("SITE_UPLOAD_CONCURRENCY", 1)
        if concurrency <= 0:
            raise ValueError("Invalid SITE_UPLOAD_CONCURRENCY; must be a positive integer")

        update_raw = optional_env("SITE_UPDATE_FILES")
        update_files: tuple[str, ...] = ("favicon.ico",)
        if update_raw is not None:
            update_files = tuple(name.strip() for name in update_raw.split(",") if name.strip())

        return WebsiteConfig(
            domain_name=required_env("SITE_DOMAIN_NAME"),
            local_folder=Path(optional_env("SITE_LOCAL_FOLDER") or "./website"),
            index_document=optional_env("SITE_INDEX_DOCUMENT") or "index.html",
            error_document=optional_env("SITE_ERROR_DOCUMENT") or "error.html",
            upload_concurrency=concurrency,
            update_files=update_files,
        )

    @property
    def https_url(self) -> str:
        return f"https://{self.domain_name}"
