from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from website_deploy.services.config._env import DEFAULT_REGION, optional_env, region_from_env, required_env


@dataclass(frozen=True)
class S3Config:
    bucket_name: str
    region_name: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None

    @staticmethod
    def from_env() -> "S3Config":
        return S3Config(
            bucket_name=required_env("SITE_BUCKET_NAME"),
            region_name=region_from_env(),
            endpoint_url=optional_env("S3_ENDPOINT_URL"),
        )
