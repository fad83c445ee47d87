from __future__ import annotations

from dataclasses import dataclass

from website_deploy.services.config._env import float_env


@dataclass(frozen=True)
class SiteCheckConfig:
    timeout_seconds: float = 30.0

    @staticmethod
    def from_env() -> "SiteCheckConfig":
        return SiteCheckConfig(timeout_seconds=float_env("SITE_CHECK_TIMEOUT_SECONDS", 30.0))
