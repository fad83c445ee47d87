from __future__ import annotations

import asyncio
import logging

import aiohttp

from website_deploy.models.site import SiteCheckResponse
from website_deploy.services.config import SiteCheckConfig


logger = logging.getLogger(__name__)


class SiteCheckService:
    """Fetch the public site URL and report whether it answers."""

    def __init__(self, config: SiteCheckConfig, *, session: aiohttp.ClientSession) -> None:
        self._config = config
        self._session = session

    async def check(self, *, url: str) -> SiteCheckResponse:
        timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
        try:
            async with self._session.get(url, timeout=timeout, allow_redirects=True) as response:
                status = response.status
        except aiohttp.ClientError as exc:
            logger.warning("Site check failed for %s: %s", url, exc)
            return SiteCheckResponse(url=url, reachable=False, detail=str(exc) or type(exc).__name__)
        except asyncio.TimeoutError:
            logger.warning("Site check timed out for %s", url)
            return SiteCheckResponse(url=url, reachable=False, detail="timed out")

        logger.info("Site check %s -> HTTP %d", url, status)
        return SiteCheckResponse(url=url, reachable=status < 400, status=status)
