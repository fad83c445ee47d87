"""Re-upload selected site files with no-cache headers and verify them."""

from __future__ import annotations

import logging

from website_deploy.scripts._runner import run_script
from website_deploy.services.dependencies import get_s3_service, get_website_setup_service

logger = logging.getLogger(__name__)


async def main() -> None:
    summary = await get_website_setup_service().update_site_files()
    url = get_s3_service().website_url
    for key in summary.succeeded:
        logger.info("Uploaded %s. You can access the site at: %s", key, url)
    if not summary.ok:
        logger.warning("%d file(s) failed to update: %s", len(summary.failed), ", ".join(sorted(summary.failed)))


def run() -> None:
    run_script("website file update", main)


if __name__ == "__main__":
    run()
