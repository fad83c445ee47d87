"""Create the site bucket, enable website hosting and upload the site folder."""

from __future__ import annotations

import logging

from website_deploy.scripts._runner import run_script
from website_deploy.services.dependencies import get_website_setup_service

logger = logging.getLogger(__name__)


async def main() -> None:
    context = await get_website_setup_service().provision()
    summary = context.get("upload_summary")
    if summary is not None and not summary.ok:
        logger.warning("%d file(s) failed to upload: %s", len(summary.failed), ", ".join(sorted(summary.failed)))

    logger.info(
        "Website uploaded to bucket %s. You can access it at: %s",
        context["bucket_name"],
        context["website_url"],
    )


def run() -> None:
    run_script("S3 website setup", main)


if __name__ == "__main__":
    run()
