"""Create a CloudFront distribution for the site bucket and alias the domain to it."""

from __future__ import annotations

import logging

from website_deploy.scripts._runner import run_script
from website_deploy.services.dependencies import get_distribution_setup_service

logger = logging.getLogger(__name__)


async def main() -> None:
    logger.info("Starting CloudFront setup...")
    context = await get_distribution_setup_service().provision()

    logger.info("CloudFront setup completed successfully!")
    logger.info("Distribution Domain Name: %s", context["distribution_domain_name"])
    logger.info("Distribution ID: %s", context["distribution_id"])
    if "distribution_status" not in context:
        logger.info("CloudFront distribution deployment can take up to 30 minutes")
    logger.info("Your website will be available at: https://%s", context["domain_name"])


def run() -> None:
    run_script("CloudFront setup", main)


if __name__ == "__main__":
    run()
