"""Request an ACM certificate for the site domain and validate it via Route 53 DNS."""

from __future__ import annotations

import logging

from website_deploy.scripts._runner import run_script
from website_deploy.services.dependencies import get_certificate_setup_service

logger = logging.getLogger(__name__)


async def main() -> None:
    logger.info("Starting certificate request and validation process...")
    context = await get_certificate_setup_service().provision()

    logger.info("Certificate process completed successfully!")
    logger.info("Certificate ARN: %s", context["certificate_arn"])
    logger.info("DNS propagation may take up to 48 hours")
    logger.info("The certificate is now ready to use with CloudFront")


def run() -> None:
    run_script("certificate process", main)


if __name__ == "__main__":
    run()
