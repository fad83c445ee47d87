"""Ensure a Route 53 hosted zone for the domain and point it at the S3 website endpoint."""

from __future__ import annotations

import logging

from website_deploy.scripts._runner import run_script
from website_deploy.services.dependencies import get_dns_setup_service

logger = logging.getLogger(__name__)


async def main() -> None:
    logger.info("Starting Route 53 setup...")
    context = await get_dns_setup_service().provision()

    logger.info("Route 53 setup completed successfully!")
    logger.info("Hosted Zone ID: %s", context["hosted_zone_id"])
    logger.info("Update your domain registrar with these nameservers:")
    for index, nameserver in enumerate(context["nameservers"], start=1):
        logger.info("%d. %s", index, nameserver)
    logger.info("Wait for DNS propagation (can take up to 48 hours), then visit http://%s", context["domain_name"])


def run() -> None:
    run_script("Route 53 setup", main)


if __name__ == "__main__":
    run()
