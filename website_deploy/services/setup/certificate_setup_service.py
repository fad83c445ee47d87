from __future__ import annotations

import logging
from typing import Any

from website_deploy.services.acm_service import AcmService
from website_deploy.services.config import WebsiteConfig
from website_deploy.services.orchestrator import Context, ProvisioningOrchestrator, ProvisioningStep
from website_deploy.services.route53_service import Route53Service

logger = logging.getLogger(__name__)


class CertificateSetupService:
    """Request an ACM certificate for the site domain and validate it through Route 53."""

    def __init__(self, *, acm: AcmService, route53: Route53Service, config: WebsiteConfig) -> None:
        self._acm = acm
        self._route53 = route53
        self._config = config

    async def _request_certificate(self, context: Context) -> dict[str, Any]:
        arn = await self._acm.request_certificate(domain_name=self._config.domain_name)
        return {"certificate_arn": arn}

    async def _get_validation_records(self, context: Context) -> dict[str, Any]:
        options = await self._acm.get_validation_records(certificate_arn=context["certificate_arn"])
        return {"validation_options": options}

    async def _create_validation_records(self, context: Context) -> dict[str, Any]:
        zone_id = await self._route53.resolve_hosted_zone_id(domain_name=self._config.domain_name)
        upserted = await self._route53.upsert_validation_records(
            hosted_zone_id=zone_id,
            validation_options=context["validation_options"],
        )
        return {"hosted_zone_id": zone_id, "validation_records_upserted": upserted}

    async def _wait_for_issuance(self, context: Context) -> dict[str, Any]:
        await self._acm.wait_for_certificate_issued(certificate_arn=context["certificate_arn"])
        return {"certificate_status": "ISSUED"}

    def orchestrator(self) -> ProvisioningOrchestrator:
        return ProvisioningOrchestrator(
            "website-acm",
            [
                ProvisioningStep("request-certificate", self._request_certificate),
                ProvisioningStep("get-validation-records", self._get_validation_records),
                ProvisioningStep("create-validation-records", self._create_validation_records),
                ProvisioningStep("wait-for-issuance", self._wait_for_issuance),
            ],
        )

    async def provision(self) -> dict[str, Any]:
        existing = await self._acm.list_certificates()
        logger.info("Existing certificates: %d", len(existing))
        return await self.orchestrator().run({"domain_name": self._config.domain_name})
