from __future__ import annotations

from typing import Any

from website_deploy.services.cloudfront_service import CloudFrontService
from website_deploy.services.config import CloudFrontConfig, WebsiteConfig
from website_deploy.services.orchestrator import Context, ProvisioningOrchestrator, ProvisioningStep
from website_deploy.services.route53_service import CLOUDFRONT_HOSTED_ZONE_ID, Route53Service


class DistributionSetupService:
    """Put a CloudFront distribution in front of the site bucket and alias the domain to it.

    The distribution takes up to ~30 minutes to deploy; waiting for it is opt-in
    (CLOUDFRONT_WAIT_FOR_DEPLOYMENT).
    """

    def __init__(
        self,
        *,
        cloudfront: CloudFrontService,
        route53: Route53Service,
        website: WebsiteConfig,
        config: CloudFrontConfig,
        bucket_name: str,
    ) -> None:
        self._cloudfront = cloudfront
        self._route53 = route53
        self._website = website
        self._config = config
        self._bucket_name = bucket_name

    async def _create_origin_access_control(self, context: Context) -> dict[str, Any]:
        oac_id = await self._cloudfront.create_origin_access_control(bucket_name=self._bucket_name)
        return {"oac_id": oac_id}

    async def _create_distribution(self, context: Context) -> dict[str, Any]:
        distribution = await self._cloudfront.create_distribution(
            domain_name=self._website.domain_name,
            bucket_name=self._bucket_name,
            certificate_arn=context["certificate_arn"],
            oac_id=context["oac_id"],
        )
        return {
            "distribution_id": distribution.get("Id"),
            "distribution_domain_name": distribution.get("DomainName") or "",
        }

    async def _update_dns_record(self, context: Context) -> dict[str, Any]:
        zone_id = await self._route53.resolve_hosted_zone_id(domain_name=self._website.domain_name)
        await self._route53.upsert_alias_record(
            hosted_zone_id=zone_id,
            record_name=self._website.domain_name,
            target_dns_name=context["distribution_domain_name"],
            target_hosted_zone_id=CLOUDFRONT_HOSTED_ZONE_ID,
        )
        return {"hosted_zone_id": zone_id}

    async def _wait_for_deployment(self, context: Context) -> dict[str, Any]:
        await self._cloudfront.wait_for_deployed(distribution_id=context["distribution_id"])
        return {"distribution_status": "Deployed"}

    def orchestrator(self) -> ProvisioningOrchestrator:
        steps = [
            ProvisioningStep("create-origin-access-control", self._create_origin_access_control),
            ProvisioningStep("create-distribution", self._create_distribution),
            ProvisioningStep("update-dns-record", self._update_dns_record),
        ]
        if self._config.wait_for_deployment:
            steps.append(ProvisioningStep("wait-for-deployment", self._wait_for_deployment))
        return ProvisioningOrchestrator("website-cf", steps)

    async def provision(self) -> dict[str, Any]:
        if not self._config.certificate_arn:
            raise ValueError("Missing required environment variable: CLOUDFRONT_CERTIFICATE_ARN")

        return await self.orchestrator().run(
            {
                "domain_name": self._website.domain_name,
                "bucket_name": self._bucket_name,
                "certificate_arn": self._config.certificate_arn,
            }
        )
