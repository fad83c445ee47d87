from __future__ import annotations

from typing import Any

from website_deploy.services.config import Route53Config, WebsiteConfig
from website_deploy.services.orchestrator import Context, ProvisioningOrchestrator, ProvisioningStep
from website_deploy.services.route53_service import Route53Service


class DnsSetupService:
    """Hosted zone for the domain plus an A alias to the S3 website endpoint."""

    def __init__(
        self,
        *,
        route53: Route53Service,
        website: WebsiteConfig,
        config: Route53Config,
        website_url: str,
        bucket_region: str,
    ) -> None:
        self._route53 = route53
        self._website = website
        self._config = config
        self._website_url = website_url
        self._bucket_region = bucket_region

    async def _ensure_hosted_zone(self, context: Context) -> dict[str, Any]:
        zone_id, created = await self._route53.ensure_hosted_zone(domain_name=self._website.domain_name)
        return {"hosted_zone_id": zone_id, "hosted_zone_created": created}

    async def _get_nameservers(self, context: Context) -> dict[str, Any]:
        nameservers = await self._route53.get_nameservers(hosted_zone_id=context["hosted_zone_id"])
        return {"nameservers": nameservers}

    async def _create_alias_record(self, context: Context) -> dict[str, Any]:
        target = self._website_url.replace("http://", "")
        await self._route53.upsert_alias_record(
            hosted_zone_id=context["hosted_zone_id"],
            record_name=self._website.domain_name,
            target_dns_name=target,
            target_hosted_zone_id=self._config.website_zone_id_for(self._bucket_region),
        )
        return {"alias_target": target}

    def orchestrator(self) -> ProvisioningOrchestrator:
        return ProvisioningOrchestrator(
            "website-route53",
            [
                ProvisioningStep("ensure-hosted-zone", self._ensure_hosted_zone),
                ProvisioningStep("get-nameservers", self._get_nameservers),
                ProvisioningStep("create-alias-record", self._create_alias_record),
            ],
        )

    async def provision(self) -> dict[str, Any]:
        return await self.orchestrator().run({"domain_name": self._website.domain_name})
