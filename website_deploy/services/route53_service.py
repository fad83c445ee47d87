from __future__ import annotations

import logging
import time
from typing import Any, Optional

import aioboto3

from website_deploy.services.config import Route53Config


logger = logging.getLogger(__name__)

CLOUDFRONT_HOSTED_ZONE_ID = "Z2FDTNDATAQYW2"
VALIDATION_RECORD_TTL = 300


class Route53ServiceError(RuntimeError):
    pass


class HostedZoneNotFoundError(Route53ServiceError):
    pass


def _strip_zone_prefix(zone_id: str) -> str:
    return zone_id.replace("/hostedzone/", "")


class Route53Service:
    def __init__(self, config: Route53Config, *, session: Optional[Any] = None) -> None:
        self._config = config
        self._session = session or aioboto3.Session()

    def _client(self) -> Any:
        return self._session.client("route53", region_name=self._config.region_name)

    async def find_hosted_zone_id(self, *, domain_name: str) -> Optional[str]:
        """Return the id of the hosted zone named `domain_name`, or None."""

        try:
            route53_client: Any = self._client()
            async with route53_client as route53:
                response = await route53.list_hosted_zones_by_name(DNSName=domain_name)
        except Exception as exc:
            logger.exception("Route 53 list_hosted_zones_by_name failed")
            raise Route53ServiceError(f"Failed to look up hosted zone for {domain_name}") from exc

        for zone in response.get("HostedZones") or []:
            if zone.get("Name") in (f"{domain_name}.", domain_name) and zone.get("Id"):
                return _strip_zone_prefix(zone["Id"])
        return None

    async def resolve_hosted_zone_id(self, *, domain_name: str) -> str:
        """Configured hosted zone id, falling back to a lookup by domain name."""

        if self._config.hosted_zone_id:
            return _strip_zone_prefix(self._config.hosted_zone_id)

        zone_id = await self.find_hosted_zone_id(domain_name=domain_name)
        if not zone_id:
            raise HostedZoneNotFoundError("No hosted zones found")
        return zone_id

    async def ensure_hosted_zone(self, *, domain_name: str) -> tuple[str, bool]:
        """Return (zone_id, created), creating the zone only when none exists."""

        existing = await self.find_hosted_zone_id(domain_name=domain_name)
        if existing:
            logger.info("Hosted zone already exists for %s (%s)", domain_name, existing)
            return existing, False

        try:
            route53_client: Any = self._client()
            async with route53_client as route53:
                response = await route53.create_hosted_zone(
                    Name=domain_name,
                    CallerReference=str(int(time.time() * 1000)),
                    HostedZoneConfig={"Comment": f"Hosted zone for {domain_name}"},
                )
        except Exception as exc:
            logger.exception("Route 53 create_hosted_zone failed")
            raise Route53ServiceError(f"Failed to create hosted zone for {domain_name}") from exc

        zone_id = (response.get("HostedZone") or {}).get("Id")
        if not zone_id:
            raise Route53ServiceError("Failed to create hosted zone")

        logger.info("Created hosted zone for %s", domain_name)
        return _strip_zone_prefix(zone_id), True

    async def get_nameservers(self, *, hosted_zone_id: str) -> list[str]:
        try:
            route53_client: Any = self._client()
            async with route53_client as route53:
                response = await route53.get_hosted_zone(Id=hosted_zone_id)
        except Exception as exc:
            logger.exception("Route 53 get_hosted_zone failed")
            raise Route53ServiceError(f"Failed to get hosted zone {hosted_zone_id}") from exc

        nameservers = (response.get("DelegationSet") or {}).get("NameServers")
        if not nameservers:
            raise Route53ServiceError("No nameservers found for hosted zone")
        return list(nameservers)

    async def _upsert(self, *, hosted_zone_id: str, record_set: dict[str, Any]) -> None:
        try:
            route53_client: Any = self._client()
            async with route53_client as route53:
                await route53.change_resource_record_sets(
                    HostedZoneId=hosted_zone_id,
                    ChangeBatch={"Changes": [{"Action": "UPSERT", "ResourceRecordSet": record_set}]},
                )
        except Exception as exc:
            logger.exception("Route 53 change_resource_record_sets failed")
            raise Route53ServiceError(
                f"Failed to upsert {record_set.get('Type')} record {record_set.get('Name')}"
            ) from exc

    async def upsert_alias_record(
        self,
        *,
        hosted_zone_id: str,
        record_name: str,
        target_dns_name: str,
        target_hosted_zone_id: str,
    ) -> None:
        await self._upsert(
            hosted_zone_id=hosted_zone_id,
            record_set={
                "Name": record_name,
                "Type": "A",
                "AliasTarget": {
                    "DNSName": target_dns_name,
                    "HostedZoneId": target_hosted_zone_id,
                    "EvaluateTargetHealth": False,
                },
            },
        )
        logger.info("A record %s -> %s upserted", record_name, target_dns_name)

    async def upsert_validation_records(self, *, hosted_zone_id: str, validation_options: list[dict[str, Any]]) -> int:
        """Publish ACM DNS validation records one at a time.

        Options without a ResourceRecord are skipped. Returns the number upserted.
        """

        upserted = 0
        for option in validation_options:
            record = option.get("ResourceRecord")
            if not record:
                continue

            await self._upsert(
                hosted_zone_id=hosted_zone_id,
                record_set={
                    "Name": record["Name"],
                    "Type": record["Type"],
                    "TTL": VALIDATION_RECORD_TTL,
                    "ResourceRecords": [{"Value": record["Value"]}],
                },
            )
            upserted += 1

        logger.info("Upserted %d validation record(s) in zone %s", upserted, hosted_zone_id)
        return upserted
