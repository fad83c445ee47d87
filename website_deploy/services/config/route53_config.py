from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from website_deploy.services.config._env import optional_env, region_from_env


@dataclass(frozen=True)
class Route53Config:
    region_name: str
    hosted_zone_id: Optional[str] = None
    s3_website_zone_id: Optional[str] = None

    # Hosted zone ids of the S3 website endpoints, used as alias targets.
    _S3_WEBSITE_ZONE_IDS: ClassVar[dict[str, str]] = {
        "us-east-1": "Z3AQBSTGFYJSTF",
        "us-east-2": "Z2O1EMRO9K5GLX",
        "us-west-1": "Z2F56UZL2M1ACD",
        "us-west-2": "Z3BJ6K6RIION7M",
        "eu-west-1": "Z1BKCTXD74EZPE",
        "eu-central-1": "Z21DNDUVLTQW6Q",
        "ap-northeast-1": "Z2M4EHUR26P7ZW",
        "ap-southeast-1": "Z3O0J2DXBE1FTB",
        "ap-southeast-2": "Z1WCIGYICN2BYD",
    }

    @staticmethod
    def from_env() -> "Route53Config":
        return Route53Config(
            region_name=region_from_env(),
            hosted_zone_id=optional_env("ROUTE53_HOSTED_ZONE_ID"),
            s3_website_zone_id=optional_env("ROUTE53_S3_WEBSITE_ZONE_ID"),
        )

    def website_zone_id_for(self, region_name: str) -> str:
        if self.s3_website_zone_id:
            return self.s3_website_zone_id
        zone_id = self._S3_WEBSITE_ZONE_IDS.get(region_name)
        if not zone_id:
            raise ValueError(
                f"No known S3 website hosted zone id for region {region_name!r}; set ROUTE53_S3_WEBSITE_ZONE_ID"
            )
        return zone_id
