from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from website_deploy.services.config._env import bool_env, optional_env, region_from_env
from website_deploy.services.polling import PollConfig


@dataclass(frozen=True)
class CloudFrontConfig:
    region_name: str
    certificate_arn: Optional[str] = None
    price_class: str = "PriceClass_100"
    wait_for_deployment: bool = False
    deployment_poll: PollConfig = field(default_factory=lambda: PollConfig(max_attempts=60, interval=30.0))

    @staticmethod
    def from_env() -> "CloudFrontConfig":
        return CloudFrontConfig(
            region_name=region_from_env(),
            certificate_arn=optional_env("CLOUDFRONT_CERTIFICATE_ARN"),
            price_class=optional_env("CLOUDFRONT_PRICE_CLASS") or "PriceClass_100",
            wait_for_deployment=bool_env("CLOUDFRONT_WAIT_FOR_DEPLOYMENT"),
        )
