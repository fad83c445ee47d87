from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional

import aioboto3

from website_deploy.services.config import CloudFrontConfig
from website_deploy.services.polling import PollResult, PollState, Sleep, poll_until_ready


logger = logging.getLogger(__name__)

S3_ORIGIN_ID = "S3Origin"


class CloudFrontServiceError(RuntimeError):
    pass


class DistributionDeploymentTimeoutError(CloudFrontServiceError):
    pass


class CloudFrontService:
    """CloudFront distribution in front of the site bucket.

    Only the origin access control and distribution are created here; the DNS
    alias lives in Route53Service.
    """

    def __init__(
        self,
        config: CloudFrontConfig,
        *,
        session: Optional[Any] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._session = session or aioboto3.Session()
        self._sleep = sleep

    def _client(self) -> Any:
        return self._session.client("cloudfront", region_name=self._config.region_name)

    async def create_origin_access_control(self, *, bucket_name: str) -> str:
        try:
            cloudfront_client: Any = self._client()
            async with cloudfront_client as cloudfront:
                response = await cloudfront.create_origin_access_control(
                    OriginAccessControlConfig={
                        "Name": f"{bucket_name}-OAC",
                        "Description": f"Origin access control for {bucket_name}",
                        "OriginAccessControlOriginType": "s3",
                        "SigningBehavior": "always",
                        "SigningProtocol": "sigv4",
                    }
                )
        except Exception as exc:
            logger.exception("CloudFront create_origin_access_control failed")
            raise CloudFrontServiceError(f"Failed to create Origin Access Control for {bucket_name}") from exc

        oac_id = (response.get("OriginAccessControl") or {}).get("Id")
        if not oac_id:
            raise CloudFrontServiceError("Failed to create Origin Access Control")
        return oac_id

    def _distribution_config(self, *, domain_name: str, bucket_name: str, certificate_arn: str, oac_id: str) -> dict[str, Any]:
        methods = ["GET", "HEAD"]
        return {
            "CallerReference": str(int(time.time() * 1000)),
            "Aliases": {"Quantity": 1, "Items": [domain_name]},
            "DefaultRootObject": "index.html",
            "Origins": {
                "Quantity": 1,
                "Items": [
                    {
                        "Id": S3_ORIGIN_ID,
                        "DomainName": f"{bucket_name}.s3.amazonaws.com",
                        "OriginAccessControlId": oac_id,
                        "S3OriginConfig": {"OriginAccessIdentity": ""},
                    }
                ],
            },
            "DefaultCacheBehavior": {
                "TargetOriginId": S3_ORIGIN_ID,
                "ViewerProtocolPolicy": "redirect-to-https",
                "AllowedMethods": {
                    "Quantity": len(methods),
                    "Items": methods,
                    "CachedMethods": {"Quantity": len(methods), "Items": methods},
                },
                "ForwardedValues": {"QueryString": False, "Cookies": {"Forward": "none"}},
                "MinTTL": 0,
                "DefaultTTL": 86400,
                "MaxTTL": 31536000,
                "Compress": True,
            },
            "Enabled": True,
            "Comment": f"Distribution for {domain_name}",
            "ViewerCertificate": {
                "ACMCertificateArn": certificate_arn,
                "SSLSupportMethod": "sni-only",
                "MinimumProtocolVersion": "TLSv1.2_2021",
            },
            "HttpVersion": "http2",
            "PriceClass": self._config.price_class,
        }

    async def create_distribution(
        self,
        *,
        domain_name: str,
        bucket_name: str,
        certificate_arn: str,
        oac_id: str,
    ) -> dict[str, Any]:
        config = self._distribution_config(
            domain_name=domain_name,
            bucket_name=bucket_name,
            certificate_arn=certificate_arn,
            oac_id=oac_id,
        )
        try:
            cloudfront_client: Any = self._client()
            async with cloudfront_client as cloudfront:
                response = await cloudfront.create_distribution(DistributionConfig=config)
        except Exception as exc:
            logger.exception("CloudFront create_distribution failed")
            raise CloudFrontServiceError(f"Failed to create CloudFront distribution for {domain_name}") from exc

        distribution = response.get("Distribution")
        if not distribution:
            raise CloudFrontServiceError("Failed to create CloudFront distribution")

        logger.info("Created distribution %s (%s)", distribution.get("Id"), distribution.get("DomainName"))
        return distribution

    async def get_distribution_status(self, *, distribution_id: str) -> Optional[str]:
        try:
            cloudfront_client: Any = self._client()
            async with cloudfront_client as cloudfront:
                response = await cloudfront.get_distribution(Id=distribution_id)
        except Exception as exc:
            logger.exception("CloudFront get_distribution failed")
            raise CloudFrontServiceError(f"Failed to get distribution {distribution_id}") from exc

        return (response.get("Distribution") or {}).get("Status")

    async def wait_for_deployed(self, *, distribution_id: str) -> None:
        async def check() -> PollResult[str]:
            status = await self.get_distribution_status(distribution_id=distribution_id)
            if status == "Deployed":
                return PollResult.ready(status)
            return PollResult.pending()

        result = await poll_until_ready(
            check,
            self._config.deployment_poll,
            sleep=self._sleep,
            description=f"Distribution {distribution_id} deployment",
        )
        if result.state is not PollState.READY:
            raise DistributionDeploymentTimeoutError("CloudFront distribution deployment timed out")
