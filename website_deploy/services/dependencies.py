from __future__ import annotations

import aiohttp
from fastapi import FastAPI, Request

from website_deploy.services.acm_service import AcmService
from website_deploy.services.cloudfront_service import CloudFrontService
from website_deploy.services.config import (
    AcmConfig,
    CloudFrontConfig,
    Route53Config,
    S3Config,
    SiteCheckConfig,
    WebsiteConfig,
)
from website_deploy.services.route53_service import Route53Service
from website_deploy.services.s3_service import S3Service
from website_deploy.services.setup.certificate_setup_service import CertificateSetupService
from website_deploy.services.setup.distribution_setup_service import DistributionSetupService
from website_deploy.services.setup.dns_setup_service import DnsSetupService
from website_deploy.services.setup.website_setup_service import WebsiteSetupService
from website_deploy.services.site_check_service import SiteCheckService


def get_website_config() -> WebsiteConfig:
    return WebsiteConfig.from_env()


def get_s3_service() -> S3Service:
    """FastAPI dependency provider for an S3Service instance."""

    return S3Service(S3Config.from_env())


def get_acm_service() -> AcmService:
    return AcmService(AcmConfig.from_env())


def get_route53_service() -> Route53Service:
    return Route53Service(Route53Config.from_env())


def get_cloudfront_service() -> CloudFrontService:
    return CloudFrontService(CloudFrontConfig.from_env())


def get_http_session_from_app(app: FastAPI) -> aiohttp.ClientSession:
    session = getattr(app.state, "http_session", None)
    if session is None:
        raise RuntimeError("HTTP session not initialized (app.state.http_session)")
    if not isinstance(session, aiohttp.ClientSession):
        raise RuntimeError("Unexpected http_session type")
    return session


def get_http_session(request: Request) -> aiohttp.ClientSession:
    return get_http_session_from_app(request.app)


def get_site_check_service(request: Request) -> SiteCheckService:
    return SiteCheckService(SiteCheckConfig.from_env(), session=get_http_session(request))


# Providers for the one-shot scripts (no request context).


def get_website_setup_service() -> WebsiteSetupService:
    return WebsiteSetupService(s3=get_s3_service(), config=get_website_config())


def get_certificate_setup_service() -> CertificateSetupService:
    return CertificateSetupService(
        acm=get_acm_service(),
        route53=get_route53_service(),
        config=get_website_config(),
    )


def get_distribution_setup_service() -> DistributionSetupService:
    return DistributionSetupService(
        cloudfront=get_cloudfront_service(),
        route53=get_route53_service(),
        website=get_website_config(),
        config=CloudFrontConfig.from_env(),
        bucket_name=S3Config.from_env().bucket_name,
    )


def get_dns_setup_service() -> DnsSetupService:
    s3 = get_s3_service()
    route53_config = Route53Config.from_env()
    return DnsSetupService(
        route53=Route53Service(route53_config),
        website=get_website_config(),
        config=route53_config,
        website_url=s3.website_url,
        bucket_region=S3Config.from_env().region_name,
    )
