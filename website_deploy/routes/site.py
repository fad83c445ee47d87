from __future__ import annotations

from fastapi import APIRouter, Depends

from website_deploy.models.site import SiteCheckResponse
from website_deploy.services.config import WebsiteConfig
from website_deploy.services.dependencies import get_site_check_service, get_website_config
from website_deploy.services.site_check_service import SiteCheckService

router = APIRouter(prefix="/site", tags=["site"])


@router.get("/check", response_model=SiteCheckResponse)
async def check_site(
    website: WebsiteConfig = Depends(get_website_config),
    svc: SiteCheckService = Depends(get_site_check_service),
) -> SiteCheckResponse:
    return await svc.check(url=website.https_url)
