from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path
from starlette import status

from website_deploy.models.route53 import NameserversResponse
from website_deploy.services.dependencies import get_route53_service
from website_deploy.services.route53_service import Route53Service

router = APIRouter(prefix="/route53", tags=["route53"])


@router.get("/zones/{domain_name}/nameservers", response_model=NameserversResponse)
async def nameservers(
    domain_name: str = Path(..., description="Domain name of the hosted zone"),
    route53: Route53Service = Depends(get_route53_service),
) -> NameserversResponse:
    zone_id = await route53.find_hosted_zone_id(domain_name=domain_name)
    if not zone_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No hosted zone for {domain_name}")

    servers = await route53.get_nameservers(hosted_zone_id=zone_id)
    return NameserversResponse(domain_name=domain_name, hosted_zone_id=zone_id, nameservers=servers)
