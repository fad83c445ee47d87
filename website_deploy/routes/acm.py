from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from website_deploy.models.acm import CertificateItem, CertificateListResponse
from website_deploy.services.acm_service import AcmService
from website_deploy.services.dependencies import get_acm_service

router = APIRouter(prefix="/acm", tags=["acm"])


@router.get("/certificates", response_model=CertificateListResponse)
async def list_certificates(acm: AcmService = Depends(get_acm_service)) -> CertificateListResponse:
    certificates = await acm.list_certificates()
    return CertificateListResponse(count=len(certificates), certificates=certificates)


@router.get("/certificate", response_model=CertificateItem)
async def certificate_status(
    arn: str = Query(..., description="Certificate ARN"),
    acm: AcmService = Depends(get_acm_service),
) -> CertificateItem:
    certificate: dict[str, Any] = await acm.describe_certificate(certificate_arn=arn)
    return CertificateItem(arn=arn, domain_name=certificate.get("DomainName"), status=certificate.get("Status"))
