from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class CertificateItem(BaseModel):
    arn: str
    domain_name: Optional[str] = None
    status: Optional[str] = None

    @staticmethod
    def from_summary(summary: dict[str, Any]) -> "CertificateItem":
        return CertificateItem(
            arn=str(summary.get("CertificateArn")),
            domain_name=summary.get("DomainName"),
            status=summary.get("Status"),
        )


class CertificateListResponse(BaseModel):
    count: int
    certificates: list[CertificateItem]
