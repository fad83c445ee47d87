from __future__ import annotations

from pydantic import BaseModel


class NameserversResponse(BaseModel):
    domain_name: str
    hosted_zone_id: str
    nameservers: list[str]
