from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class SiteCheckResponse(BaseModel):
    url: str
    reachable: bool
    status: Optional[int] = None
    detail: Optional[str] = None
