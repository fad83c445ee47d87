from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from website_deploy.models.s3 import FileExistsResponse, FileListResponse
from website_deploy.services.dependencies import get_s3_service
from website_deploy.services.s3_service import S3Service

router = APIRouter(prefix="/s3", tags=["s3"])


@router.get("/files", response_model=FileListResponse)
async def list_files(
    prefix: Optional[str] = Query(default=None),
    s3: S3Service = Depends(get_s3_service),
) -> FileListResponse:
    files = await s3.list_files(prefix=prefix)
    return FileListResponse(count=len(files), files=files)


@router.get("/files/{key:path}/exists", response_model=FileExistsResponse)
async def file_exists(
    key: str = Path(..., description="S3 object key"),
    s3: S3Service = Depends(get_s3_service),
) -> FileExistsResponse:
    return FileExistsResponse(key=key, exists=await s3.file_exists(key=key))
