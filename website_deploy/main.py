from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status

from website_deploy.logging_setup import ensure_logging
from website_deploy.routes.acm import router as acm_router
from website_deploy.routes.route53 import router as route53_router
from website_deploy.routes.s3 import router as s3_router
from website_deploy.routes.site import router as site_router
from website_deploy.services.acm_service import AcmServiceError
from website_deploy.services.cloudfront_service import CloudFrontServiceError
from website_deploy.services.route53_service import Route53ServiceError
from website_deploy.services.s3_service import S3ServiceError

SERVICE_ERRORS = (S3ServiceError, AcmServiceError, Route53ServiceError, CloudFrontServiceError)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_logging()
    async with aiohttp.ClientSession() as session:
        app.state.http_session = session
        yield


app = FastAPI(lifespan=lifespan)

app.include_router(s3_router)
app.include_router(acm_router)
app.include_router(route53_router)
app.include_router(site_router)


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map AWS service-layer failures to a consistent HTTP response.

    Returns:
        502 Bad Gateway with a JSON body: {"detail": "..."}
    """
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


for _error in SERVICE_ERRORS:
    app.add_exception_handler(_error, service_error_handler)


@app.get("/")
async def root():
    return {"message": "Website deploy API is running."}
