from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aioboto3

from website_deploy.models.acm import CertificateItem
from website_deploy.services.config import AcmConfig
from website_deploy.services.polling import PollResult, PollState, Sleep, poll_until_ready


logger = logging.getLogger(__name__)


class AcmServiceError(RuntimeError):
    pass


class ValidationRecordsUnavailableError(AcmServiceError):
    pass


class CertificateValidationFailedError(AcmServiceError):
    pass


class CertificateValidationTimeoutError(AcmServiceError):
    pass


class AcmService:
    """Request and validate TLS certificates for the site domain."""

    def __init__(self, config: AcmConfig, *, session: Optional[Any] = None, sleep: Sleep = asyncio.sleep) -> None:
        self._config = config
        self._session = session or aioboto3.Session()
        self._sleep = sleep

    def _client(self) -> Any:
        return self._session.client("acm", region_name=self._config.region_name)

    async def list_certificates(self) -> list[CertificateItem]:
        try:
            acm_client: Any = self._client()
            async with acm_client as acm:
                response = await acm.list_certificates()
        except Exception as exc:
            logger.exception("ACM list_certificates failed")
            raise AcmServiceError("Failed to list certificates") from exc

        summaries = response.get("CertificateSummaryList") or []
        return [CertificateItem.from_summary(s) for s in summaries]

    async def request_certificate(self, *, domain_name: str) -> str:
        """Request a DNS-validated certificate covering the domain and its subdomains."""

        try:
            acm_client: Any = self._client()
            async with acm_client as acm:
                response = await acm.request_certificate(
                    DomainName=domain_name,
                    ValidationMethod="DNS",
                    SubjectAlternativeNames=[f"*.{domain_name}"],
                    Tags=[{"Key": "Name", "Value": f"{domain_name}-certificate"}],
                )
        except Exception as exc:
            logger.exception("ACM request_certificate failed")
            raise AcmServiceError(f"Failed to request certificate for {domain_name}") from exc

        certificate_arn = response.get("CertificateArn")
        if not certificate_arn:
            raise AcmServiceError("Failed to get Certificate ARN")

        logger.info("Requested certificate %s for %s", certificate_arn, domain_name)
        return certificate_arn

    async def describe_certificate(self, *, certificate_arn: str) -> dict[str, Any]:
        try:
            acm_client: Any = self._client()
            async with acm_client as acm:
                response = await acm.describe_certificate(CertificateArn=certificate_arn)
        except Exception as exc:
            logger.exception("ACM describe_certificate failed")
            raise AcmServiceError(f"Failed to describe certificate {certificate_arn}") from exc

        return response.get("Certificate") or {}

    async def get_validation_records(self, *, certificate_arn: str) -> list[dict[str, Any]]:
        """Wait until ACM has generated the DNS validation records.

        Returns the certificate's DomainValidationOptions.
        """

        async def check() -> PollResult[list[dict[str, Any]]]:
            certificate = await self.describe_certificate(certificate_arn=certificate_arn)
            options = certificate.get("DomainValidationOptions") or []
            if options and options[0].get("ResourceRecord"):
                return PollResult.ready(options)
            return PollResult.pending()

        result = await poll_until_ready(
            check,
            self._config.records_poll,
            sleep=self._sleep,
            description="Certificate validation records",
        )
        if result.state is not PollState.READY or result.value is None:
            raise ValidationRecordsUnavailableError("Failed to get validation records")
        return result.value

    async def wait_for_certificate_issued(self, *, certificate_arn: str) -> None:
        async def check() -> PollResult[str]:
            certificate = await self.describe_certificate(certificate_arn=certificate_arn)
            status = certificate.get("Status")
            if status == "ISSUED":
                return PollResult.ready(status)
            if status == "FAILED":
                return PollResult.failed(certificate.get("FailureReason") or "FAILED")
            logger.info("Certificate status: %s", status)
            return PollResult.pending()

        result = await poll_until_ready(
            check,
            self._config.issuance_poll,
            sleep=self._sleep,
            description="Certificate issuance",
        )
        if result.state is PollState.FAILED:
            logger.error("Certificate %s failed validation: %s", certificate_arn, result.reason)
            raise CertificateValidationFailedError("Certificate validation failed")
        if result.state is PollState.TIMED_OUT:
            raise CertificateValidationTimeoutError("Certificate validation timed out")

        logger.info("Certificate has been validated and issued")
