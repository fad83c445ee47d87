from __future__ import annotations

from dataclasses import dataclass, field

from website_deploy.services.config._env import float_env, int_env, optional_env
from website_deploy.services.polling import PollConfig


@dataclass(frozen=True)
class AcmConfig:
    """ACM settings.

    Certificates used by CloudFront must live in us-east-1, whatever region the
    rest of the site is deployed to.
    """

    region_name: str = "us-east-1"
    records_poll: PollConfig = field(default_factory=lambda: PollConfig(max_attempts=10, interval=5.0))
    issuance_poll: PollConfig = field(default_factory=lambda: PollConfig(max_attempts=60, interval=30.0))

    @staticmethod
    def from_env() -> "AcmConfig":
        return AcmConfig(
            region_name=optional_env("ACM_REGION") or "us-east-1",
            records_poll=PollConfig(
                max_attempts=int_env("ACM_RECORDS_MAX_ATTEMPTS", 10),
                interval=float_env("ACM_RECORDS_INTERVAL_SECONDS", 5.0),
            ),
            issuance_poll=PollConfig(
                max_attempts=int_env("ACM_ISSUANCE_MAX_ATTEMPTS", 60),
                interval=float_env("ACM_ISSUANCE_INTERVAL_SECONDS", 30.0),
            ),
        )
