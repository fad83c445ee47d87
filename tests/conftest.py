from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FakeSession, RecordingSleep
from website_deploy.services.config import (
    AcmConfig,
    CloudFrontConfig,
    Route53Config,
    S3Config,
    WebsiteConfig,
)
from website_deploy.services.polling import PollConfig


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def s3_config() -> S3Config:
    return S3Config(bucket_name="dice-roller-site", region_name="us-west-2")


@pytest.fixture
def acm_config() -> AcmConfig:
    return AcmConfig(
        records_poll=PollConfig(max_attempts=10, interval=5.0),
        issuance_poll=PollConfig(max_attempts=4, interval=30.0),
    )


@pytest.fixture
def route53_config() -> Route53Config:
    return Route53Config(region_name="us-west-2")


@pytest.fixture
def cloudfront_config() -> CloudFrontConfig:
    return CloudFrontConfig(
        region_name="us-west-2",
        certificate_arn="arn:aws:acm:us-east-1:123456789012:certificate/abc",
        deployment_poll=PollConfig(max_attempts=3, interval=30.0),
    )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "website"
    (folder / "assets").mkdir(parents=True)
    (folder / "index.html").write_text("<html></html>", encoding="utf-8")
    (folder / "error.html").write_text("<html>oops</html>", encoding="utf-8")
    (folder / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (folder / "assets" / "app.js").write_text("console.log('roll');", encoding="utf-8")
    return folder


@pytest.fixture
def website_config(site_dir: Path) -> WebsiteConfig:
    return WebsiteConfig(domain_name="diceroller.example", local_folder=site_dir)
