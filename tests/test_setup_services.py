from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from fakes import client_error
from website_deploy.services.acm_service import AcmService, ValidationRecordsUnavailableError
from website_deploy.services.cloudfront_service import CloudFrontService
from website_deploy.services.config import Route53Config, S3Config
from website_deploy.services.orchestrator import ProvisioningStepError
from website_deploy.services.route53_service import Route53Service
from website_deploy.services.s3_service import S3Service
from website_deploy.services.setup.certificate_setup_service import CertificateSetupService
from website_deploy.services.setup.distribution_setup_service import DistributionSetupService
from website_deploy.services.setup.dns_setup_service import DnsSetupService
from website_deploy.services.setup.website_setup_service import WebsiteSetupService

ARN = "arn:aws:acm:us-east-1:123456789012:certificate/abc"
ZONES = {"HostedZones": [{"Id": "/hostedzone/ZSITE", "Name": "diceroller.example."}]}


@pytest.fixture
def website_service(s3_config, website_config, fake_session):
    return WebsiteSetupService(s3=S3Service(s3_config, session=fake_session), config=website_config)


# -----------------
# Website bucket
# -----------------


@pytest.mark.asyncio
async def test_provision_website_uploads_every_file(website_service, fake_session):
    s3 = fake_session.get("s3")
    s3.set("head_bucket", client_error("404", "HeadBucket"))

    context = await website_service.provision()

    assert context["bucket_created"] is True
    assert context["website_configured"] is True
    assert context["website_url"] == "http://dice-roller-site.s3-website-us-west-2.amazonaws.com"
    summary = context["upload_summary"]
    assert summary.ok
    assert sorted(summary.succeeded) == ["assets/app.js", "error.html", "favicon.ico", "index.html"]
    content_types = {call["Key"]: call["ContentType"] for call in s3.calls_to("put_object")}
    assert content_types["assets/app.js"] == "application/javascript"
    assert content_types["index.html"] == "text/html"


@pytest.mark.asyncio
async def test_provision_website_continues_past_bucket_and_file_failures(website_service, fake_session):
    s3 = fake_session.get("s3")
    s3.set("head_bucket", client_error("404", "HeadBucket"))
    s3.set("create_bucket", client_error("BucketAlreadyExists", "CreateBucket"))

    def put_object(**kwargs):
        if kwargs["Key"] == "error.html":
            raise client_error("AccessDenied", "PutObject")
        return {}

    s3.set("put_object", put_object)

    context = await website_service.provision()

    assert "bucket_created" not in context
    assert context["website_configured"] is True
    summary = context["upload_summary"]
    assert list(summary.failed) == ["error.html"]
    assert len(summary.succeeded) == 3


class UploadRecorder:
    """put_object stand-in that yields mid-upload and tracks overlap."""

    def __init__(self, fail_keys=()):
        self.started: list[str] = []
        self.active = 0
        self.max_active = 0
        self._fail_keys = set(fail_keys)

    async def __call__(self, **kwargs):
        self.started.append(kwargs["Key"])
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            if kwargs["Key"] in self._fail_keys:
                raise client_error("AccessDenied", "PutObject")
            return {}
        finally:
            self.active -= 1


@pytest.mark.asyncio
async def test_default_concurrency_uploads_one_file_at_a_time_in_path_order(website_service, website_config, fake_session):
    assert website_config.upload_concurrency == 1
    recorder = UploadRecorder()
    fake_session.get("s3").set("put_object", recorder)

    summary = await website_service.upload_site_files()

    assert recorder.max_active == 1
    assert recorder.started == ["assets/app.js", "error.html", "favicon.ico", "index.html"]
    assert summary.succeeded == recorder.started


@pytest.mark.asyncio
async def test_higher_concurrency_uploads_every_file_and_counts_failures(s3_config, website_config, fake_session):
    config = replace(website_config, upload_concurrency=3)
    service = WebsiteSetupService(s3=S3Service(s3_config, session=fake_session), config=config)
    recorder = UploadRecorder(fail_keys={"favicon.ico"})
    fake_session.get("s3").set("put_object", recorder)

    summary = await service.upload_site_files()

    assert sorted(recorder.started) == ["assets/app.js", "error.html", "favicon.ico", "index.html"]
    assert 1 < recorder.max_active <= 3
    assert summary.planned == 4
    assert sorted(summary.succeeded) == ["assets/app.js", "error.html", "index.html"]
    assert list(summary.failed) == ["favicon.ico"]


@pytest.mark.asyncio
async def test_provision_website_continues_past_website_configuration_failure(website_service, fake_session):
    s3 = fake_session.get("s3")
    s3.set("put_bucket_website", client_error("AccessDenied", "PutBucketWebsite"))

    context = await website_service.provision()

    assert context["bucket_created"] is False
    assert "website_configured" not in context
    assert len(s3.calls_to("put_bucket_website")) == 1
    assert context["upload_summary"].ok
    assert len(s3.calls_to("put_object")) == 4


@pytest.mark.asyncio
async def test_provision_website_missing_folder_is_fatal(s3_config, website_config, fake_session, tmp_path):
    config = replace(website_config, local_folder=tmp_path / "absent")
    service = WebsiteSetupService(s3=S3Service(s3_config, session=fake_session), config=config)

    with pytest.raises(ProvisioningStepError) as excinfo:
        await service.provision()

    assert excinfo.value.step == "upload-site-files"
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


@pytest.mark.asyncio
async def test_update_site_files_uploads_no_cache_and_verifies(s3_config, website_config, fake_session):
    config = replace(website_config, update_files=("favicon.ico", "missing.js"))
    service = WebsiteSetupService(s3=S3Service(s3_config, session=fake_session), config=config)
    s3 = fake_session.get("s3")

    summary = await service.update_site_files()

    assert summary.succeeded == ["favicon.ico"]
    assert list(summary.failed) == ["missing.js"]
    (put,) = s3.calls_to("put_object")
    assert put["CacheControl"] == "no-cache"
    assert put["ContentType"] == "image/x-icon"
    assert s3.calls_to("head_object") == [{"Bucket": "dice-roller-site", "Key": "favicon.ico"}]


@pytest.mark.asyncio
async def test_update_site_files_reports_unverified_upload(website_service, fake_session):
    fake_session.get("s3").set("head_object", client_error("404", "HeadObject"))

    summary = await website_service.update_site_files()

    assert summary.succeeded == []
    assert "favicon.ico" in summary.failed


# -----------------
# Certificate
# -----------------


@pytest.fixture
def certificate_service(acm_config, route53_config, website_config, fake_session, recording_sleep):
    return CertificateSetupService(
        acm=AcmService(acm_config, session=fake_session, sleep=recording_sleep),
        route53=Route53Service(route53_config, session=fake_session),
        config=website_config,
    )


@pytest.mark.asyncio
async def test_certificate_flow(certificate_service, fake_session):
    acm = fake_session.get("acm")
    route53 = fake_session.get("route53")
    options = [
        {"DomainName": "diceroller.example", "ResourceRecord": {"Name": "_a.", "Type": "CNAME", "Value": "_b."}},
        {"DomainName": "*.diceroller.example", "ResourceRecord": {"Name": "_a.", "Type": "CNAME", "Value": "_b."}},
    ]
    acm.set("request_certificate", {"CertificateArn": ARN})
    acm.set(
        "describe_certificate",
        {"Certificate": {"DomainValidationOptions": options, "Status": "PENDING_VALIDATION"}},
        {"Certificate": {"Status": "PENDING_VALIDATION"}},
        {"Certificate": {"Status": "ISSUED"}},
    )
    route53.set("list_hosted_zones_by_name", ZONES)

    context = await certificate_service.provision()

    assert context["certificate_arn"] == ARN
    assert context["hosted_zone_id"] == "ZSITE"
    assert context["validation_records_upserted"] == 2
    assert context["certificate_status"] == "ISSUED"
    assert len(acm.calls_to("list_certificates")) == 1


@pytest.mark.asyncio
async def test_certificate_flow_stops_when_records_never_appear(certificate_service, fake_session):
    acm = fake_session.get("acm")
    route53 = fake_session.get("route53")
    acm.set("request_certificate", {"CertificateArn": ARN})
    acm.set("describe_certificate", {"Certificate": {"Status": "PENDING_VALIDATION"}})

    with pytest.raises(ProvisioningStepError) as excinfo:
        await certificate_service.provision()

    assert excinfo.value.step == "get-validation-records"
    assert excinfo.value.completed_steps == ("request-certificate",)
    assert isinstance(excinfo.value.__cause__, ValidationRecordsUnavailableError)
    assert route53.calls == []


# -----------------
# Distribution
# -----------------


@pytest.fixture
def distribution_service(cloudfront_config, route53_config, website_config, fake_session, recording_sleep):
    def build(config=cloudfront_config):
        return DistributionSetupService(
            cloudfront=CloudFrontService(config, session=fake_session, sleep=recording_sleep),
            route53=Route53Service(route53_config, session=fake_session),
            website=website_config,
            config=config,
            bucket_name="dice-roller-site",
        )

    return build


@pytest.mark.asyncio
async def test_distribution_flow(distribution_service, fake_session):
    cloudfront = fake_session.get("cloudfront")
    route53 = fake_session.get("route53")
    cloudfront.set("create_origin_access_control", {"OriginAccessControl": {"Id": "OAC1"}})
    cloudfront.set("create_distribution", {"Distribution": {"Id": "E1", "DomainName": "d111.cloudfront.net"}})
    route53.set("list_hosted_zones_by_name", ZONES)

    context = await distribution_service().provision()

    assert context["distribution_id"] == "E1"
    assert context["distribution_domain_name"] == "d111.cloudfront.net"
    assert cloudfront.calls_to("get_distribution") == []
    alias = route53.calls_to("change_resource_record_sets")[0]["ChangeBatch"]["Changes"][0]["ResourceRecordSet"]
    assert alias["AliasTarget"]["DNSName"] == "d111.cloudfront.net"
    assert alias["AliasTarget"]["HostedZoneId"] == "Z2FDTNDATAQYW2"


@pytest.mark.asyncio
async def test_distribution_flow_optionally_waits_for_deployment(distribution_service, cloudfront_config, fake_session):
    cloudfront = fake_session.get("cloudfront")
    cloudfront.set("create_origin_access_control", {"OriginAccessControl": {"Id": "OAC1"}})
    cloudfront.set("create_distribution", {"Distribution": {"Id": "E1", "DomainName": "d111.cloudfront.net"}})
    cloudfront.set("get_distribution", {"Distribution": {"Status": "Deployed"}})
    fake_session.get("route53").set("list_hosted_zones_by_name", ZONES)

    context = await distribution_service(replace(cloudfront_config, wait_for_deployment=True)).provision()

    assert context["distribution_status"] == "Deployed"


@pytest.mark.asyncio
async def test_distribution_flow_requires_certificate(distribution_service, cloudfront_config, fake_session):
    with pytest.raises(ValueError, match="CLOUDFRONT_CERTIFICATE_ARN"):
        await distribution_service(replace(cloudfront_config, certificate_arn=None)).provision()

    assert fake_session.get("cloudfront").calls == []


@pytest.mark.asyncio
async def test_distribution_flow_leaves_created_resources_on_dns_failure(distribution_service, fake_session):
    cloudfront = fake_session.get("cloudfront")
    cloudfront.set("create_origin_access_control", {"OriginAccessControl": {"Id": "OAC1"}})
    cloudfront.set("create_distribution", {"Distribution": {"Id": "E1", "DomainName": "d111.cloudfront.net"}})
    fake_session.get("route53").set("list_hosted_zones_by_name", {"HostedZones": []})

    with pytest.raises(ProvisioningStepError) as excinfo:
        await distribution_service().provision()

    assert excinfo.value.step == "update-dns-record"
    assert excinfo.value.completed_steps == ("create-origin-access-control", "create-distribution")
    assert [name for name, _ in cloudfront.calls if name.startswith("delete")] == []


# -----------------
# DNS
# -----------------


@pytest.mark.asyncio
async def test_dns_flow(route53_config, website_config, fake_session):
    route53 = fake_session.get("route53")
    route53.set("list_hosted_zones_by_name", {"HostedZones": []})
    route53.set("create_hosted_zone", {"HostedZone": {"Id": "/hostedzone/ZNEW"}})
    route53.set("get_hosted_zone", {"DelegationSet": {"NameServers": ["ns-1.awsdns-01.org"]}})
    service = DnsSetupService(
        route53=Route53Service(route53_config, session=fake_session),
        website=website_config,
        config=route53_config,
        website_url="http://dice-roller-site.s3-website-us-west-2.amazonaws.com",
        bucket_region="us-west-2",
    )

    context = await service.provision()

    assert context["hosted_zone_id"] == "ZNEW"
    assert context["hosted_zone_created"] is True
    assert context["nameservers"] == ["ns-1.awsdns-01.org"]
    record_set = route53.calls_to("change_resource_record_sets")[0]["ChangeBatch"]["Changes"][0]["ResourceRecordSet"]
    assert record_set["AliasTarget"] == {
        "DNSName": "dice-roller-site.s3-website-us-west-2.amazonaws.com",
        "HostedZoneId": "Z3BJ6K6RIION7M",
        "EvaluateTargetHealth": False,
    }


@pytest.mark.asyncio
async def test_dns_flow_aliases_dot_style_website_endpoint(website_config, fake_session):
    route53_config = Route53Config(region_name="eu-central-1")
    route53 = fake_session.get("route53")
    route53.set("list_hosted_zones_by_name", ZONES)
    route53.set("get_hosted_zone", {"DelegationSet": {"NameServers": ["ns-1.awsdns-01.org"]}})
    s3 = S3Service(S3Config(bucket_name="dice-roller-site", region_name="eu-central-1"), session=fake_session)
    service = DnsSetupService(
        route53=Route53Service(route53_config, session=fake_session),
        website=website_config,
        config=route53_config,
        website_url=s3.website_url,
        bucket_region="eu-central-1",
    )

    context = await service.provision()

    assert context["alias_target"] == "dice-roller-site.s3-website.eu-central-1.amazonaws.com"
    record_set = route53.calls_to("change_resource_record_sets")[0]["ChangeBatch"]["Changes"][0]["ResourceRecordSet"]
    assert record_set["AliasTarget"]["HostedZoneId"] == "Z21DNDUVLTQW6Q"
