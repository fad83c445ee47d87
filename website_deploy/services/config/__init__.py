"""Configuration package (Facade).

Re-exports the configuration types of every provisioning flow so callers can
import from a single, stable path:

	from website_deploy.services.config import S3Config, WebsiteConfig

Each type is a frozen dataclass with a ``from_env()`` constructor; the flows
never read environment variables directly.
"""

from website_deploy.services.config.acm_config import AcmConfig
from website_deploy.services.config.cloudfront_config import CloudFrontConfig
from website_deploy.services.config.route53_config import Route53Config
from website_deploy.services.config.s3_config import S3Config
from website_deploy.services.config.site_check_config import SiteCheckConfig
from website_deploy.services.config.website_config import WebsiteConfig

__all__ = [
	"AcmConfig",
	"CloudFrontConfig",
	"Route53Config",
	"S3Config",
	"SiteCheckConfig",
	"WebsiteConfig",
]
