"""CDK constructs for hosting a Hugo site and deploying it through a pipeline."""

from .certificate import DnsValidatedCertificate
from .distribution import CloudFrontDistribution
from .dns import DnsRecords
from .edge_function import EdgeFunction, render_function_code
from .hugo_hosting import HugoHosting
from .page_stage import HugoHostingStack, HugoPageStage
from .pipeline import HugoPipeline
from .repository import HugoRepository
from .site_content import SiteContent
from .storage import StorageBucket

__all__ = [
  "CloudFrontDistribution",
  "DnsRecords",
  "DnsValidatedCertificate",
  "EdgeFunction",
  "HugoHosting",
  "HugoHostingStack",
  "HugoPageStage",
  "HugoPipeline",
  "HugoRepository",
  "SiteContent",
  "StorageBucket",
  "render_function_code",
]
