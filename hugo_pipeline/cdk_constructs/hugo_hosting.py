"""Main composite construct for hosting a Hugo site."""

from aws_cdk import CfnOutput
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_route53 as route53
from constructs import Construct

from ..config import HostingConfig
from .certificate import DnsValidatedCertificate
from .distribution import CloudFrontDistribution
from .dns import DnsRecords
from .edge_function import EdgeFunction
from .site_content import SiteContent
from .storage import StorageBucket


class HugoHosting(Construct):
  """Complete hosting infrastructure for one build stage of a Hugo site.

  Creates:
  - Private S3 bucket named after the site domain
  - CloudFront origin access identity and distribution with HTTPS
  - CloudFront Function for redirects, basic auth (development) and index.html
  - ACM certificate (DNS validated)
  - Route 53 alias record in the existing hosted zone
  - Hugo build in Docker deployed to the bucket, invalidating the cache
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    config: HostingConfig,
    hosted_zone: route53.IHostedZone | None = None,
  ) -> None:
    super().__init__(scope, id)

    self.config = config
    self.build_stage = config.build_stage
    self.domain_name = config.domain_name
    self.site_domain = config.site_domain

    # DNS Hosted Zone (import)
    self.dns = DnsRecords(
      self,
      "dns",
      domain_name=config.domain_name,
      hosted_zone=hosted_zone,
    )

    origin_access_identity = cloudfront.OriginAccessIdentity(
      self,
      "cloudfront-OAI",
      comment=f"OAI for {id}",
    )

    # Storage - bucket name matches the site domain
    self.bucket = StorageBucket(
      self,
      "bucket",
      bucket_name=config.site_domain,
      origin_access_identity=origin_access_identity,
      removal_policy=config.removal_policy,
      auto_delete_objects=config.auto_delete_objects,
    )

    self.certificate = DnsValidatedCertificate(
      self,
      "certificate",
      domain_name=config.site_domain,
      hosted_zone=self.dns.hosted_zone,
    )

    # Basic auth only guards the non-production sites
    self.edge_function = EdgeFunction(
      self,
      "edge-function",
      redirect_replacements=config.redirect_replacements,
      basic_auth=None if config.is_production else config.basic_auth,
      custom_function_code=config.custom_function_code,
    )

    self.distribution = CloudFrontDistribution(
      self,
      "distribution",
      bucket=self.bucket.bucket,
      origin_access_identity=origin_access_identity,
      certificate=self.certificate.certificate,
      domain_name=config.site_domain,
      function=self.edge_function.function,
      error_pages=config.error_pages,
    )

    self.dns.create_cloudfront_record(
      record_name=config.site_domain,
      distribution=self.distribution.distribution,
    )

    self.content = SiteContent(
      self,
      "content",
      bucket=self.bucket.bucket,
      distribution=self.distribution.distribution,
      hugo_project_path=config.hugo_project_path,
      build_stage=config.build_stage,
      docker_image=config.docker_image,
      hugo_build_command=config.hugo_build_command,
      hugo_version=config.hugo_version,
      asset_hash=config.asset_hash,
    )

    # Outputs
    self.static_site_url = CfnOutput(
      self,
      "Site",
      value=config.site_url,
      description="URL of the hosted site",
    )
    CfnOutput(
      self,
      "Bucket",
      value=self.bucket.bucket.bucket_name,
      description="S3 bucket name",
    )
    CfnOutput(
      self,
      "Certificate",
      value=self.certificate.certificate.certificate_arn,
      description="ACM certificate ARN",
    )
    CfnOutput(
      self,
      "DistributionId",
      value=self.distribution.distribution.distribution_id,
      description="CloudFront distribution ID",
    )
