"""Route 53 DNS constructs."""

from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_route53 as route53
from aws_cdk import aws_route53_targets as targets
from constructs import Construct


class DnsRecords(Construct):
  """Existing Route 53 hosted zone and the site's alias record."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    domain_name: str,
    hosted_zone: route53.IHostedZone | None = None,
  ) -> None:
    super().__init__(scope, id)

    # The zone for the apex domain must already exist in the account
    self.hosted_zone = hosted_zone or route53.HostedZone.from_lookup(
      self,
      "Zone",
      domain_name=domain_name,
    )

  def create_cloudfront_record(
    self,
    record_name: str,
    distribution: cloudfront.IDistribution,
  ) -> route53.ARecord:
    """Create an A record aliasing record_name to the distribution."""
    return route53.ARecord(
      self,
      "SiteAliasRecord",
      zone=self.hosted_zone,
      record_name=record_name,
      target=route53.RecordTarget.from_alias(targets.CloudFrontTarget(distribution)),
    )
