"""ACM certificate with DNS validation."""

from aws_cdk import Stack, Token
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_route53 as route53
from constructs import Construct

# CloudFront only reads certificates from this region
CLOUDFRONT_CERTIFICATE_REGION = "us-east-1"


class DnsValidatedCertificate(Construct):
  """ACM certificate with DNS validation, usable by CloudFront."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    domain_name: str,
    hosted_zone: route53.IHostedZone,
  ) -> None:
    super().__init__(scope, id)

    region = Stack.of(self).region
    if not Token.is_unresolved(region) and region == CLOUDFRONT_CERTIFICATE_REGION:
      self.certificate: acm.ICertificate = acm.Certificate(
        self,
        "SiteCertificate",
        domain_name=domain_name,
        validation=acm.CertificateValidation.from_dns(hosted_zone),
      )
    else:
      self.certificate = acm.DnsValidatedCertificate(
        self,
        "SiteCertificate",
        domain_name=domain_name,
        hosted_zone=hosted_zone,
        region=CLOUDFRONT_CERTIFICATE_REGION,
      )
