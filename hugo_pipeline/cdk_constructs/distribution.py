"""CloudFront distribution for the Hugo site."""

from aws_cdk import Duration
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_s3 as s3
from constructs import Construct

from ..config import ErrorPages


class CloudFrontDistribution(Construct):
  """CloudFront distribution with a private S3 origin and a viewer-request function."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    origin_access_identity: cloudfront.IOriginAccessIdentity,
    certificate: acm.ICertificate,
    domain_name: str,
    function: cloudfront.IFunction,
    error_pages: ErrorPages,
  ) -> None:
    super().__init__(scope, id)

    self.distribution = cloudfront.Distribution(
      self,
      "frontend-distribution",
      certificate=certificate,
      default_root_object="index.html",
      domain_names=[domain_name],
      minimum_protocol_version=cloudfront.SecurityPolicyProtocol.TLS_V1_2_2021,
      error_responses=[
        cloudfront.ErrorResponse(
          http_status=403,
          response_http_status=404,
          response_page_path=error_pages.http403_path,
          ttl=Duration.minutes(30),
        ),
        cloudfront.ErrorResponse(
          http_status=404,
          response_http_status=404,
          response_page_path=error_pages.http404_path,
          ttl=Duration.minutes(30),
        ),
      ],
      default_behavior=cloudfront.BehaviorOptions(
        origin=origins.S3BucketOrigin.with_origin_access_identity(
          bucket,
          origin_access_identity=origin_access_identity,
        ),
        compress=True,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD_OPTIONS,
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        function_associations=[
          cloudfront.FunctionAssociation(
            event_type=cloudfront.FunctionEventType.VIEWER_REQUEST,
            function=function,
          )
        ],
      ),
    )
