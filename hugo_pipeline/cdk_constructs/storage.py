"""Private S3 bucket holding the built Hugo site."""

from aws_cdk import RemovalPolicy
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct


class StorageBucket(Construct):
  """S3 bucket readable only through the CloudFront origin access identity."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket_name: str,
    origin_access_identity: cloudfront.IOriginAccessIdentity,
    removal_policy: RemovalPolicy = RemovalPolicy.RETAIN,
    auto_delete_objects: bool = False,
  ) -> None:
    super().__init__(scope, id)

    self.bucket = s3.Bucket(
      self,
      "frontend",
      bucket_name=bucket_name,
      public_read_access=False,
      block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
      removal_policy=removal_policy,
      # Deleting a non-empty bucket fails, so development buckets are emptied first
      auto_delete_objects=auto_delete_objects,
    )

    # Grant access to cloudfront
    self.bucket.add_to_resource_policy(
      iam.PolicyStatement(
        actions=["s3:GetObject"],
        resources=[self.bucket.arn_for_objects("*")],
        principals=[
          iam.CanonicalUserPrincipal(
            origin_access_identity.cloud_front_origin_access_identity_s3_canonical_user_id
          )
        ],
      )
    )
