"""Hugo build and upload of the generated site to S3."""

from aws_cdk import AssetHashType, BundlingOptions, DockerImage
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_s3 as s3
from aws_cdk import aws_s3_deployment as s3_deploy
from constructs import Construct

from ..config import BuildStage


def hugo_bundling_command(
  hugo_build_command: str,
  build_stage: BuildStage,
  hugo_version: str | None = None,
) -> str:
  """Shell script run inside the bundling container (cwd is the Hugo project).

  hugo_version pins the Alpine package, e.g. "0.139.0-r0"; None installs the
  latest one in the image's repositories.
  """
  hugo_package = f"hugo={hugo_version}" if hugo_version else "hugo"
  return (
    f"apk update && apk add {hugo_package} && "
    "hugo version && "
    '(test -f package.json && npm i || echo "NO package.json file found") && '
    f"{hugo_build_command} --environment {build_stage} --destination /asset-output"
  )


class SiteContent(Construct):
  """Builds the Hugo project in Docker and deploys the output to the bucket.

  The asset hash is supplied by the caller, as the CDK fingerprint of the
  source directory does not capture theme or build changes reliably.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    distribution: cloudfront.IDistribution,
    hugo_project_path: str,
    build_stage: BuildStage,
    docker_image: str,
    hugo_build_command: str,
    asset_hash: str,
    hugo_version: str | None = None,
  ) -> None:
    super().__init__(scope, id)

    source = s3_deploy.Source.asset(
      hugo_project_path,
      asset_hash=asset_hash,
      asset_hash_type=AssetHashType.CUSTOM,
      bundling=BundlingOptions(
        image=DockerImage.from_registry(docker_image),
        command=[
          "sh",
          "-c",
          hugo_bundling_command(hugo_build_command, build_stage, hugo_version),
        ],
        user="root",
      ),
    )

    self.deployment = s3_deploy.BucketDeployment(
      self,
      "frontend-deployment",
      sources=[source],
      destination_bucket=bucket,
      distribution=distribution,
      distribution_paths=["/*"],
    )
