"""Self-mutating CDK pipeline deploying the Hugo site to development and production."""

from aws_cdk import CfnOutput, Environment, Stack, pipelines
from constructs import Construct

from ..config import DEVELOPMENT, PRODUCTION, PipelineConfig
from .page_stage import HugoPageStage
from .repository import HugoRepository

SOURCE_BRANCH = "master"

DEV_STAGE_ID = "dev-stage"
PROD_STAGE_ID = "prod-stage"
APPROVAL_STEP_ID = "PromoteToProd"
DEV_SMOKE_TEST_ID = "HitDevEndpoint"
PROD_SMOKE_TEST_ID = "HitProdEndpoint"


def synth_commands(config: PipelineConfig) -> list[str]:
  """Commands of the Synth step.

  The synth step re-derives the pipeline itself, so it must produce the same
  definition for the same commit.
  """
  return [
    "pwd && ls -la",
    # Installed into the interpreter the build and synth commands run with
    'test -f uv.lock && pip install uv && uv export --frozen --all-extras --no-hashes | pip install -r /dev/stdin || echo "NO uv.lock file found"',
    'test -f requirements.txt && pip install -r requirements.txt || echo "NO requirements.txt file found"',
    'test -f pyproject.toml && pip install ".[test]" || echo "NO pyproject.toml file found"',
    # Submodules are not cloned by CodeCommit sources (aws-cdk issue 11399)
    'test -f .gitmodules && git submodule update --init || echo "NO .gitmodules file found"',
    config.build_command,
    config.synth_command,
  ]


class HugoPipeline(Construct):
  """CodeCommit-triggered pipeline with a manual gate before production.

  Stages: Source, Build, UpdatePipeline, Assets, dev-stage, prod-stage.
  Each environment stage ends with a curl against the deployed site.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    config: PipelineConfig,
  ) -> None:
    super().__init__(scope, id)

    self.config = config
    self.domain_name = config.domain_name

    self.repository = HugoRepository(self, "repository", config=config.repository)

    self.pipeline = pipelines.CodePipeline(
      self,
      "hugo-blog-pipeline",
      pipeline_name=config.pipeline_name,
      synth=pipelines.ShellStep(
        "Synth",
        input=pipelines.CodePipelineSource.code_commit(
          self.repository.repository,
          SOURCE_BRANCH,
          code_build_clone_output=True,  # keeps the git history
        ),
        commands=synth_commands(config),
      ),
      # The Hugo site is bundled in a Docker container during synth
      docker_enabled_for_synth=True,
    )

    # The pipeline and the deployments are in the same account
    env = Environment(
      account=Stack.of(self).account,
      region=Stack.of(self).region,
    )

    self.dev_stage = HugoPageStage(
      self,
      DEV_STAGE_ID,
      env=env,
      config=config.stage_config(DEVELOPMENT),
    )
    self.pipeline.add_stage(
      self.dev_stage,
      post=[
        pipelines.ShellStep(
          DEV_SMOKE_TEST_ID,
          # Make the address available as $URL inside the commands
          env_from_cfn_outputs={"URL": self.dev_stage.static_site_url},
          commands=[
            f'curl -sSfL -H "Authorization: {config.basic_auth.header_value}" '
            "$URL -o /dev/null"
          ],
        ),
      ],
    )

    self.prod_stage = HugoPageStage(
      self,
      PROD_STAGE_ID,
      env=env,
      config=config.stage_config(PRODUCTION),
    )
    self.pipeline.add_stage(
      self.prod_stage,
      pre=[
        pipelines.ManualApprovalStep(
          APPROVAL_STEP_ID,
          comment=f"Promote {config.domain_name} to production",
        ),
      ],
      post=[
        pipelines.ShellStep(
          PROD_SMOKE_TEST_ID,
          env_from_cfn_outputs={"URL": self.prod_stage.static_site_url},
          commands=["curl -sSfL $URL -o /dev/null"],
        ),
      ],
    )

    CfnOutput(
      self,
      "PipelineName",
      value=config.pipeline_name,
      description="Name of the CodePipeline pipeline",
    )
