#!/usr/bin/env python3
"""Integration test: deploy the pipeline, check development, promote, check production.

The promotion does what scripts/promote_to_prod.py does by hand: wait for the
pending PromoteToProd approval, then approve it with its token.

Requires TEST_DOMAIN (a domain with a hosted zone in the account) and
TEST_ACCOUNT_ID (or CDK_DEFAULT_ACCOUNT).
"""

import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk
from aws_cdk.assertions import Match
from aws_cdk.integ_tests_alpha import ExpectedResult, IntegTest

from hugo_pipeline.cdk_constructs.pipeline import APPROVAL_STEP_ID, PROD_STAGE_ID
from hugo_pipeline.config import IntegSettings, PipelineConfig
from hugo_pipeline.stacks.pipeline_stack import HugoPipelineStack

STACK_UNDER_TEST = "HugoPipelineTestStack"
RANDOM_TEST_ID = 1234

# Source, Build, UpdatePipeline, Assets, dev-stage, prod-stage
PROD_STAGE_INDEX = 5


def main() -> None:
  """Define the integration test app."""
  settings = IntegSettings.from_env()
  print(
    f"Running integration tests in region '{settings.region}' and account "
    f"'{settings.account}' for domain '{settings.domain}'"
  )

  app = cdk.App()
  pipeline_config = PipelineConfig.from_options(
    domain_name=settings.domain,
    site_subdomain=f"integ-hugo-{RANDOM_TEST_ID}",
    repository_name=f"integ-hugo-{RANDOM_TEST_ID}",
    pipeline_name=f"integ-hugo-{RANDOM_TEST_ID}-pipeline",
    hugo_project_path=str(Path(__file__).parent.parent / "tests" / "fixtures" / "frontend-test"),
  )
  stack = HugoPipelineStack(
    app,
    STACK_UNDER_TEST,
    pipeline_config=pipeline_config,
    env=cdk.Environment(account=settings.account, region=settings.region),
    description="This stack includes the application's resources for integration testing.",
  )

  integ = IntegTest(
    app,
    "SetupTest",
    test_cases=[stack],
    regions=[settings.region],
  )

  dev_stage = pipeline_config.stage_config("development")
  dev_site_available = integ.assertions.http_api_call(
    dev_stage.site_url,
    headers={"Authorization": pipeline_config.basic_auth.header_value},
  )
  dev_site_available.expect(ExpectedResult.object_like({"status": 200})).wait_for_assertions(
    total_timeout=cdk.Duration.minutes(10),
    interval=cdk.Duration.seconds(20),
  )

  approval_pending = integ.assertions.aws_api_call(
    "CodePipeline",
    "getPipelineState",
    {"name": pipeline_config.pipeline_name},
  )
  approval_pending.expect(
    ExpectedResult.object_like(
      {
        "stageStates": Match.array_with(
          [
            Match.object_like(
              {
                "stageName": PROD_STAGE_ID,
                "actionStates": Match.array_with(
                  [
                    Match.object_like(
                      {
                        "actionName": APPROVAL_STEP_ID,
                        "latestExecution": Match.object_like({"status": "InProgress"}),
                      }
                    )
                  ]
                ),
              }
            )
          ]
        ),
      }
    )
  ).wait_for_assertions(
    total_timeout=cdk.Duration.minutes(10),
    interval=cdk.Duration.seconds(20),
  )

  # The approval is the first action of the prod stage
  promote_to_prod = integ.assertions.aws_api_call(
    "CodePipeline",
    "putApprovalResult",
    {
      "pipelineName": pipeline_config.pipeline_name,
      "stageName": PROD_STAGE_ID,
      "actionName": APPROVAL_STEP_ID,
      "result": {"summary": "Promoted by the integration test", "status": "Approved"},
      "token": approval_pending.get_att_string(
        f"stageStates.{PROD_STAGE_INDEX}.actionStates.0.latestExecution.token"
      ),
    },
  )

  prod_site_available = integ.assertions.http_api_call(f"https://{settings.domain}")
  prod_site_available.expect(ExpectedResult.object_like({"status": 200})).wait_for_assertions(
    total_timeout=cdk.Duration.minutes(10),
    interval=cdk.Duration.seconds(20),
  )

  dev_site_available.next(approval_pending).next(promote_to_prod).next(prod_site_available)

  app.synth()


if __name__ == "__main__":
  main()
