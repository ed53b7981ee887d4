#!/usr/bin/env python3
"""CDK application entry point for the Hugo site pipeline."""

import logging
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk
import boto3

from hugo_pipeline.config import Config
from hugo_pipeline.stacks.pipeline_stack import HugoPipelineStack

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def get_account_id() -> str:
  """Get AWS account ID from current credentials."""
  sts = boto3.client("sts")
  return str(sts.get_caller_identity()["Account"])


def main() -> None:
  """Create CDK app with the pipeline stack."""
  app = cdk.App()

  # Load configuration
  config_path = app.node.try_get_context("config") or "pipeline.yaml"
  config = Config.from_yaml(Path(config_path))
  logger.info("Loaded pipeline configuration for %s", config.pipeline.domain_name)

  # Hosted zone lookups in the stages need an explicit account
  account_id = get_account_id()

  stack_name = f"HugoPipeline-{config.pipeline.domain_name.replace('.', '-')}"
  logger.info("Synthesizing %s in %s/%s", stack_name, account_id, config.region)
  HugoPipelineStack(
    app,
    stack_name,
    pipeline_config=config.pipeline,
    env=cdk.Environment(
      account=account_id,
      region=config.region,
    ),
    description=f"Deployment pipeline for the Hugo site {config.pipeline.domain_name}",
  )

  app.synth()


if __name__ == "__main__":
  main()
