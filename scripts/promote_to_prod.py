#!/usr/bin/env python3
"""Approve or reject the manual promotion of the Hugo site to production."""

import argparse
import sys
from typing import Any

import boto3
from botocore.exceptions import ClientError

DEFAULT_PIPELINE = "hugo-blog-pipeline"
PROD_STAGE = "prod-stage"
APPROVAL_ACTION = "PromoteToProd"


def find_approval_token(client: Any, pipeline_name: str) -> str:
  """Return the token of the pending PromoteToProd approval.

  Args:
    client: boto3 CodePipeline client
    pipeline_name: Name of the pipeline

  Returns:
    Token to pass to put_approval_result

  Raises:
    LookupError: If no approval is waiting
  """
  state = client.get_pipeline_state(name=pipeline_name)

  for stage in state.get("stageStates", []):
    if stage.get("stageName") != PROD_STAGE:
      continue
    for action in stage.get("actionStates", []):
      if action.get("actionName") != APPROVAL_ACTION:
        continue
      execution = action.get("latestExecution", {})
      token = execution.get("token")
      if execution.get("status") == "InProgress" and token:
        return str(token)

  raise LookupError(f"No pending {APPROVAL_ACTION} approval in {pipeline_name}")


def set_approval(
  pipeline_name: str,
  approve: bool,
  summary: str,
  region: str = "us-east-1",
) -> str:
  """Approve or reject the pending promotion.

  A rejection stops the current pipeline execution; a new commit or a manual
  release is needed to try again.

  Returns:
    The status that was sent ("Approved" or "Rejected")
  """
  client = boto3.client("codepipeline", region_name=region)
  token = find_approval_token(client, pipeline_name)
  status = "Approved" if approve else "Rejected"

  client.put_approval_result(
    pipelineName=pipeline_name,
    stageName=PROD_STAGE,
    actionName=APPROVAL_ACTION,
    result={"summary": summary, "status": status},
    token=token,
  )
  return status


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(description="Promote the Hugo site to production")
  parser.add_argument(
    "--pipeline",
    default=DEFAULT_PIPELINE,
    help=f"Pipeline name (default: {DEFAULT_PIPELINE})",
  )
  parser.add_argument(
    "--reject",
    action="store_true",
    help="Reject the promotion instead of approving it",
  )
  parser.add_argument(
    "--summary",
    default="",
    help="Comment recorded with the approval result",
  )
  parser.add_argument(
    "--region",
    default="us-east-1",
    help="AWS region (default: us-east-1)",
  )

  args = parser.parse_args()
  summary = args.summary or ("Rejected" if args.reject else "Promoted") + " via script"

  try:
    status = set_approval(args.pipeline, not args.reject, summary, args.region)
  except LookupError as e:
    print(f"✗ {e}", file=sys.stderr)
    sys.exit(1)
  except ClientError as e:
    print(f"✗ Error updating approval: {e}", file=sys.stderr)
    sys.exit(1)

  print(f"✓ {APPROVAL_ACTION} {status.lower()} for {args.pipeline}")


if __name__ == "__main__":
  main()
