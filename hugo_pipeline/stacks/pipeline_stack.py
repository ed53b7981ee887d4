"""CDK stack holding the Hugo deployment pipeline."""

from typing import Any

import aws_cdk as cdk
from constructs import Construct

from ..cdk_constructs import HugoPipeline
from ..config import PipelineConfig


class HugoPipelineStack(cdk.Stack):
  """Stack for the pipeline; the site stacks are deployed by the pipeline itself."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    pipeline_config: PipelineConfig,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.pipeline = HugoPipeline(
      self,
      "hugoPipeline",
      config=pipeline_config,
    )

    cdk.Tags.of(self).add("Project", "hugo-pipeline")
    cdk.Tags.of(self).add("Domain", pipeline_config.domain_name)
