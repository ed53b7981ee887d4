"""Deployable units wrapping HugoHosting: a stack and a pipeline stage."""

from typing import Any

import aws_cdk as cdk
from aws_cdk import aws_route53 as route53
from constructs import Construct

from ..config import HostingConfig
from .hugo_hosting import HugoHosting

HOSTING_STACK_ID = "hugo-blog-stack"


class HugoHostingStack(cdk.Stack):
  """Stack for one build stage of the Hugo site."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    config: HostingConfig,
    hosted_zone: route53.IHostedZone | None = None,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.hosting = HugoHosting(
      self,
      "static-hosting",
      config=config,
      hosted_zone=hosted_zone,
    )
    self.static_site_url = self.hosting.static_site_url

    cdk.Tags.of(self).add("Project", "hugo-pipeline")
    cdk.Tags.of(self).add("BuildStage", config.build_stage)
    cdk.Tags.of(self).add("Domain", config.site_domain)


class HugoPageStage(cdk.Stage):
  """Pipeline stage deploying the HugoHostingStack for one build stage."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    config: HostingConfig,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.hosting_stack = HugoHostingStack(self, HOSTING_STACK_ID, config=config)
    self.static_site_url = self.hosting_stack.static_site_url
