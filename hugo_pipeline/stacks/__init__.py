"""CDK stacks for the Hugo site pipeline."""

from .pipeline_stack import HugoPipelineStack

__all__ = ["HugoPipelineStack"]
