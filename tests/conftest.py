"""Pytest fixtures for CDK construct tests."""

from pathlib import Path

import aws_cdk as cdk
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def app() -> cdk.App:
  """Create a CDK App for testing.

  Docker bundling of the Hugo site is skipped for every stack.
  """
  return cdk.App(context={"aws:cdk:bundling-stacks": []})


@pytest.fixture
def stack(app: cdk.App) -> cdk.Stack:
  """Create a CDK Stack for testing (hosted zone lookups need an account)."""
  return cdk.Stack(
    app,
    "testStack",
    env=cdk.Environment(account="1234", region="us-east-1"),
  )


@pytest.fixture
def frontend_path() -> str:
  """Path of the minimal Hugo project used as site content."""
  return str(FIXTURES_DIR / "frontend-test")


@pytest.fixture
def custom_function_code() -> str:
  """A hand-written CloudFront Function with redirects and basic auth."""
  return (FIXTURES_DIR / "custom-cf-funcs" / "basic-auth-redirect.js").read_text()
