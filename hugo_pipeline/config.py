"""Configuration for the Hugo hosting constructs and deployment pipeline."""

import base64
import os
import uuid
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import yaml
from aws_cdk import RemovalPolicy

BuildStage = Literal["development", "production"]

DEVELOPMENT: BuildStage = "development"
PRODUCTION: BuildStage = "production"
BUILD_STAGES: tuple[str, ...] = (DEVELOPMENT, PRODUCTION)

DEFAULT_ERROR_PAGE = "/en/404.html"
DEFAULT_DOCKER_IMAGE = "public.ecr.aws/docker/library/node:lts-alpine"
DEFAULT_HUGO_BUILD_COMMAND = "hugo --gc --minify --cleanDestinationDir"
DEFAULT_REPOSITORY_NAME = "hugo-blog"
REPOSITORY_DESCRIPTION = "host the code for the hugo blog and its infrastructure"


class ConfigError(ValueError):
  """Raised when a configuration is missing required values or is invalid."""


def _default_project_path() -> str:
  return str(Path.cwd() / "blog")


def _resolve_options(options: dict[str, Any]) -> dict[str, Any]:
  resolved = {key: value for key, value in options.items() if value is not None}
  if not resolved.get("domain_name"):
    raise ConfigError("domain_name is required")
  return resolved


def _load_section(path: Path, key: str, data: Any, section_cls: type) -> Any:
  """Build a nested settings dataclass, reporting bad input as ConfigError."""
  if not isinstance(data, dict):
    raise ConfigError(f"{path}: pipeline.{key} must be a mapping")
  unknown = sorted(set(data) - {f.name for f in fields(section_cls)})
  if unknown:
    raise ConfigError(f"{path}: unknown pipeline.{key} settings: {', '.join(unknown)}")
  return section_cls(**data)


@dataclass(frozen=True)
class BasicAuthCredentials:
  """Basic auth credentials protecting the development site."""

  username: str = "john"
  password: str = "doe"

  @property
  def encoded(self) -> str:
    """Base64 encoding of 'username:password'."""
    return base64.b64encode(f"{self.username}:{self.password}".encode()).decode()

  @property
  def header_value(self) -> str:
    """Value of the Authorization header a client must send."""
    return f"Basic {self.encoded}"


@dataclass(frozen=True)
class ErrorPages:
  """Pages CloudFront serves for 403 and 404 origin responses."""

  http403_path: str = DEFAULT_ERROR_PAGE
  http404_path: str = DEFAULT_ERROR_PAGE


@dataclass(frozen=True)
class HostingConfig:
  """Fully resolved configuration for one hosted site (one build stage).

  If custom_function_code is set, redirect_replacements is ignored.
  """

  domain_name: str
  build_stage: BuildStage = PRODUCTION
  site_subdomain: str = "dev"
  basic_auth: BasicAuthCredentials = field(default_factory=BasicAuthCredentials)
  error_pages: ErrorPages = field(default_factory=ErrorPages)
  hugo_project_path: str = field(default_factory=_default_project_path)
  docker_image: str = DEFAULT_DOCKER_IMAGE
  hugo_build_command: str = DEFAULT_HUGO_BUILD_COMMAND
  hugo_version: str | None = None
  asset_hash: str = ""
  redirect_replacements: dict[str, str] = field(default_factory=dict)
  custom_function_code: str | None = None

  def __post_init__(self) -> None:
    if not self.domain_name:
      raise ConfigError("domain_name is required")
    if self.build_stage not in BUILD_STAGES:
      raise ConfigError(
        f"build_stage must be one of {', '.join(BUILD_STAGES)}, got {self.build_stage!r}"
      )
    if not self.asset_hash:
      # Forces a rebuild of the site on every synth
      object.__setattr__(self, "asset_hash", f"{uuid.uuid4().hex}-{self.build_stage}")

  @classmethod
  def from_options(cls, **options: Any) -> "HostingConfig":
    """Build a config from optional values, falling back to defaults for None."""
    return cls(**_resolve_options(options))

  @property
  def is_production(self) -> bool:
    return self.build_stage == PRODUCTION

  @property
  def site_domain(self) -> str:
    """Apex domain in production, '<subdomain>.<domain>' otherwise."""
    if self.is_production:
      return self.domain_name
    return f"{self.site_subdomain}.{self.domain_name}"

  @property
  def site_url(self) -> str:
    return f"https://{self.site_domain}"

  @property
  def removal_policy(self) -> RemovalPolicy:
    return RemovalPolicy.RETAIN if self.is_production else RemovalPolicy.DESTROY

  @property
  def auto_delete_objects(self) -> bool:
    return not self.is_production


@dataclass(frozen=True)
class RepositoryConfig:
  """Configuration for the CodeCommit repository holding the blog."""

  name: str = DEFAULT_REPOSITORY_NAME
  description: str = REPOSITORY_DESCRIPTION


@dataclass(frozen=True)
class PipelineConfig:
  """Fully resolved configuration for the deployment pipeline."""

  domain_name: str
  repository_name: str = DEFAULT_REPOSITORY_NAME
  pipeline_name: str = "hugo-blog-pipeline"
  site_subdomain: str = "dev"
  basic_auth: BasicAuthCredentials = field(default_factory=BasicAuthCredentials)
  error_pages: ErrorPages = field(default_factory=ErrorPages)
  hugo_project_path: str = field(default_factory=_default_project_path)
  docker_image: str = DEFAULT_DOCKER_IMAGE
  hugo_build_command: str = DEFAULT_HUGO_BUILD_COMMAND
  hugo_version: str | None = None
  asset_hash: str | None = None
  redirect_replacements: dict[str, str] = field(default_factory=dict)
  custom_function_code_development: str | None = None
  custom_function_code_production: str | None = None
  build_command: str = "python -m pytest"
  synth_command: str = "npx cdk synth"

  def __post_init__(self) -> None:
    if not self.domain_name:
      raise ConfigError("domain_name is required")

  @classmethod
  def from_options(cls, **options: Any) -> "PipelineConfig":
    """Build a config from optional values, falling back to defaults for None."""
    return cls(**_resolve_options(options))

  @property
  def repository(self) -> RepositoryConfig:
    return RepositoryConfig(name=self.repository_name)

  def stage_config(self, build_stage: BuildStage) -> HostingConfig:
    """Hosting configuration for one of the pipeline's environment stages."""
    if build_stage == PRODUCTION:
      custom_code = self.custom_function_code_production
    else:
      custom_code = self.custom_function_code_development

    return HostingConfig.from_options(
      domain_name=self.domain_name,
      build_stage=build_stage,
      site_subdomain=self.site_subdomain,
      basic_auth=self.basic_auth,
      error_pages=self.error_pages,
      hugo_project_path=self.hugo_project_path,
      docker_image=self.docker_image,
      hugo_build_command=self.hugo_build_command,
      hugo_version=self.hugo_version,
      asset_hash=self.asset_hash,
      redirect_replacements=dict(self.redirect_replacements),
      custom_function_code=custom_code,
    )


@dataclass
class Config:
  """Top-level configuration for the CDK app."""

  pipeline: PipelineConfig
  region: str = "us-east-1"

  @classmethod
  def from_yaml(cls, path: Path | str = "pipeline.yaml") -> "Config":
    """Load configuration from YAML file."""
    path = Path(path)
    with open(path) as f:
      data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
      raise ConfigError(f"{path}: expected a mapping at the top level")
    pipeline_data = data.get("pipeline") or {}
    if not isinstance(pipeline_data, dict):
      raise ConfigError(f"{path}: pipeline must be a mapping")
    pipeline_data = dict(pipeline_data)
    if not pipeline_data.get("domain_name"):
      raise ConfigError(f"{path}: pipeline.domain_name is required")

    for key, section_cls in (("basic_auth", BasicAuthCredentials), ("error_pages", ErrorPages)):
      section = pipeline_data.pop(key, None)
      if section is not None:
        pipeline_data[key] = _load_section(path, key, section, section_cls)

    # Function code may live in a file next to the config
    for stage in BUILD_STAGES:
      file_key = f"custom_function_file_{stage}"
      function_file = pipeline_data.pop(file_key, None)
      if function_file:
        pipeline_data[f"custom_function_code_{stage}"] = (
          path.parent / function_file
        ).read_text()

    known = {f.name for f in fields(PipelineConfig)}
    unknown = sorted(set(pipeline_data) - known)
    if unknown:
      raise ConfigError(f"{path}: unknown pipeline settings: {', '.join(unknown)}")

    # YAML reads unquoted versions and hashes as numbers
    for key in ("asset_hash", "hugo_version"):
      if pipeline_data.get(key) is not None:
        pipeline_data[key] = str(pipeline_data[key])

    return cls(
      pipeline=PipelineConfig.from_options(**pipeline_data),
      region=data.get("region", "us-east-1"),
    )


@dataclass(frozen=True)
class IntegSettings:
  """Settings for the end-to-end integration test, read from the environment."""

  domain: str
  account: str
  region: str = "eu-west-1"

  @classmethod
  def from_env(cls, environ: dict[str, str] | None = None) -> "IntegSettings":
    env = os.environ if environ is None else environ
    domain = env.get("TEST_DOMAIN", "")
    account = env.get("TEST_ACCOUNT_ID") or env.get("CDK_DEFAULT_ACCOUNT", "")
    if not domain or not account:
      raise ConfigError(
        "TEST_DOMAIN and TEST_ACCOUNT_ID environment variables must be set. "
        f"Were TEST_DOMAIN='{domain}' and TEST_ACCOUNT_ID='{account}'"
      )
    return cls(domain=domain, account=account)
