"""Tests for the HugoPipeline construct and stack."""

import os
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest
from aws_cdk import App, Environment, Stack
from aws_cdk.assertions import Match, Template

from hugo_pipeline.cdk_constructs import HugoPipeline
from hugo_pipeline.cdk_constructs.pipeline import synth_commands
from hugo_pipeline.config import PipelineConfig
from hugo_pipeline.stacks import HugoPipelineStack


def _stage_actions(stage_name: str, first_run_order: int) -> list:
  stack_name = f"{stage_name}-hugo-blog-stack"
  return [
    Match.object_like(
      {
        "Name": "hugo-blog-stack.Prepare",
        "Configuration": Match.object_like(
          {"StackName": stack_name, "ActionMode": "CHANGE_SET_REPLACE"}
        ),
        "RunOrder": first_run_order,
      }
    ),
    Match.object_like(
      {
        "Name": "hugo-blog-stack.Deploy",
        "Configuration": Match.object_like(
          {"StackName": stack_name, "ActionMode": "CHANGE_SET_EXECUTE"}
        ),
        "RunOrder": first_run_order + 1,
      }
    ),
  ]


PIPELINE_STAGES = Match.array_with(
  [
    Match.object_like({"Name": "Source"}),
    Match.object_like({"Name": "Build"}),
    Match.object_like({"Name": "UpdatePipeline"}),
    Match.object_like({"Name": "Assets"}),
    Match.object_like(
      {
        "Name": "dev-stage",
        "Actions": Match.array_with(
          _stage_actions("dev-stage", 1)
          + [Match.object_like({"Name": "HitDevEndpoint", "RunOrder": 3})]
        ),
      }
    ),
    Match.object_like(
      {
        "Name": "prod-stage",
        "Actions": Match.array_with(
          [
            Match.object_like(
              {
                "Name": "PromoteToProd",
                "ActionTypeId": Match.object_like({"Category": "Approval"}),
                "RunOrder": 1,
              }
            ),
          ]
          + _stage_actions("prod-stage", 2)
          + [Match.object_like({"Name": "HitProdEndpoint", "RunOrder": 4})]
        ),
      }
    ),
  ]
)


def _assert_pipeline_topology(template: Template) -> None:
  template.has_resource(
    "AWS::CodeCommit::Repository",
    {"Properties": Match.object_like({"RepositoryName": "hugo-blog"})},
  )
  template.has_resource(
    "AWS::CodePipeline::Pipeline",
    {
      "Properties": Match.object_like(
        {
          "RestartExecutionOnUpdate": True,
          "Stages": PIPELINE_STAGES,
        }
      ),
    },
  )


class TestDefaultPipeline:
  """Test HugoPipeline with default settings."""

  @pytest.fixture
  def template(self, stack: Stack, frontend_path: str) -> Template:
    HugoPipeline(
      stack,
      "hugoPipeline",
      config=PipelineConfig(
        domain_name="example.com",
        site_subdomain="dev",
        hugo_project_path=frontend_path,
        asset_hash="3",
      ),
    )
    return Template.from_stack(stack)

  def test_pipeline_topology(self, template: Template) -> None:
    """Verify stage order, action names and run orders."""
    _assert_pipeline_topology(template)

  def test_pipeline_name(self, template: Template) -> None:
    template.has_resource_properties(
      "AWS::CodePipeline::Pipeline",
      {"Name": "hugo-blog-pipeline"},
    )

  def test_source_tracks_master_branch(self, template: Template) -> None:
    """Verify the source action reads the master branch with full clone."""
    template.has_resource_properties(
      "AWS::CodePipeline::Pipeline",
      {
        "Stages": Match.array_with(
          [
            Match.object_like(
              {
                "Name": "Source",
                "Actions": [
                  Match.object_like(
                    {
                      "ActionTypeId": Match.object_like({"Provider": "CodeCommit"}),
                      "Configuration": Match.object_like(
                        {"BranchName": "master", "OutputArtifactFormat": "CODEBUILD_CLONE_REF"}
                      ),
                    }
                  )
                ],
              }
            )
          ]
        ),
      },
    )

  def test_synth_project_is_privileged(self, template: Template) -> None:
    """Verify Docker is available to bundle the site during synth."""
    template.has_resource_properties(
      "AWS::CodeBuild::Project",
      {"Environment": Match.object_like({"PrivilegedMode": True})},
    )


class TestCustomPipeline:
  """Test HugoPipeline with custom build settings and redirects."""

  def test_pipeline_topology(self, stack: Stack, frontend_path: str) -> None:
    """Verify customizations do not change the topology."""
    HugoPipeline(
      stack,
      "hugoPipeline",
      config=PipelineConfig(
        domain_name="example.com",
        site_subdomain="dev",
        hugo_project_path=frontend_path,
        asset_hash="3",
        hugo_build_command="hugo --gc",
        docker_image="public.ecr.aws/docker/library/node:16-alpine",
        redirect_replacements={
          "/talks/": "/works/",
          "/post/": "/posts/",
        },
      ),
    )
    template = Template.from_stack(stack)

    _assert_pipeline_topology(template)

  def test_custom_repository_and_pipeline_name(self, stack: Stack, frontend_path: str) -> None:
    HugoPipeline(
      stack,
      "hugoPipeline",
      config=PipelineConfig(
        domain_name="example.com",
        hugo_project_path=frontend_path,
        asset_hash="3",
        repository_name="my-blog",
        pipeline_name="my-blog-pipeline",
      ),
    )
    template = Template.from_stack(stack)

    template.has_resource_properties(
      "AWS::CodeCommit::Repository",
      {"RepositoryName": "my-blog"},
    )
    template.has_resource_properties(
      "AWS::CodePipeline::Pipeline",
      {"Name": "my-blog-pipeline"},
    )


class TestPipelineStages:
  """Test the stages the pipeline deploys."""

  def test_stages_deploy_hosting_for_each_build_stage(
    self, stack: Stack, frontend_path: str
  ) -> None:
    pipeline = HugoPipeline(
      stack,
      "hugoPipeline",
      config=PipelineConfig(
        domain_name="example.com",
        hugo_project_path=frontend_path,
        asset_hash="3",
      ),
    )

    dev_config = pipeline.dev_stage.hosting_stack.hosting.config
    prod_config = pipeline.prod_stage.hosting_stack.hosting.config
    assert dev_config.build_stage == "development"
    assert dev_config.site_domain == "dev.example.com"
    assert prod_config.build_stage == "production"
    assert prod_config.site_domain == "example.com"

  def test_dev_stage_template(self, stack: Stack, frontend_path: str) -> None:
    """Verify the dev stage stack carries the development site."""
    pipeline = HugoPipeline(
      stack,
      "hugoPipeline",
      config=PipelineConfig(
        domain_name="example.com",
        hugo_project_path=frontend_path,
        asset_hash="3",
      ),
    )
    template = Template.from_stack(pipeline.dev_stage.hosting_stack)

    template.has_resource_properties(
      "AWS::S3::Bucket",
      {"BucketName": "dev.example.com"},
    )


class TestSynthCommands:
  """Test the commands of the Synth step."""

  def test_default_commands(self) -> None:
    commands = synth_commands(PipelineConfig(domain_name="example.com"))

    assert commands[0] == "pwd && ls -la"
    assert "git submodule update --init" in commands[4]
    assert commands[-2:] == ["python -m pytest", "npx cdk synth"]

  def test_dependency_installs_tolerate_missing_files(self) -> None:
    commands = synth_commands(PipelineConfig(domain_name="example.com"))

    for command in commands[1:5]:
      assert command.startswith("test -f ")
      assert "|| echo" in command

  def test_pyproject_only_project_is_installed(self) -> None:
    commands = synth_commands(PipelineConfig(domain_name="example.com"))

    assert 'test -f pyproject.toml && pip install ".[test]"' in commands[3]

  def test_uv_lock_installs_into_system_interpreter(self) -> None:
    commands = synth_commands(PipelineConfig(domain_name="example.com"))

    assert "uv sync" not in commands[1]
    assert "| pip install -r /dev/stdin" in commands[1]

  def test_custom_build_and_synth(self) -> None:
    config = PipelineConfig(
      domain_name="example.com",
      build_command="make test",
      synth_command="npx cdk synth --quiet",
    )

    assert synth_commands(config)[-2:] == ["make test", "npx cdk synth --quiet"]


class TestHugoPipelineStack:
  """Test the pipeline stack."""

  def test_stack_tags_and_output(self, app: App, frontend_path: str) -> None:
    stack = HugoPipelineStack(
      app,
      "PipelineStack",
      pipeline_config=PipelineConfig(
        domain_name="example.com",
        hugo_project_path=frontend_path,
        asset_hash="3",
      ),
      env=Environment(account="1234", region="us-east-1"),
    )
    template = Template.from_stack(stack)

    template.has_resource_properties(
      "AWS::CodeCommit::Repository",
      {
        "Tags": Match.array_with(
          [{"Key": "Project", "Value": "hugo-pipeline"}]
        ),
      },
    )
    outputs = template.find_outputs("*")
    assert any(key.startswith("hugoPipelinePipelineName") for key in outputs)


class TestSynthInstallCommands:
  """Run the install commands with stand-in pip and uv executables."""

  @pytest.fixture
  def run_installs(self, tmp_path: Path) -> Callable[..., str]:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    log = tmp_path / "install.log"
    for tool in ("pip", "uv"):
      script = bin_dir / tool
      script.write_text(
        "#!/bin/sh\n"
        f'echo "{tool} $*" >> "{log}"\n'
        'if [ "$1" = "export" ]; then echo "aws-cdk-lib==2.160.0"; fi\n'
        f'if [ "$2" = "-r" ]; then cat "$3" >> "{log}"; fi\n'
      )
      script.chmod(0o755)

    def run(*files: str) -> str:
      project = tmp_path / "project"
      project.mkdir()
      for name in files:
        (project / name).write_text("")
      env = {**os.environ, "PATH": f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}"}
      commands = synth_commands(PipelineConfig(domain_name="example.com"))[1:4]
      for command in commands:
        subprocess.run(["sh", "-c", command], cwd=project, env=env, check=True)
      return log.read_text() if log.exists() else ""

    return run

  def test_pyproject_only(self, run_installs: Callable[..., str]) -> None:
    log = run_installs("pyproject.toml")

    assert log.splitlines() == ["pip install .[test]"]

  def test_uv_lock_exports_to_pip(self, run_installs: Callable[..., str]) -> None:
    log = run_installs("uv.lock").splitlines()

    assert "uv export --frozen --all-extras --no-hashes" in log
    assert "pip install -r /dev/stdin" in log
    assert "aws-cdk-lib==2.160.0" in log

  def test_bare_project_installs_nothing(self, run_installs: Callable[..., str]) -> None:
    assert run_installs() == ""
