"""CodeCommit repository for the Hugo blog and its infrastructure code."""

from aws_cdk import aws_codecommit as codecommit
from constructs import Construct

from ..config import RepositoryConfig


class HugoRepository(Construct):
  """CodeCommit repository the pipeline is triggered from."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    config: RepositoryConfig | None = None,
  ) -> None:
    super().__init__(scope, id)

    config = config or RepositoryConfig()

    self.repository = codecommit.Repository(
      self,
      "hugo-blog",
      repository_name=config.name,
      description=config.description,
    )
