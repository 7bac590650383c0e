from typing import Dict, Optional

import pulumi
import pulumi_aws as aws

from .identity import DeployIdentity
from .policies import registry_auth_statement, registry_pull_push_statement


class ImageRegistry(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        force_delete: bool = False,
        tags: Optional[Dict[str, str]] = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        super().__init__("ecs-deploy:index:ImageRegistry", name, None, opts)
        pulumi.log.info(f"declaring image repository {name}", resource=self)

        self.name = name
        self.repository = aws.ecr.Repository(
            f"{name}-repository",
            image_tag_mutability="MUTABLE",
            image_scanning_configuration=aws.ecr.RepositoryImageScanningConfigurationArgs(
                scan_on_push=True,
            ),
            force_delete=force_delete,
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.repository_name = self.repository.name
        self.repository_url = self.repository.repository_url
        self.repository_arn = self.repository.arn

        self.register_outputs(
            {
                "repository_name": self.repository_name,
                "repository_url": self.repository_url,
                "repository_arn": self.repository_arn,
            }
        )

    def grant_pull_push(self, identity: DeployIdentity) -> aws.iam.UserPolicy:
        return identity.attach(
            f"{self.name}-registry-policy",
            [
                registry_auth_statement(),
                registry_pull_push_statement(self.repository_arn),
            ],
        )
