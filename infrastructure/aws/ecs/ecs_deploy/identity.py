from typing import Dict, Optional, Sequence

import pulumi
import pulumi_aws as aws

from .policies import PolicyStatement, policy_document


class DeployIdentity(pulumi.ComponentResource):
    """IAM user and long-lived access key used by CI to push and deploy."""

    def __init__(
        self,
        name: str,
        tags: Optional[Dict[str, str]] = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        super().__init__("ecs-deploy:index:DeployIdentity", name, None, opts)
        pulumi.log.info(f"declaring deploy user {name}", resource=self)

        self.name = name
        self.policies = []

        self.user = aws.iam.User(
            f"{name}-user",
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.access_key = aws.iam.AccessKey(
            f"{name}-access-key",
            user=self.user.name,
            opts=pulumi.ResourceOptions(parent=self.user),
        )

        self.user_name = self.user.name
        self.user_arn = self.user.arn
        self.access_key_id = self.access_key.id
        self.access_key_secret = pulumi.Output.secret(self.access_key.secret)

        self.register_outputs(
            {
                "user_name": self.user_name,
                "user_arn": self.user_arn,
                "access_key_id": self.access_key_id,
            }
        )

    def attach(
        self, policy_name: str, statements: Sequence[PolicyStatement]
    ) -> aws.iam.UserPolicy:
        pulumi.log.debug(
            f"attaching {len(statements)} statements to {self.name} as {policy_name}",
            resource=self,
        )
        policy = aws.iam.UserPolicy(
            policy_name,
            user=self.user.name,
            policy=policy_document(statements),
            opts=pulumi.ResourceOptions(parent=self.user),
        )
        self.policies.append(policy)
        return policy
