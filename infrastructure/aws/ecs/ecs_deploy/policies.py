"""IAM policy statements granted to the deploy user and ECS roles.

Statements are plain data so they can be inspected without a running
Pulumi engine. Resource entries may be ``pulumi.Output`` values; they are
resolved when the provider renders the document in :func:`policy_document`.
"""

import json
from typing import List, Optional, Sequence

import pulumi
import pulumi_aws as aws

POLICY_VERSION = "2012-10-17"

REGISTRY_AUTH_ACTIONS = ["ecr:GetAuthorizationToken"]

REGISTRY_PULL_PUSH_ACTIONS = [
    "ecr:BatchCheckLayerAvailability",
    "ecr:GetDownloadUrlForLayer",
    "ecr:BatchGetImage",
    "ecr:PutImage",
    "ecr:InitiateLayerUpload",
    "ecr:UploadLayerPart",
    "ecr:CompleteLayerUpload",
]

TASK_DEFINITION_ACTIONS = [
    "ecs:ListTaskDefinitions",
    "ecs:DescribeTaskDefinition",
    "ecs:RegisterTaskDefinition",
]

PASS_ROLE_ACTIONS = ["iam:PassRole"]

DESCRIBE_SERVICE_ACTIONS = ["ecs:DescribeServices"]

EFFECTS = ("Allow", "Deny")


class PolicyStatementError(ValueError):
    pass


class PolicyStatement:
    def __init__(
        self,
        actions: Sequence[str],
        resources: Sequence[pulumi.Input[str]],
        effect: str = "Allow",
        sid: Optional[str] = None,
    ):
        if not actions:
            raise PolicyStatementError("policy statement needs at least one action")
        if not resources:
            raise PolicyStatementError("policy statement needs at least one resource")
        if effect not in EFFECTS:
            raise PolicyStatementError(f"unknown policy effect: {effect!r}")

        self.actions = list(actions)
        self.resources = list(resources)
        self.effect = effect
        self.sid = sid

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.resources

    def to_args(self) -> aws.iam.GetPolicyDocumentStatementArgs:
        return aws.iam.GetPolicyDocumentStatementArgs(
            sid=self.sid,
            effect=self.effect,
            actions=self.actions,
            resources=self.resources,
        )

    def __repr__(self):
        return f"PolicyStatement(effect={self.effect!r}, actions={self.actions!r})"


def policy_document(statements: Sequence[PolicyStatement]) -> pulumi.Output[str]:
    return aws.iam.get_policy_document_output(
        version=POLICY_VERSION,
        statements=[statement.to_args() for statement in statements],
    ).json


def assume_role_policy(service: str) -> str:
    return json.dumps(
        {
            "Version": POLICY_VERSION,
            "Statement": [
                {
                    "Sid": "",
                    "Effect": "Allow",
                    "Principal": {"Service": service},
                    "Action": "sts:AssumeRole",
                }
            ],
        }
    )


def registry_auth_statement() -> PolicyStatement:
    # GetAuthorizationToken cannot be scoped to a repository
    return PolicyStatement(REGISTRY_AUTH_ACTIONS, ["*"], sid="RegistryAuth")


def registry_pull_push_statement(repository_arn: pulumi.Input[str]) -> PolicyStatement:
    return PolicyStatement(
        REGISTRY_PULL_PUSH_ACTIONS, [repository_arn], sid="RegistryPullPush"
    )


def task_definition_statement() -> PolicyStatement:
    return PolicyStatement(TASK_DEFINITION_ACTIONS, ["*"], sid="TaskDefinitions")


def pass_role_statement(
    task_role_arn: pulumi.Input[str], execution_role_arn: pulumi.Input[str]
) -> PolicyStatement:
    return PolicyStatement(
        PASS_ROLE_ACTIONS, [task_role_arn, execution_role_arn], sid="PassTaskRoles"
    )


def describe_service_statement(service_arn: pulumi.Input[str]) -> PolicyStatement:
    return PolicyStatement(
        DESCRIBE_SERVICE_ACTIONS, [service_arn], sid="DescribeService"
    )


def deploy_statements(
    task_role_arn: pulumi.Input[str],
    execution_role_arn: pulumi.Input[str],
    service_arn: pulumi.Input[str],
) -> List[PolicyStatement]:
    """Statements CI needs to register a new task definition and roll the service."""
    return [
        task_definition_statement(),
        pass_role_statement(task_role_arn, execution_role_arn),
        describe_service_statement(service_arn),
    ]
