"""Everything CI needs to push images to ECR and roll out an ECS service."""

from typing import Dict, Optional

import pulumi
import pulumi_aws as aws

from .config import DeploySettings
from .identity import DeployIdentity
from .network import Network, resolve_network
from .policies import deploy_statements
from .registry import ImageRegistry
from .service import LoadBalancedFargateService

OUTPUT_NAMES = (
    "AccessKeyId",
    "AccessKeySecret",
    "RepositoryName",
    "RepositoryUri",
    "ClusterArn",
    "ClusterName",
    "ServiceName",
    "TaskDefinitionFamily",
    "LoadBalancerDns",
    "ServiceUrl",
)


class EcsDeployment(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        settings: DeploySettings,
        network: Optional[Network] = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        super().__init__("ecs-deploy:index:EcsDeployment", name, None, opts)
        pulumi.log.info(
            f"declaring ecs deployment {name} for stack {settings.stack}", resource=self
        )

        tags = settings.tags
        child_opts = pulumi.ResourceOptions(parent=self)

        self.identity = DeployIdentity(name, tags=tags, opts=child_opts)

        self.registry = ImageRegistry(
            name,
            force_delete=settings.force_delete_repository,
            tags=tags,
            opts=child_opts,
        )
        self.registry.grant_pull_push(self.identity)

        self.cluster = aws.ecs.Cluster(
            f"{name}-cluster",
            tags=tags,
            opts=child_opts,
        )

        self.service = LoadBalancedFargateService(
            name,
            cluster_arn=self.cluster.arn,
            network=network or resolve_network(settings.vpc_stack),
            settings=settings.service,
            region=settings.region,
            log_retention_days=settings.log_retention_days,
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self.cluster),
        )

        self.deploy_policy = self.identity.attach(
            f"{name}-deploy-policy",
            deploy_statements(
                task_role_arn=self.service.task_role_arn,
                execution_role_arn=self.service.execution_role_arn,
                service_arn=self.service.service_arn,
            ),
        )

        self.register_outputs(
            {
                "cluster_arn": self.cluster.arn,
                "cluster_name": self.cluster.name,
            }
        )

    def outputs(self) -> Dict[str, pulumi.Output]:
        return {
            "AccessKeyId": self.identity.access_key_id,
            "AccessKeySecret": self.identity.access_key_secret,
            "RepositoryName": self.registry.repository_name,
            "RepositoryUri": self.registry.repository_url,
            "ClusterArn": self.cluster.arn,
            "ClusterName": self.cluster.name,
            "ServiceName": self.service.service_name,
            "TaskDefinitionFamily": self.service.task_definition_family,
            "LoadBalancerDns": self.service.load_balancer_dns,
            "ServiceUrl": pulumi.Output.concat(
                "http://", self.service.load_balancer_dns
            ),
        }


def export_outputs(deployment: EcsDeployment):
    outputs = deployment.outputs()
    for output_name in OUTPUT_NAMES:
        pulumi.export(output_name, outputs[output_name])
