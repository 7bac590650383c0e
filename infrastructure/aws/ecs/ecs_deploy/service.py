from typing import Dict, Optional

import pulumi
import pulumi_aws as aws

from .config import ServiceSettings
from .network import Network
from .policies import assume_role_policy

ECS_TASKS_PRINCIPAL = "ecs-tasks.amazonaws.com"
TASK_EXECUTION_POLICY_ARN = (
    "arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy"
)
LISTENER_PORT = 80


class LoadBalancedFargateService(pulumi.ComponentResource):
    """Fargate service behind an internet-facing application load balancer."""

    def __init__(
        self,
        name: str,
        cluster_arn: pulumi.Input[str],
        network: Network,
        settings: ServiceSettings,
        region: str,
        log_retention_days: int = 7,
        tags: Optional[Dict[str, str]] = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        super().__init__("ecs-deploy:index:LoadBalancedFargateService", name, None, opts)
        pulumi.log.info(
            f"declaring fargate service {name} running {settings.image}", resource=self
        )

        self.log_group = aws.cloudwatch.LogGroup(
            f"{name}-logs",
            retention_in_days=log_retention_days,
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.execution_role = aws.iam.Role(
            f"{name}-task-exec-role",
            assume_role_policy=assume_role_policy(ECS_TASKS_PRINCIPAL),
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        aws.iam.RolePolicyAttachment(
            f"{name}-task-exec-policy-attachment",
            role=self.execution_role.name,
            policy_arn=TASK_EXECUTION_POLICY_ARN,
            opts=pulumi.ResourceOptions(parent=self.execution_role),
        )

        # the application itself gets no AWS permissions
        self.task_role = aws.iam.Role(
            f"{name}-task-role",
            assume_role_policy=assume_role_policy(ECS_TASKS_PRINCIPAL),
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.task_definition = aws.ecs.TaskDefinition(
            f"{name}-task",
            family=f"{name}-task",
            cpu=str(settings.cpu),
            memory=str(settings.memory),
            network_mode="awsvpc",
            execution_role_arn=self.execution_role.arn,
            task_role_arn=self.task_role.arn,
            requires_compatibilities=["FARGATE"],
            container_definitions=pulumi.Output.json_dumps(
                [
                    {
                        "name": settings.container_name,
                        "image": settings.image,
                        "essential": True,
                        "portMappings": [
                            {
                                "containerPort": settings.container_port,
                                "protocol": "tcp",
                            }
                        ],
                        "logConfiguration": {
                            "logDriver": "awslogs",
                            "options": {
                                "awslogs-group": self.log_group.name,
                                "awslogs-region": region,
                                "awslogs-stream-prefix": settings.container_name,
                            },
                        },
                    }
                ]
            ),
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.lb_security_group = aws.ec2.SecurityGroup(
            f"{name}-lb",
            description=f"Load balancer for {name}",
            vpc_id=network.vpc_id,
            ingress=[
                aws.ec2.SecurityGroupIngressArgs(
                    protocol="tcp",
                    from_port=LISTENER_PORT,
                    to_port=LISTENER_PORT,
                    cidr_blocks=["0.0.0.0/0"],
                )
            ],
            egress=[
                aws.ec2.SecurityGroupEgressArgs(
                    protocol="-1",
                    from_port=0,
                    to_port=0,
                    cidr_blocks=["0.0.0.0/0"],
                )
            ],
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.service_security_group = aws.ec2.SecurityGroup(
            f"{name}-service",
            description=f"Tasks for {name}",
            vpc_id=network.vpc_id,
            ingress=[
                aws.ec2.SecurityGroupIngressArgs(
                    protocol="tcp",
                    from_port=settings.container_port,
                    to_port=settings.container_port,
                    security_groups=[self.lb_security_group.id],
                )
            ],
            egress=[
                aws.ec2.SecurityGroupEgressArgs(
                    protocol="-1",
                    from_port=0,
                    to_port=0,
                    cidr_blocks=["0.0.0.0/0"],
                )
            ],
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.load_balancer = aws.lb.LoadBalancer(
            f"{name}-alb",
            load_balancer_type="application",
            internal=False,
            security_groups=[self.lb_security_group.id],
            subnets=network.subnet_ids,
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        health_check = settings.health_check
        self.target_group = aws.lb.TargetGroup(
            f"{name}-tg",
            port=settings.container_port,
            protocol="HTTP",
            target_type="ip",
            vpc_id=network.vpc_id,
            health_check=aws.lb.TargetGroupHealthCheckArgs(
                enabled=True,
                path=health_check.path,
                interval=health_check.interval,
                timeout=health_check.timeout,
                healthy_threshold=health_check.healthy_threshold,
                unhealthy_threshold=health_check.unhealthy_threshold,
                matcher=health_check.matcher,
            ),
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self.load_balancer),
        )

        self.listener = aws.lb.Listener(
            f"{name}-http",
            load_balancer_arn=self.load_balancer.arn,
            port=LISTENER_PORT,
            protocol="HTTP",
            default_actions=[
                aws.lb.ListenerDefaultActionArgs(
                    type="forward",
                    target_group_arn=self.target_group.arn,
                )
            ],
            opts=pulumi.ResourceOptions(parent=self.load_balancer),
        )

        self.service = aws.ecs.Service(
            f"{name}-service",
            cluster=cluster_arn,
            desired_count=settings.desired_count,
            launch_type="FARGATE",
            task_definition=self.task_definition.arn,
            network_configuration=aws.ecs.ServiceNetworkConfigurationArgs(
                security_groups=[self.service_security_group.id],
                assign_public_ip=settings.assign_public_ip,
                subnets=network.subnet_ids,
            ),
            load_balancers=[
                aws.ecs.ServiceLoadBalancerArgs(
                    target_group_arn=self.target_group.arn,
                    container_name=settings.container_name,
                    container_port=settings.container_port,
                )
            ],
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.listener]),
        )

        self.service_name = self.service.name
        # the provider reports the service ARN as its id
        self.service_arn = self.service.id
        self.task_definition_family = self.task_definition.family
        self.task_definition_arn = self.task_definition.arn
        self.task_role_arn = self.task_role.arn
        self.execution_role_arn = self.execution_role.arn
        self.load_balancer_dns = self.load_balancer.dns_name
        self.target_group_arn = self.target_group.arn

        self.register_outputs(
            {
                "service_name": self.service_name,
                "service_arn": self.service_arn,
                "task_definition_family": self.task_definition_family,
                "task_definition_arn": self.task_definition_arn,
                "task_role_arn": self.task_role_arn,
                "execution_role_arn": self.execution_role_arn,
                "load_balancer_dns": self.load_balancer_dns,
                "target_group_arn": self.target_group_arn,
            }
        )
