"""Stack settings read from Pulumi config."""

from dataclasses import dataclass, field
from typing import Dict, Optional

import pulumi

DEFAULT_IMAGE = "amazon/amazon-ecs-sample"


@dataclass(frozen=True)
class HealthCheck:
    path: str = "/"
    interval: int = 5
    timeout: int = 4
    healthy_threshold: int = 2
    unhealthy_threshold: int = 2
    matcher: str = "200,301,302"


@dataclass(frozen=True)
class ServiceSettings:
    image: str = DEFAULT_IMAGE
    container_name: str = "web"
    container_port: int = 80
    cpu: int = 512
    memory: int = 1024
    desired_count: int = 1
    assign_public_ip: bool = True
    health_check: HealthCheck = field(default_factory=HealthCheck)


@dataclass(frozen=True)
class DeploySettings:
    project: str
    stack: str
    region: str
    service: ServiceSettings = field(default_factory=ServiceSettings)
    vpc_stack: Optional[str] = None
    log_retention_days: int = 7
    force_delete_repository: bool = False
    owner: str = "platform"
    name: Optional[str] = None

    @property
    def deployment_name(self) -> str:
        # unique per stack; the task definition family derives from it
        return self.name or f"{self.project}-{self.stack}"

    @property
    def tags(self) -> Dict[str, str]:
        return {
            "environment": self.stack,
            "project": self.project,
            "owner": self.owner,
            "deployed_by": "pulumi",
        }

    @classmethod
    def from_config(
        cls,
        config: Optional[pulumi.Config] = None,
        aws_config: Optional[pulumi.Config] = None,
        project: Optional[str] = None,
        stack: Optional[str] = None,
    ) -> "DeploySettings":
        config = config or pulumi.Config()
        aws_config = aws_config or pulumi.Config("aws")

        health_check = HealthCheck(path=config.get("health_check_path", default="/"))
        service = ServiceSettings(
            image=config.get("image", default=DEFAULT_IMAGE),
            container_name=config.get("container_name", default="web"),
            container_port=config.get_int("container_port", default=80),
            cpu=config.get_int("cpu", default=512),
            memory=config.get_int("memory", default=1024),
            desired_count=config.get_int("desired_count", default=1),
            assign_public_ip=config.get_bool("assign_public_ip", default=True),
            health_check=health_check,
        )

        return cls(
            project=project or pulumi.get_project(),
            stack=stack or pulumi.get_stack(),
            region=aws_config.require("region"),
            service=service,
            vpc_stack=config.get("vpc_stack"),
            log_retention_days=config.get_int("log_retention_days", default=7),
            force_delete_repository=config.get_bool(
                "force_delete_repository", default=False
            ),
            owner=config.get("owner", default="platform"),
            name=config.get("name"),
        )
