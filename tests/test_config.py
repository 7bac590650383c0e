import pulumi
import pytest

from ecs_deploy import DeploySettings, HealthCheck
from ecs_deploy.config import DEFAULT_IMAGE

pulumi.runtime.set_config("aws:region", "eu-west-1")


def configure(namespace, **values):
    for key, value in values.items():
        pulumi.runtime.set_config(f"{namespace}:{key}", value)
    return pulumi.Config(namespace)


def load(config, project="ecs-deploy", stack="dev"):
    return DeploySettings.from_config(
        config, pulumi.Config("aws"), project=project, stack=stack
    )


def test_defaults():
    settings = load(configure("ecs-deploy-defaults"))

    assert settings.region == "eu-west-1"
    assert settings.vpc_stack is None
    assert settings.log_retention_days == 7
    assert settings.force_delete_repository is False
    assert settings.deployment_name == "ecs-deploy-dev"
    assert settings.service.image == DEFAULT_IMAGE
    assert settings.service.container_name == "web"
    assert settings.service.container_port == 80
    assert settings.service.cpu == 512
    assert settings.service.memory == 1024
    assert settings.service.desired_count == 1
    assert settings.service.assign_public_ip is True
    assert settings.service.health_check == HealthCheck()


def test_overrides():
    config = configure(
        "ecs-deploy-overrides",
        image="nginx:1.27",
        container_name="nginx",
        container_port="8080",
        desired_count="0",
        assign_public_ip="false",
        health_check_path="/healthz",
        vpc_stack="acme/vpcs/dev",
        force_delete_repository="true",
        owner="web-team",
        name="storefront",
    )

    settings = load(config)

    assert settings.service.image == "nginx:1.27"
    assert settings.service.container_name == "nginx"
    assert settings.service.container_port == 8080
    assert settings.service.desired_count == 0
    assert settings.service.assign_public_ip is False
    assert settings.service.health_check.path == "/healthz"
    assert settings.vpc_stack == "acme/vpcs/dev"
    assert settings.force_delete_repository is True
    assert settings.tags["owner"] == "web-team"
    assert settings.deployment_name == "storefront"


def test_health_check_timings_are_fixed():
    config = configure("ecs-deploy-health", health_check_path="/status")

    health_check = load(config).service.health_check

    assert (health_check.interval, health_check.timeout) == (5, 4)
    assert (health_check.healthy_threshold, health_check.unhealthy_threshold) == (2, 2)
    assert health_check.matcher == "200,301,302"


def test_deployment_name_differs_per_stack():
    config = configure("ecs-deploy-stacks")

    dev = load(config, stack="dev")
    prod = load(config, stack="prod")

    assert dev.deployment_name != prod.deployment_name


def test_tags():
    settings = DeploySettings(project="ecs-deploy", stack="prod", region="us-east-1")

    assert settings.tags == {
        "environment": "prod",
        "project": "ecs-deploy",
        "owner": "platform",
        "deployed_by": "pulumi",
    }


def test_wrongly_typed_value_raises():
    config = configure("ecs-deploy-typed", container_port="eighty")

    with pytest.raises(pulumi.ConfigTypeError):
        load(config)


def test_missing_region_raises():
    with pytest.raises(pulumi.ConfigMissingError):
        DeploySettings.from_config(
            configure("ecs-deploy-unset"),
            pulumi.Config("ecs-deploy-unset"),
            project="p",
            stack="s",
        )
