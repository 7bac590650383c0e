import pulumi
from ecs_deploy import DeploySettings, EcsDeployment, export_outputs

PROJECT_NAME = pulumi.get_project()
STACK = pulumi.get_stack()

CONFIG = pulumi.Config()
AWS_CONFIG = pulumi.Config("aws")

SETTINGS = DeploySettings.from_config(
    CONFIG, AWS_CONFIG, project=PROJECT_NAME, stack=STACK
)

deployment = EcsDeployment(SETTINGS.deployment_name, SETTINGS)

export_outputs(deployment)
