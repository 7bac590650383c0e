from .config import DeploySettings, HealthCheck, ServiceSettings
from .deployment import OUTPUT_NAMES, EcsDeployment, export_outputs
from .identity import DeployIdentity
from .network import Network, resolve_network
from .policies import PolicyStatement, PolicyStatementError
from .registry import ImageRegistry
from .service import LoadBalancedFargateService

__all__ = [
    "DeployIdentity",
    "DeploySettings",
    "EcsDeployment",
    "HealthCheck",
    "ImageRegistry",
    "LoadBalancedFargateService",
    "Network",
    "OUTPUT_NAMES",
    "PolicyStatement",
    "PolicyStatementError",
    "ServiceSettings",
    "export_outputs",
    "resolve_network",
]
