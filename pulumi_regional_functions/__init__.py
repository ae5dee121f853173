"""
pulumi-regional-functions - function apps in two Azure regions behind Traffic Manager.
"""

__version__ = "0.1.0"

# primary exports - what most callers need
from .config import AzureConfig, BaseConfig, Environment
from .deployment import RegionalFunctionsDeployment, deploy

# individual components for advanced usage
from .function_app import RegionalFunctionApp
from .insights import AppInsights
from .storage import FunctionStorage
from .traffic_manager import TrafficManager

from .errors import ConfigError, NotFoundError, ProvisionError, ProvisioningError
from .pipeline import Step, provisioning_steps
from .providers import azure_provider, resolve_subscription

__all__ = [
    # primary
    "RegionalFunctionsDeployment",
    "deploy",
    "AzureConfig",
    "BaseConfig",
    "Environment",
    # components
    "FunctionStorage",
    "RegionalFunctionApp",
    "TrafficManager",
    "AppInsights",
    # pipeline
    "Step",
    "provisioning_steps",
    "azure_provider",
    "resolve_subscription",
    # errors
    "ProvisioningError",
    "ConfigError",
    "ProvisionError",
    "NotFoundError",
]
