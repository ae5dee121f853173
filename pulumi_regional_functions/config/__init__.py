from .base import BaseConfig, Environment

from .azure import (
    DEFAULT_EXTENSION_VERSION,
    DEFAULT_SUBSCRIPTIONS,
    DEFAULT_WORKER_RUNTIME,
    AzureConfig,
)

__all__ = [
    # Base
    "BaseConfig",
    "Environment",
    # Azure
    "AzureConfig",
    "DEFAULT_SUBSCRIPTIONS",
    "DEFAULT_EXTENSION_VERSION",
    "DEFAULT_WORKER_RUNTIME",
]
