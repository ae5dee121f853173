"""Subscription selection for a deployment."""

from typing import Mapping

import pulumi
import pulumi_azure_native as azure_native

from .config import AzureConfig, Environment
from .errors import ConfigError


def resolve_subscription(environment: str, subscriptions: Mapping[Environment, str]) -> str:
    """Map an environment tag to its subscription id."""
    try:
        env = Environment(getattr(environment, "value", environment))
    except ValueError:
        raise ConfigError(
            f"unknown environment '{environment}', expected one of "
            f"{', '.join(e.value for e in Environment)}"
        )

    subscription_id = subscriptions.get(env)
    if not subscription_id:
        raise ConfigError(f"no subscription configured for environment {env.value}")
    return subscription_id


def azure_provider(
    name: str,
    config: AzureConfig,
    opts: pulumi.ResourceOptions | None = None,
) -> azure_native.Provider:
    """Explicit provider pinned to the environment's subscription."""
    subscription_id = resolve_subscription(config.environment, config.subscriptions)
    pulumi.log.info(
        f"Using subscription {subscription_id} for environment {config.environment.value}"
    )
    return azure_native.Provider(
        name,
        subscription_id=subscription_id,
        location=config.primary_location,
        opts=opts,
    )
