"""Azure-specific configuration for regional function app deployments."""

from typing import Any, Optional

import pulumi
from pydantic import Field, model_validator

from .. import naming
from ..errors import ConfigError
from .base import BaseConfig, Environment

# placeholder subscriptions; override per environment via config or CLI
DEFAULT_SUBSCRIPTIONS: dict[Environment, str] = {
    Environment.TEST: "00000000-0000-0000-0000-000000000001",
    Environment.PROD: "00000000-0000-0000-0000-000000000002",
}

DEFAULT_EXTENSION_VERSION = "~4"
DEFAULT_WORKER_RUNTIME = "dotnet"


def _as_environment(value: Any) -> Environment:
    if isinstance(value, Environment):
        return value
    return Environment(str(value).strip().upper())


class AzureConfig(BaseConfig):
    subscriptions: dict[Environment, str] = Field(
        default_factory=lambda: dict(DEFAULT_SUBSCRIPTIONS)
    )

    # explicit names; derived from app/environment when unset
    resource_group_override: Optional[str] = None
    storage_account_override: Optional[str] = None
    traffic_manager_override: Optional[str] = None
    app_insights_override: Optional[str] = None

    functions_extension_version: str = DEFAULT_EXTENSION_VERSION
    functions_worker_runtime: str = DEFAULT_WORKER_RUNTIME

    # chain every step on its predecessor so the first failure stops the run
    sequential: bool = True

    @model_validator(mode="after")
    def _check_storage_account_name(self) -> "AzureConfig":
        if not naming.is_valid_storage_account_name(self.storage_account_name):
            raise ValueError(
                f"storage account name '{self.storage_account_name}' must be "
                "3-24 lowercase letters and digits"
            )
        return self

    @classmethod
    def build(cls, **values: Any) -> "AzureConfig":
        """Validate inputs, raising ConfigError instead of a pydantic error."""
        # drop unset optionals so field defaults apply
        values = {k: v for k, v in values.items() if v is not None}
        overrides = values.pop("subscriptions", None) or {}
        try:
            subscriptions = dict(DEFAULT_SUBSCRIPTIONS)
            subscriptions.update(
                {_as_environment(env): sub for env, sub in overrides.items() if sub}
            )
            return cls(subscriptions=subscriptions, **values)
        except ValueError as e:
            raise ConfigError(f"invalid configuration: {e}") from e

    @classmethod
    def from_pulumi(cls) -> "AzureConfig":
        """Load configuration from Pulumi config."""
        config = pulumi.Config()

        # Required values
        environment = config.require("environment")

        # Optional values with defaults
        subscriptions = {
            Environment.TEST: config.get("test-subscription"),
            Environment.PROD: config.get("prod-subscription"),
        }

        return cls.build(
            environment=environment,
            app_name=config.get("app-name"),
            primary_location=config.get("primary-location"),
            secondary_location=config.get("secondary-location"),
            subscriptions=subscriptions,
            resource_group_override=config.get("resource-group-name"),
            storage_account_override=config.get("storage-account-name"),
            traffic_manager_override=config.get("traffic-manager-name"),
            app_insights_override=config.get("app-insights-name"),
            functions_extension_version=config.get("functions-extension-version"),
            functions_worker_runtime=config.get("functions-worker-runtime"),
            sequential=config.get_bool("sequential"),
            custom_tags=config.get_object("tags"),
        )

    @property
    def resource_group_name(self) -> str:
        return self.resource_group_override or naming.resource_group_name(
            self.app_name, self.env_name
        )

    @property
    def storage_account_name(self) -> str:
        return self.storage_account_override or naming.storage_account_name(
            self.app_name, self.env_name
        )

    @property
    def traffic_manager_name(self) -> str:
        return self.traffic_manager_override or naming.traffic_manager_name(
            self.app_name, self.env_name
        )

    @property
    def traffic_manager_dns_label(self) -> str:
        return naming.traffic_manager_dns_label(self.app_name, self.env_name)

    @property
    def app_insights_name(self) -> str:
        return self.app_insights_override or naming.app_insights_name(
            self.app_name, self.env_name
        )

    def function_app_name(self, location: str) -> str:
        return naming.function_app_name(self.app_name, self.env_name, location)
