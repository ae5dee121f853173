"""
Base configuration for regional function app deployments (cloud-agnostic).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    TEST = "TEST"
    PROD = "PROD"


class BaseConfig(BaseModel):
    """
    Inputs every deployment is derived from.

    Built once at startup and passed explicitly to the components; resource
    names are computed from these values, never from ambient state.
    """

    model_config = ConfigDict(frozen=True)

    app_name: str = "helloworld"
    environment: Environment
    primary_location: str = "WestUS2"
    secondary_location: str = "WestCentralUS"

    custom_tags: dict[str, str] = Field(default_factory=dict)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("app_name", "primary_location", "secondary_location")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @property
    def env_name(self) -> str:
        return self.environment.value.lower()

    @property
    def locations(self) -> tuple[str, str]:
        return (self.primary_location, self.secondary_location)

    def tags(self, **extra: str) -> dict[str, str]:
        base_tags = {
            "app": self.app_name,
            "environment": self.env_name,
            "managed-by": "pulumi",
        }
        return {**base_tags, **self.custom_tags, **extra}
