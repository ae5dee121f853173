"""Azure resource naming helpers.

Every name is a pure function of (app_name, environment, location) so that
cross references between steps always resolve. The environment is lower-cased
in names; locations keep the casing they were given.
"""

import re

_STORAGE_ACCOUNT_PATTERN = re.compile(r"^[a-z0-9]{3,24}$")  # lowercase alphanumeric only


def _env(environment: str) -> str:
    # accepts the Environment enum as well as plain strings
    return getattr(environment, "value", environment).lower()


def resource_group_name(app_name: str, environment: str) -> str:
    return f"{app_name}-{_env(environment)}-group"


def storage_account_name(app_name: str, environment: str) -> str:
    return f"{app_name}{_env(environment)}".replace("-", "").lower()


def is_valid_storage_account_name(name: str) -> bool:
    return bool(_STORAGE_ACCOUNT_PATTERN.match(name))


def traffic_manager_name(app_name: str, environment: str) -> str:
    return f"{app_name}-{_env(environment)}-trafficmanager"


def traffic_manager_dns_label(app_name: str, environment: str) -> str:
    return f"{app_name}-{_env(environment)}"


def function_app_name(app_name: str, environment: str, location: str) -> str:
    return f"{app_name}-{_env(environment)}-{location}-functionapp"


def consumption_plan_name(app_name: str, environment: str, location: str) -> str:
    return f"{app_name}-{_env(environment)}-{location}-plan"


def content_share_name(app_name: str, environment: str, location: str) -> str:
    # azure files share names must be lowercase
    return function_app_name(app_name, environment, location).lower()


def app_insights_name(app_name: str, environment: str) -> str:
    return f"{app_name}-{_env(environment)}-appinsights"
