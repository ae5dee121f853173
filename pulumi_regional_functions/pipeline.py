"""
Ordered provisioning steps and the dependency edges between them.

The deployment component walks these steps in order and derives each
resource's ``depends_on`` from ``Step.requires``. Only the true data
dependencies are required; in sequential mode every step also waits on its
predecessor, so the first failure blocks everything after it.
"""

from dataclasses import dataclass

PRIMARY = "primary"
SECONDARY = "secondary"
REGIONS = (PRIMARY, SECONDARY)

SUBSCRIPTION = "subscription"
RESOURCE_GROUP = "resource-group"
STORAGE_ACCOUNT = "storage-account"
TRAFFIC_MANAGER = "traffic-manager"
APP_INSIGHTS = "app-insights"
INSTRUMENTATION_KEY = "instrumentation-key"


def function_app(region: str) -> str:
    return f"function-app-{region}"


def function_app_lookup(region: str) -> str:
    return f"function-app-lookup-{region}"


def endpoint(region: str) -> str:
    return f"endpoint-{region}"


def settings(region: str) -> str:
    return f"settings-{region}"


@dataclass(frozen=True)
class Step:
    key: str
    description: str
    requires: tuple[str, ...] = ()


def _base_steps() -> list[Step]:
    steps = [
        Step(SUBSCRIPTION, "Selecting subscription"),
        Step(RESOURCE_GROUP, "Creating resource group", (SUBSCRIPTION,)),
        Step(STORAGE_ACCOUNT, "Creating storage account", (RESOURCE_GROUP,)),
        Step(TRAFFIC_MANAGER, "Creating traffic manager profile", (RESOURCE_GROUP,)),
    ]
    steps += [
        Step(
            function_app(region),
            f"Creating {region} function app",
            (RESOURCE_GROUP, STORAGE_ACCOUNT),
        )
        for region in REGIONS
    ]
    steps += [
        Step(
            function_app_lookup(region),
            f"Reading {region} function app id",
            (function_app(region),),
        )
        for region in REGIONS
    ]
    steps += [
        Step(
            endpoint(region),
            f"Adding {region} traffic manager endpoint",
            (TRAFFIC_MANAGER, function_app_lookup(region)),
        )
        for region in REGIONS
    ]
    steps += [
        Step(APP_INSIGHTS, "Creating application insights", (RESOURCE_GROUP,)),
        Step(INSTRUMENTATION_KEY, "Reading instrumentation key", (APP_INSIGHTS,)),
    ]
    steps += [
        Step(
            settings(region),
            f"Applying {region} function app settings",
            (function_app(region), INSTRUMENTATION_KEY),
        )
        for region in REGIONS
    ]
    return steps


def provisioning_steps(sequential: bool = True) -> tuple[Step, ...]:
    """Return the steps in execution order."""
    steps = _base_steps()
    if sequential:
        chained = [steps[0]]
        for prev, step in zip(steps, steps[1:]):
            requires = step.requires
            if prev.key not in requires:
                requires = requires + (prev.key,)
            chained.append(Step(step.key, step.description, requires))
        steps = chained
    result = tuple(steps)
    validate(result)
    return result


def validate(steps: tuple[Step, ...]) -> None:
    """Reject duplicate keys and requirements on unknown or later steps."""
    seen: set[str] = set()
    for step in steps:
        if step.key in seen:
            raise ValueError(f"duplicate step '{step.key}'")
        for required in step.requires:
            if required not in seen:
                raise ValueError(
                    f"step '{step.key}' requires '{required}' which does not run before it"
                )
        seen.add(step.key)


def dependents(steps: tuple[Step, ...], key: str) -> set[str]:
    """Every step that cannot run if ``key`` fails."""
    blocked = {key}
    for step in steps:
        if blocked.intersection(step.requires):
            blocked.add(step.key)
    blocked.discard(key)
    return blocked
