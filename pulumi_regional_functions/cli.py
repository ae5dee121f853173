"""
Command line entry point.

Provisions a regional function apps deployment through the Pulumi automation
API, running the same program as ``example-project/__main__.py``.
"""

import argparse
import sys
from typing import Any, Optional

from pulumi import automation as auto
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status

from .config import AzureConfig, Environment
from .deployment import deploy
from .errors import ConfigError, ProvisionError, ProvisioningError

PROJECT_NAME = "regional-functions"

# azure blue
BLUE = "#0078D4"

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulumi-regional-functions",
        description="Provision function apps in two regions behind Traffic Manager",
    )
    parser.add_argument(
        "--environment",
        "-e",
        required=True,
        help=f"target environment ({'|'.join(e.value for e in Environment)})",
    )
    parser.add_argument("--app-name", help="application name (default: helloworld)")
    parser.add_argument("--test-subscription", help="subscription id used for TEST")
    parser.add_argument("--prod-subscription", help="subscription id used for PROD")
    parser.add_argument("--primary-location", help="primary region (default: WestUS2)")
    parser.add_argument(
        "--secondary-location", help="secondary region (default: WestCentralUS)"
    )
    parser.add_argument("--resource-group-name", help="override the resource group name")
    parser.add_argument("--storage-account-name", help="override the storage account name")
    parser.add_argument("--traffic-manager-name", help="override the traffic manager name")
    parser.add_argument("--app-insights-name", help="override the app insights name")
    parser.add_argument("--stack", help="pulumi stack name (default: the environment)")
    parser.add_argument(
        "--parallel-regions",
        action="store_true",
        help="only wait on real dependencies instead of running every step in order",
    )
    parser.add_argument(
        "--preview", action="store_true", help="show the planned changes without applying them"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> AzureConfig:
    return AzureConfig.build(
        environment=args.environment,
        app_name=args.app_name,
        primary_location=args.primary_location,
        secondary_location=args.secondary_location,
        subscriptions={
            Environment.TEST: args.test_subscription,
            Environment.PROD: args.prod_subscription,
        },
        resource_group_override=args.resource_group_name,
        storage_account_override=args.storage_account_name,
        traffic_manager_override=args.traffic_manager_name,
        app_insights_override=args.app_insights_name,
        sequential=not args.parallel_regions,
    )


def _echo(line: str) -> None:
    console.print(line.rstrip("\n"), markup=False, highlight=False)


def run_provisioning(
    config: AzureConfig,
    stack_name: Optional[str] = None,
    preview: bool = False,
) -> dict[str, Any]:
    """Run ``pulumi up`` (or preview) for the deployment; returns the stack outputs."""
    stack_name = stack_name or config.env_name
    command = "preview" if preview else "up"

    try:
        with Status("  [dim]Selecting stack...[/]", console=console, spinner="dots"):
            stack = auto.create_or_select_stack(
                stack_name=stack_name,
                project_name=PROJECT_NAME,
                program=lambda: deploy(config),
            )
            stack.set_config(
                "azure-native:location", auto.ConfigValue(value=config.primary_location)
            )

        if preview:
            stack.preview(on_output=_echo)
            return {}

        result = stack.up(on_output=_echo)
    except auto.CommandError as e:
        raise ProvisionError(f"pulumi {command} failed for stack '{stack_name}'", str(e)) from e

    return {
        key: ("[secret]" if output.secret else output.value)
        for key, output in result.outputs.items()
    }


def _print_header(config: AzureConfig) -> None:
    console.print()
    console.print(
        Panel.fit(
            f"[bold {BLUE}]{config.app_name}[/] · {config.environment.value}",
            border_style=BLUE,
            padding=(0, 2),
        )
    )
    console.print(
        f"  [dim]Regions:[/] {config.primary_location}, {config.secondary_location}"
    )
    console.print(f"  [dim]Resource group:[/] {config.resource_group_name}")
    console.print()


def run(argv: Optional[list[str]] = None) -> bool:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        console.print(f"  [red]✗[/] {escape(str(e))}", highlight=False)
        return False

    _print_header(config)

    try:
        outputs = run_provisioning(config, stack_name=args.stack, preview=args.preview)
    except ProvisioningError as e:
        console.print()
        console.print(f"  [red]✗[/] {escape(str(e))}", highlight=False)
        if isinstance(e, ProvisionError) and not args.preview:
            console.print(
                f"  [dim]Resources created before the failure were left in place in "
                f"{config.resource_group_name}. Re-run to continue, or remove them with "
                f"`pulumi destroy --stack {args.stack or config.env_name}`.[/]"
            )
        return False

    console.print()
    if args.preview:
        console.print("  [green]✓[/] Preview complete")
        return True

    console.print("  [green]✓[/] Provisioning complete")
    for key, value in outputs.items():
        console.print(f"    [dim]{key}:[/] {escape(str(value))}", highlight=False)
    return True


def main(argv: Optional[list[str]] = None) -> int:
    return 0 if run(argv) else 1


if __name__ == "__main__":
    sys.exit(main())
