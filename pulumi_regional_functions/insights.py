"""Application Insights component and its instrumentation key."""

from typing import Sequence

import pulumi
from pulumi_azure_native import applicationinsights

from .config import AzureConfig
from .errors import NotFoundError


def require_key(instrumentation_key: str | None, name: str) -> str:
    if not instrumentation_key:
        raise NotFoundError("application insights instrumentation key", name)
    return instrumentation_key


class AppInsights(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: AzureConfig,
        resource_group_name: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("regional-functions:azure:AppInsights", name, None, opts)

        self.component_name = config.app_insights_name
        self._resource_group_name = pulumi.Output.from_input(resource_group_name)
        child_opts = pulumi.ResourceOptions(parent=self, depends_on=opts.depends_on if opts else None)

        self.component = applicationinsights.Component(
            f"{name}-component",
            resource_name_=self.component_name,
            resource_group_name=resource_group_name,
            location=config.primary_location,
            kind="web",
            application_type=applicationinsights.ApplicationType.WEB,
            tags=config.tags(),
            opts=child_opts,
        )

        self.register_outputs(
            {
                "name": self.component.name,
                "app_id": self.component.app_id,
            }
        )

    def lookup_instrumentation_key(
        self, depends_on: Sequence[pulumi.Resource] = ()
    ) -> pulumi.Output[str]:
        """
        Read the instrumentation key back from the created component.

        An empty key raises NotFoundError. A component missing from Azure makes
        the invoke itself fail, and that engine error surfaces unchanged.
        """
        component_name = self.component_name
        result = applicationinsights.get_component_output(
            resource_name=self.component.name,
            resource_group_name=self._resource_group_name,
            opts=pulumi.InvokeOutputOptions(
                parent=self, depends_on=[self.component, *depends_on]
            ),
        )
        return pulumi.Output.secret(
            result.instrumentation_key.apply(lambda key: require_key(key, component_name))
        )
