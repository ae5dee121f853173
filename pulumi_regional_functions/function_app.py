"""Consumption-plan function app for a single region."""

from typing import Mapping, Sequence

import pulumi
from pulumi_azure_native import web

from . import naming
from .config import AzureConfig
from .errors import NotFoundError

INSTRUMENTATION_KEY_SETTING = "APPINSIGHTS_INSTRUMENTATIONKEY"
EXTENSION_VERSION_SETTING = "FUNCTIONS_EXTENSION_VERSION"


def base_app_settings(
    storage_connection_string: str,
    content_share: str,
    worker_runtime: str,
    extension_version: str,
) -> dict[str, str]:
    """Settings a consumption function app needs to start."""
    return {
        "AzureWebJobsStorage": storage_connection_string,
        "WEBSITE_CONTENTAZUREFILECONNECTIONSTRING": storage_connection_string,
        "WEBSITE_CONTENTSHARE": content_share,
        "FUNCTIONS_WORKER_RUNTIME": worker_runtime,
        EXTENSION_VERSION_SETTING: extension_version,
    }


def merge_settings(
    current: Mapping[str, str], instrumentation_key: str, extension_version: str
) -> dict[str, str]:
    """Set the two monitoring settings without dropping existing ones."""
    return {
        **current,
        INSTRUMENTATION_KEY_SETTING: instrumentation_key,
        EXTENSION_VERSION_SETTING: extension_version,
    }


def require_id(resource_id: str | None, kind: str, name: str) -> str:
    if not resource_id:
        raise NotFoundError(kind, name)
    return resource_id


class RegionalFunctionApp(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: AzureConfig,
        location: str,
        resource_group_name: pulumi.Input[str],
        storage_connection_string: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("regional-functions:azure:RegionalFunctionApp", name, None, opts)

        self.config = config
        self.location = location
        self.app_name = config.function_app_name(location)
        self._resource_name = name
        self._resource_group_name = pulumi.Output.from_input(resource_group_name)
        # children wait on whatever the component waits on
        child_opts = pulumi.ResourceOptions(parent=self, depends_on=opts.depends_on if opts else None)

        # dynamic Y1 plan, the same one `az functionapp create --consumption-plan-location` makes
        self.plan = web.AppServicePlan(
            f"{name}-plan",
            name=naming.consumption_plan_name(config.app_name, config.env_name, location),
            resource_group_name=resource_group_name,
            location=location,
            kind="functionapp",
            sku=web.SkuDescriptionArgs(
                name="Y1",
                tier="Dynamic",
            ),
            tags=config.tags(),
            opts=child_opts,
        )

        self.base_settings = pulumi.Output.secret(
            pulumi.Output.from_input(storage_connection_string).apply(
                lambda conn: base_app_settings(
                    conn,
                    naming.content_share_name(config.app_name, config.env_name, location),
                    config.functions_worker_runtime,
                    config.functions_extension_version,
                )
            )
        )

        self.web_app = web.WebApp(
            f"{name}-app",
            name=self.app_name,
            resource_group_name=resource_group_name,
            location=location,
            kind="functionapp",
            server_farm_id=self.plan.id,
            https_only=True,
            site_config=web.SiteConfigArgs(
                app_settings=self.base_settings.apply(
                    lambda settings: [
                        web.NameValuePairArgs(name=k, value=v) for k, v in settings.items()
                    ]
                ),
            ),
            tags=config.tags(region=location),
            # settings are owned by WebAppApplicationSettings once applied
            opts=pulumi.ResourceOptions.merge(
                child_opts, pulumi.ResourceOptions(ignore_changes=["siteConfig.appSettings"])
            ),
        )

        self.settings: web.WebAppApplicationSettings | None = None

        self.register_outputs(
            {
                "name": self.web_app.name,
                "id": self.web_app.id,
                "default_host_name": self.web_app.default_host_name,
            }
        )

    def lookup_id(
        self, depends_on: Sequence[pulumi.Resource] = ()
    ) -> pulumi.Output[str]:
        """
        Read the app's resource id back from the control plane.

        An empty id raises NotFoundError. An app missing from Azure makes the
        invoke itself fail with the ARM 404, and that engine error surfaces
        unchanged.
        """
        app_name = self.app_name
        result = web.get_web_app_output(
            name=self.web_app.name,
            resource_group_name=self._resource_group_name,
            opts=pulumi.InvokeOutputOptions(
                parent=self, depends_on=[self.web_app, *depends_on]
            ),
        )
        return result.id.apply(lambda resource_id: require_id(resource_id, "function app", app_name))

    def apply_settings(
        self,
        instrumentation_key: pulumi.Input[str],
        extension_version: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> web.WebAppApplicationSettings:
        properties = pulumi.Output.secret(
            pulumi.Output.all(self.base_settings, instrumentation_key).apply(
                lambda args: merge_settings(args[0], args[1], extension_version)
            )
        )
        self.settings = web.WebAppApplicationSettings(
            f"{self._resource_name}-settings",
            name=self.web_app.name,
            resource_group_name=self._resource_group_name,
            properties=properties,
            opts=pulumi.ResourceOptions.merge(pulumi.ResourceOptions(parent=self), opts),
        )
        return self.settings

    @property
    def app_id(self) -> pulumi.Output[str]:
        return self.web_app.id

    @property
    def default_host_name(self) -> pulumi.Output[str]:
        return self.web_app.default_host_name
