"""RegionalFunctionsDeployment - function apps in two regions behind Traffic Manager."""

import pulumi
from pulumi_azure_native import resources

from . import pipeline
from .config import AzureConfig
from .function_app import RegionalFunctionApp
from .insights import AppInsights
from .pipeline import Step
from .providers import azure_provider
from .storage import FunctionStorage
from .traffic_manager import TrafficManager


class RegionalFunctionsDeployment(pulumi.ComponentResource):
    """
    Provisions the full topology for one app/environment pair.

    Steps run in the order given by ``pipeline.provisioning_steps``; every
    resource depends on the resources of the steps it requires, so a failed
    step stops everything downstream of it. Nothing already created is rolled
    back.
    """

    def __init__(
        self,
        name: str,
        config: AzureConfig,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("regional-functions:azure:RegionalFunctionsDeployment", name, None, opts)

        self._config = config
        self._steps = pipeline.provisioning_steps(config.sequential)
        self._step_index = {step.key: i for i, step in enumerate(self._steps)}
        self._created: dict[str, list[pulumi.Resource]] = {}

        # phase 1: subscription
        self._begin(pipeline.SUBSCRIPTION)
        self._provider = azure_provider(
            f"{name}-provider", config, opts=pulumi.ResourceOptions(parent=self)
        )
        self._created[pipeline.SUBSCRIPTION] = [self._provider]

        # phase 2: shared infrastructure
        self._begin(pipeline.RESOURCE_GROUP)
        self._resource_group = resources.ResourceGroup(
            f"{name}-rg",
            resource_group_name=config.resource_group_name,
            location=config.primary_location,
            tags=config.tags(),
            opts=self._opts(pipeline.RESOURCE_GROUP, component=False),
        )
        self._created[pipeline.RESOURCE_GROUP] = [self._resource_group]
        rg_name = self._resource_group.name

        self._begin(pipeline.STORAGE_ACCOUNT)
        self._storage = FunctionStorage(
            f"{name}-storage",
            config,
            resource_group_name=rg_name,
            opts=self._opts(pipeline.STORAGE_ACCOUNT),
        )
        self._created[pipeline.STORAGE_ACCOUNT] = [self._storage.storage_account]

        self._begin(pipeline.TRAFFIC_MANAGER)
        self._traffic_manager = TrafficManager(
            f"{name}-traffic",
            config,
            resource_group_name=rg_name,
            opts=self._opts(pipeline.TRAFFIC_MANAGER),
        )
        self._created[pipeline.TRAFFIC_MANAGER] = [self._traffic_manager.profile]

        # phase 3: regional function apps
        locations = dict(zip(pipeline.REGIONS, config.locations))
        self._function_apps: dict[str, RegionalFunctionApp] = {}
        for region in pipeline.REGIONS:
            key = pipeline.function_app(region)
            self._begin(key)
            app = RegionalFunctionApp(
                f"{name}-{region}",
                config,
                location=locations[region],
                resource_group_name=rg_name,
                storage_connection_string=self._storage.connection_string,
                opts=self._opts(key),
            )
            self._function_apps[region] = app
            self._created[key] = [app.plan, app.web_app]

        self._function_app_ids: dict[str, pulumi.Output[str]] = {}
        for region in pipeline.REGIONS:
            key = pipeline.function_app_lookup(region)
            self._begin(key)
            deps = self._deps(key)
            self._function_app_ids[region] = self._function_apps[region].lookup_id(depends_on=deps)
            # reads create nothing; carry their inputs forward as the step's resources
            self._created[key] = [self._function_apps[region].web_app, *deps]

        for region in pipeline.REGIONS:
            key = pipeline.endpoint(region)
            self._begin(key)
            app = self._function_apps[region]
            endpoint = self._traffic_manager.add_endpoint(
                app.app_name,
                target_resource_id=self._function_app_ids[region],
                location=app.location,
                opts=pulumi.ResourceOptions(depends_on=self._deps(key)),
            )
            self._created[key] = [endpoint]

        # phase 4: monitoring
        self._begin(pipeline.APP_INSIGHTS)
        self._insights = AppInsights(
            f"{name}-insights",
            config,
            resource_group_name=rg_name,
            opts=self._opts(pipeline.APP_INSIGHTS),
        )
        self._created[pipeline.APP_INSIGHTS] = [self._insights.component]

        self._begin(pipeline.INSTRUMENTATION_KEY)
        deps = self._deps(pipeline.INSTRUMENTATION_KEY)
        self._instrumentation_key = self._insights.lookup_instrumentation_key(depends_on=deps)
        self._created[pipeline.INSTRUMENTATION_KEY] = [self._insights.component, *deps]

        # phase 5: wire the key into both regions
        for region in pipeline.REGIONS:
            key = pipeline.settings(region)
            self._begin(key)
            settings = self._function_apps[region].apply_settings(
                self._instrumentation_key,
                config.functions_extension_version,
                opts=pulumi.ResourceOptions(depends_on=self._deps(key)),
            )
            self._created[key] = [settings]

        self.register_outputs(
            {
                "resource_group_name": rg_name,
                "traffic_manager_fqdn": self._traffic_manager.fqdn,
                "function_app_ids": self._function_app_ids,
                "instrumentation_key": self._instrumentation_key,
            }
        )

    def _step(self, key: str) -> Step:
        return self._steps[self._step_index[key]]

    def _begin(self, key: str) -> None:
        step = self._step(key)
        pulumi.log.info(
            f"[{self._step_index[key] + 1}/{len(self._steps)}] {step.description}",
            resource=self,
        )

    def _deps(self, key: str) -> list[pulumi.Resource]:
        deps: list[pulumi.Resource] = []
        for required in self._step(key).requires:
            for res in self._created.get(required, []):
                if all(res is not d for d in deps):
                    deps.append(res)
        return deps

    def _opts(self, key: str, component: bool = True) -> pulumi.ResourceOptions:
        if component:
            return pulumi.ResourceOptions(
                parent=self, providers=[self._provider], depends_on=self._deps(key)
            )
        return pulumi.ResourceOptions(
            parent=self, provider=self._provider, depends_on=self._deps(key)
        )

    @property
    def config(self) -> AzureConfig:
        return self._config

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def resource_group_name(self) -> pulumi.Output[str]:
        return self._resource_group.name

    @property
    def storage(self) -> FunctionStorage:
        return self._storage

    @property
    def traffic_manager(self) -> TrafficManager:
        return self._traffic_manager

    @property
    def traffic_manager_fqdn(self) -> pulumi.Output[str]:
        return self._traffic_manager.fqdn

    @property
    def function_apps(self) -> dict[str, RegionalFunctionApp]:
        return self._function_apps

    @property
    def function_app_ids(self) -> dict[str, pulumi.Output[str]]:
        return self._function_app_ids

    @property
    def insights(self) -> AppInsights:
        return self._insights

    @property
    def instrumentation_key(self) -> pulumi.Output[str]:
        return self._instrumentation_key


def deploy(config: AzureConfig) -> RegionalFunctionsDeployment:
    """Pulumi program body: build the deployment and export its outputs."""
    deployment = RegionalFunctionsDeployment(
        f"{config.app_name}-{config.env_name}",
        config,
    )

    pulumi.export("resource_group_name", deployment.resource_group_name)
    pulumi.export("traffic_manager_fqdn", deployment.traffic_manager_fqdn)
    for region, app in deployment.function_apps.items():
        pulumi.export(f"{region}_function_app_name", app.app_name)
        pulumi.export(f"{region}_function_app_id", deployment.function_app_ids[region])
    pulumi.export("instrumentation_key", deployment.instrumentation_key)
    return deployment
