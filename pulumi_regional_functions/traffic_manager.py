"""Traffic Manager profile routing clients to the nearest regional function app."""

import pulumi
from pulumi_azure_native import trafficmanager

from .config import AzureConfig

ROUTING_METHOD = "Performance"
AZURE_ENDPOINT = "AzureEndpoints"
DNS_TTL = 30


class TrafficManager(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: AzureConfig,
        resource_group_name: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("regional-functions:azure:TrafficManager", name, None, opts)

        self._resource_name = name
        self._resource_group_name = pulumi.Output.from_input(resource_group_name)
        child_opts = pulumi.ResourceOptions(parent=self, depends_on=opts.depends_on if opts else None)

        # relative_name must be unique across trafficmanager.net
        self.profile = trafficmanager.Profile(
            f"{name}-profile",
            profile_name=config.traffic_manager_name,
            resource_group_name=resource_group_name,
            location="global",
            profile_status="Enabled",
            traffic_routing_method=ROUTING_METHOD,
            dns_config=trafficmanager.DnsConfigArgs(
                relative_name=config.traffic_manager_dns_label,
                ttl=DNS_TTL,
            ),
            monitor_config=trafficmanager.MonitorConfigArgs(
                protocol="HTTPS",
                port=443,
                path="/",
            ),
            tags=config.tags(),
            opts=child_opts,
        )

        self.endpoints: dict[str, trafficmanager.Endpoint] = {}

        self.register_outputs(
            {
                "profile_name": self.profile.name,
                "fqdn": self.fqdn,
            }
        )

    def add_endpoint(
        self,
        endpoint_name: str,
        target_resource_id: pulumi.Input[str],
        location: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> trafficmanager.Endpoint:
        endpoint = trafficmanager.Endpoint(
            f"{self._resource_name}-{endpoint_name}",
            endpoint_name=endpoint_name,
            endpoint_type=AZURE_ENDPOINT,
            profile_name=self.profile.name,
            resource_group_name=self._resource_group_name,
            target_resource_id=target_resource_id,
            endpoint_location=location,
            endpoint_status="Enabled",
            opts=pulumi.ResourceOptions.merge(pulumi.ResourceOptions(parent=self), opts),
        )
        self.endpoints[endpoint_name] = endpoint
        return endpoint

    @property
    def profile_name(self) -> pulumi.Output[str]:
        return self.profile.name

    @property
    def fqdn(self) -> pulumi.Output[str]:
        return self.profile.dns_config.apply(lambda dns: (dns.fqdn if dns else None) or "")
