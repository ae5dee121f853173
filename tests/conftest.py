import pulumi
import pytest

from pulumi_regional_functions import AzureConfig

INSTRUMENTATION_KEY = "00000000-aaaa-bbbb-cccc-000000000000"
STORAGE_KEY = "c3RvcmFnZS1rZXk="
SUBSCRIPTION = "00000000-0000-0000-0000-000000000001"

# input that carries the azure resource name, by type token suffix
_NAME_INPUTS = {
    ":ResourceGroup": "resourceGroupName",
    ":StorageAccount": "accountName",
    ":Profile": "profileName",
    ":Endpoint": "endpointName",
    ":Component": "resourceName",
}


def _physical_name(args: pulumi.runtime.MockResourceArgs) -> str:
    key = next(
        (k for suffix, k in _NAME_INPUTS.items() if args.typ.endswith(suffix)), "name"
    )
    return args.inputs.get(key) or args.name


class AzureMocks(pulumi.runtime.Mocks):
    """Echoes inputs back as outputs and answers the read-back invokes."""

    def __init__(self):
        self.resources: list[pulumi.runtime.MockResourceArgs] = []
        self.calls: list[pulumi.runtime.MockCallArgs] = []
        self.instrumentation_key = INSTRUMENTATION_KEY

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)

        if not args.typ.startswith("azure-native:"):
            return [f"{args.name}_id", outputs]

        name = _physical_name(args)
        outputs["name"] = name
        rg = args.inputs.get("resourceGroupName", name)
        resource_id = (
            f"/subscriptions/{SUBSCRIPTION}/resourceGroups/{rg}"
            f"/providers/{args.typ}/{name}"
        )
        outputs["id"] = resource_id

        if args.typ.endswith(":Profile"):
            dns = dict(args.inputs.get("dnsConfig", {}))
            dns["fqdn"] = f"{dns.get('relativeName')}.trafficmanager.net"
            outputs["dnsConfig"] = dns
        elif args.typ.endswith(":WebApp"):
            outputs["defaultHostName"] = f"{name}.azurewebsites.net"
        elif args.typ.endswith(":Component"):
            outputs["appId"] = "app-id"
            outputs["instrumentationKey"] = self.instrumentation_key

        return [resource_id, outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        self.calls.append(args)
        if args.token.endswith(":listStorageAccountKeys"):
            return {"keys": [{"keyName": "key1", "permissions": "FULL", "value": STORAGE_KEY}]}
        if args.token.endswith(":getWebApp"):
            name = args.args.get("name")
            rg = args.args.get("resourceGroupName")
            return {
                "id": f"/subscriptions/{SUBSCRIPTION}/resourceGroups/{rg}"
                f"/providers/Microsoft.Web/sites/{name}",
                "name": name,
            }
        if args.token.endswith(":getComponent"):
            return {
                "name": args.args.get("resourceName"),
                "instrumentationKey": self.instrumentation_key,
            }
        return {}

    def of_type(self, suffix: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ.endswith(suffix)]


@pytest.fixture
def mocks():
    m = AzureMocks()
    pulumi.runtime.set_mocks(m, project="regional-functions", stack="test", preview=False)
    return m


@pytest.fixture
def config():
    return AzureConfig.build(environment="TEST")
