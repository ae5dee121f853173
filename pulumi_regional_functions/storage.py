"""Storage account shared by the regional function apps."""

import pulumi
import pulumi_azure_native as azure_native

from .config import AzureConfig

STORAGE_SKU = "Standard_LRS"
STORAGE_KIND = "StorageV2"


def connection_string(account_name: str, account_key: str) -> str:
    return (
        "DefaultEndpointsProtocol=https;"
        f"AccountName={account_name};"
        f"AccountKey={account_key};"
        "EndpointSuffix=core.windows.net"
    )


class FunctionStorage(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: AzureConfig,
        resource_group_name: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("regional-functions:azure:FunctionStorage", name, None, opts)

        self.config = config
        self._resource_group_name = pulumi.Output.from_input(resource_group_name)
        child_opts = pulumi.ResourceOptions(parent=self, depends_on=opts.depends_on if opts else None)

        # file and blob encryption are required by policy
        self.storage_account = azure_native.storage.StorageAccount(
            f"{name}-account",
            account_name=config.storage_account_name,
            resource_group_name=resource_group_name,
            location=config.primary_location,
            kind=STORAGE_KIND,
            sku=azure_native.storage.SkuArgs(
                name=STORAGE_SKU,
            ),
            encryption=azure_native.storage.EncryptionArgs(
                key_source=azure_native.storage.KeySource.MICROSOFT_STORAGE,
                services=azure_native.storage.EncryptionServicesArgs(
                    blob=azure_native.storage.EncryptionServiceArgs(enabled=True),
                    file=azure_native.storage.EncryptionServiceArgs(enabled=True),
                ),
            ),
            enable_https_traffic_only=True,
            minimum_tls_version=azure_native.storage.MinimumTlsVersion.TLS1_2,
            allow_blob_public_access=False,
            tags=config.tags(),
            opts=child_opts,
        )

        self.access_key = pulumi.Output.all(
            self.storage_account.name, self._resource_group_name
        ).apply(
            lambda args: (
                azure_native.storage.list_storage_account_keys(
                    account_name=args[0],
                    resource_group_name=args[1],
                    opts=pulumi.InvokeOptions(parent=self),
                )
                .keys[0]
                .value
            )
        )

        self.connection_string = pulumi.Output.secret(
            pulumi.Output.all(self.storage_account.name, self.access_key).apply(
                lambda args: connection_string(args[0], args[1])
            )
        )

        self.register_outputs(
            {
                "account_name": self.storage_account.name,
                "connection_string": self.connection_string,
            }
        )

    @property
    def account_name(self) -> pulumi.Output[str]:
        return self.storage_account.name
