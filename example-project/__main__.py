"""Regional function apps behind Traffic Manager, deployed as a Pulumi project."""

from pulumi_regional_functions import AzureConfig, deploy

deploy(AzureConfig.from_pulumi())
