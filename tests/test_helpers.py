import pytest

from pulumi_regional_functions.errors import NotFoundError, ProvisionError
from pulumi_regional_functions.function_app import (
    base_app_settings,
    merge_settings,
    require_id,
)
from pulumi_regional_functions.insights import require_key
from pulumi_regional_functions.storage import connection_string


def test_connection_string():
    assert connection_string("acct", "k3y") == (
        "DefaultEndpointsProtocol=https;AccountName=acct;AccountKey=k3y;"
        "EndpointSuffix=core.windows.net"
    )


def test_base_app_settings():
    settings = base_app_settings("conn", "share", "dotnet", "~4")

    assert settings["AzureWebJobsStorage"] == "conn"
    assert settings["WEBSITE_CONTENTAZUREFILECONNECTIONSTRING"] == "conn"
    assert settings["WEBSITE_CONTENTSHARE"] == "share"
    assert settings["FUNCTIONS_WORKER_RUNTIME"] == "dotnet"
    assert settings["FUNCTIONS_EXTENSION_VERSION"] == "~4"


def test_merge_settings_keeps_existing_values():
    current = {"AzureWebJobsStorage": "conn", "FUNCTIONS_EXTENSION_VERSION": "~3"}

    merged = merge_settings(current, "ikey", "~4")

    assert merged == {
        "AzureWebJobsStorage": "conn",
        "FUNCTIONS_EXTENSION_VERSION": "~4",
        "APPINSIGHTS_INSTRUMENTATIONKEY": "ikey",
    }
    assert current["FUNCTIONS_EXTENSION_VERSION"] == "~3"


def test_require_id():
    assert require_id("/subscriptions/x/sites/app", "function app", "app") == "/subscriptions/x/sites/app"


@pytest.mark.parametrize("missing", [None, ""])
def test_require_id_raises_not_found(missing):
    with pytest.raises(NotFoundError) as exc:
        require_id(missing, "function app", "helloworld-test-WestUS2-functionapp")

    assert exc.value.name == "helloworld-test-WestUS2-functionapp"
    assert "not found" in str(exc.value)


def test_require_key_raises_not_found():
    with pytest.raises(NotFoundError):
        require_key(None, "helloworld-test-appinsights")
    assert require_key("ikey", "helloworld-test-appinsights") == "ikey"


def test_provision_error_keeps_stderr_verbatim():
    err = ProvisionError("pulumi up failed", "error: name already taken")

    assert err.stderr == "error: name already taken"
    assert str(err) == "pulumi up failed\nerror: name already taken"
    assert str(ProvisionError("plain")) == "plain"
