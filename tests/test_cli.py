from types import SimpleNamespace

import pytest
from pulumi import automation as auto

from pulumi_regional_functions import cli


class FakeCommandError(auto.CommandError):
    def __init__(self, msg: str):
        Exception.__init__(self, msg)
        self.msg = msg

    def __str__(self):
        return self.msg


class FakeStack:
    def __init__(self, outputs=None, error=None):
        self.config = {}
        self.outputs = outputs or {}
        self.error = error
        self.up_calls = 0
        self.preview_calls = 0

    def set_config(self, key, value):
        self.config[key] = value.value

    def up(self, on_output=None):
        self.up_calls += 1
        if on_output:
            on_output("Updating (test):\n")
        if self.error:
            raise self.error
        return SimpleNamespace(outputs=self.outputs)

    def preview(self, on_output=None):
        self.preview_calls += 1
        return SimpleNamespace(change_summary={})


@pytest.fixture
def stack_factory(monkeypatch):
    created = []

    def install(stack):
        def create_or_select_stack(stack_name, project_name, program):
            created.append(
                {"stack_name": stack_name, "project_name": project_name, "program": program}
            )
            return stack

        monkeypatch.setattr(cli.auto, "create_or_select_stack", create_or_select_stack)
        return created

    return install


def test_environment_is_required(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2


def test_invalid_environment_fails_before_any_remote_call(stack_factory):
    created = stack_factory(FakeStack())

    assert cli.main(["--environment", "STAGING"]) == 1
    assert created == []


def test_successful_run(stack_factory):
    stack = FakeStack(
        outputs={
            "resource_group_name": SimpleNamespace(value="helloworld-test-group", secret=False),
            "instrumentation_key": SimpleNamespace(value="ikey", secret=True),
        }
    )
    created = stack_factory(stack)

    assert cli.main(["--environment", "test"]) == 0
    assert stack.up_calls == 1
    assert stack.config["azure-native:location"] == "WestUS2"
    assert created[0]["stack_name"] == "test"
    assert created[0]["project_name"] == cli.PROJECT_NAME
    assert callable(created[0]["program"])


def test_run_provisioning_hides_secret_outputs(stack_factory):
    stack = FakeStack(
        outputs={
            "resource_group_name": SimpleNamespace(value="helloworld-test-group", secret=False),
            "instrumentation_key": SimpleNamespace(value="ikey", secret=True),
        }
    )
    stack_factory(stack)
    config = cli.config_from_args(cli.build_parser().parse_args(["-e", "TEST"]))

    outputs = cli.run_provisioning(config)

    assert outputs == {
        "resource_group_name": "helloworld-test-group",
        "instrumentation_key": "[secret]",
    }


def test_failed_up_raises_provision_error_with_engine_output(stack_factory):
    stack_factory(FakeStack(error=FakeCommandError("error: DNS name already taken")))
    config = cli.config_from_args(cli.build_parser().parse_args(["-e", "PROD"]))

    with pytest.raises(cli.ProvisionError) as exc:
        cli.run_provisioning(config, stack_name="prod-west")

    assert "prod-west" in str(exc.value)
    assert exc.value.stderr == "error: DNS name already taken"


def test_failed_up_exits_non_zero(stack_factory):
    stack = FakeStack(error=FakeCommandError("error: quota exceeded"))
    stack_factory(stack)

    assert cli.main(["--environment", "PROD"]) == 1
    assert stack.up_calls == 1


def test_preview_does_not_apply(stack_factory):
    stack = FakeStack()
    stack_factory(stack)

    assert cli.main(["--environment", "TEST", "--preview", "--stack", "scratch"]) == 0
    assert stack.preview_calls == 1
    assert stack.up_calls == 0


def test_arguments_map_to_config():
    args = cli.build_parser().parse_args(
        [
            "--environment",
            "PROD",
            "--app-name",
            "orders",
            "--prod-subscription",
            "sub-prod",
            "--primary-location",
            "EastUS",
            "--secondary-location",
            "WestEurope",
            "--resource-group-name",
            "orders-rg",
            "--storage-account-name",
            "ordersstore",
            "--traffic-manager-name",
            "orders-tm",
            "--app-insights-name",
            "orders-ai",
            "--parallel-regions",
        ]
    )

    config = cli.config_from_args(args)

    assert config.app_name == "orders"
    assert config.subscriptions[cli.Environment.PROD] == "sub-prod"
    assert config.locations == ("EastUS", "WestEurope")
    assert config.resource_group_name == "orders-rg"
    assert config.storage_account_name == "ordersstore"
    assert config.traffic_manager_name == "orders-tm"
    assert config.app_insights_name == "orders-ai"
    assert config.sequential is False
