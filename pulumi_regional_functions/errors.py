"""Errors raised while provisioning regional function apps."""


class ProvisioningError(Exception):
    pass


class ConfigError(ProvisioningError, ValueError):
    """Invalid or missing input, detected before any remote call."""


class ProvisionError(ProvisioningError):
    """The control plane rejected a create call (name collision, bad location, quota)."""

    stderr: str

    def __init__(self, msg: str, stderr: str = ""):
        super().__init__(msg)
        self.stderr = stderr

    def __str__(self):
        if self.stderr:
            return f"{self.args[0]}\n{self.stderr}"
        return self.args[0]


class NotFoundError(ProvisioningError):
    """A read-back right after a create returned nothing."""

    kind: str
    name: str

    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} '{name}' not found")
        self.kind = kind
        self.name = name
