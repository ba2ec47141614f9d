"""Naming conventions for resources derived from a workspace name."""


def env_secret_name(workspace_name: str) -> str:
    return f"{workspace_name}-env-var"


def file_secret_name(workspace_name: str) -> str:
    return f"{workspace_name}-file"


def workspace_inventory_name(workspace_name: str) -> str:
    return f"{workspace_name}-workspace-inventory"


def secrets_inventory_name(workspace_name: str) -> str:
    return f"{workspace_name}-secrets-inventory"


def get_domain_template(name: str, dns_zone: str) -> str:
    """Hostname template expanded by the workspaces proxy per exposed port.

    Example: get_domain_template("ws1", "example.com") == "{{.port}}-ws1.example.com"
    """
    return f"{{{{.port}}}}-{name}.{dns_zone}"
