"""Tests for the label, inventory, secret and network policy builders."""

import base64

from remotedev.core.domain import VariableType
from remotedev.core.models import WorkspaceVariable
from remotedev.reconcile.output.inventory import build_inventory_config_map
from remotedev.reconcile.output.labels import build_labels_and_annotations
from remotedev.reconcile.output.naming import get_domain_template
from remotedev.reconcile.output.network_policy import PRIVATE_CIDRS, build_network_policy
from remotedev.reconcile.output.resources import stringify_keys
from remotedev.reconcile.output.secrets import build_secrets


class TestLabelsAndAnnotations:
    """Tests for build_labels_and_annotations."""

    def test_builds_expected_keys(self) -> None:
        labels, annotations = build_labels_and_annotations(
            agent_id=1,
            domain_template="{{.port}}-ws.example.dev",
            owning_inventory="ws-workspace-inventory",
            workspace_id=10,
        )

        assert labels == {"agent.gitlab.com/id": "1"}
        assert annotations == {
            "config.k8s.io/owning-inventory": "ws-workspace-inventory",
            "workspaces.gitlab.com/host-template": "{{.port}}-ws.example.dev",
            "workspaces.gitlab.com/id": "10",
        }

    def test_all_values_are_strings(self) -> None:
        """Integer IDs are converted to str."""
        labels, annotations = build_labels_and_annotations(
            agent_id=42, domain_template="t", owning_inventory="inv", workspace_id=99
        )

        assert all(isinstance(v, str) for v in labels.values())
        assert all(isinstance(v, str) for v in annotations.values())

    def test_returns_fresh_mappings(self) -> None:
        first, _ = build_labels_and_annotations(1, "t", "inv", 2)
        first["mutated"] = "yes"
        second, _ = build_labels_and_annotations(1, "t", "inv", 2)

        assert "mutated" not in second


class TestInventoryConfigMap:
    """Tests for build_inventory_config_map."""

    def test_inventory_shape(self) -> None:
        inventory = build_inventory_config_map(
            name="ws-workspace-inventory", namespace="ns", agent_id=1
        )

        assert inventory == {
            "kind": "ConfigMap",
            "apiVersion": "v1",
            "metadata": {
                "name": "ws-workspace-inventory",
                "namespace": "ns",
                "labels": {
                    "cli-utils.sigs.k8s.io/inventory-id": "ws-workspace-inventory",
                    "agent.gitlab.com/id": "1",
                },
            },
        }


class TestSecrets:
    """Tests for build_secrets."""

    def test_returns_inventory_then_env_then_file(self, make_context) -> None:
        resources = build_secrets(
            make_context(), env_secret_name="ws-env-var", file_secret_name="ws-file"
        )

        assert [r["kind"] for r in resources] == ["ConfigMap", "Secret", "Secret"]
        assert resources[0]["metadata"]["name"] == "workspace-10-secrets-inventory"
        assert resources[1]["metadata"]["name"] == "ws-env-var"
        assert resources[2]["metadata"]["name"] == "ws-file"

    def test_secret_data_is_base64_encoded_per_type(self, make_context) -> None:
        _, env_secret, file_secret = build_secrets(
            make_context(), env_secret_name="env", file_secret_name="file"
        )

        assert base64.b64decode(env_secret["data"]["API_TOKEN"]).decode() == "t0ken"
        assert base64.b64decode(file_secret["data"]["gitconfig"]).decode() == "[user]\n"
        assert "gitconfig" not in env_secret["data"]
        assert "API_TOKEN" not in file_secret["data"]

    def test_secrets_owned_by_secrets_inventory(self, make_context) -> None:
        inventory, env_secret, file_secret = build_secrets(
            make_context(), env_secret_name="env", file_secret_name="file"
        )

        for secret in (env_secret, file_secret):
            owner = secret["metadata"]["annotations"]["config.k8s.io/owning-inventory"]
            assert owner == inventory["metadata"]["name"]

    def test_no_variables_yields_empty_data(self, make_context) -> None:
        """Both secrets are emitted even without variables."""
        resources = build_secrets(
            make_context(workspace_variables=()), env_secret_name="env", file_secret_name="file"
        )

        assert len(resources) == 3
        assert resources[1]["data"] == {}
        assert resources[2]["data"] == {}

    def test_duplicate_key_last_value_wins(self, make_context) -> None:
        variables = (
            WorkspaceVariable(key="A", value="first", variable_type=VariableType.ENVIRONMENT),
            WorkspaceVariable(key="A", value="second", variable_type=VariableType.ENVIRONMENT),
        )
        _, env_secret, _ = build_secrets(
            make_context(workspace_variables=variables),
            env_secret_name="env",
            file_secret_name="file",
        )

        assert base64.b64decode(env_secret["data"]["A"]).decode() == "second"


class TestNetworkPolicy:
    """Tests for build_network_policy."""

    def build(self):
        return build_network_policy(
            name="ws",
            namespace="ns",
            labels={"agent.gitlab.com/id": "1"},
            annotations={"workspaces.gitlab.com/id": "10"},
            proxy_namespace="gitlab-workspaces",
        )

    def test_selects_all_pods_for_both_directions(self) -> None:
        policy = self.build()

        assert policy["kind"] == "NetworkPolicy"
        assert policy["apiVersion"] == "networking.k8s.io/v1"
        assert policy["spec"]["podSelector"] == {}
        assert policy["spec"]["policyTypes"] == ["Ingress", "Egress"]

    def test_ingress_only_from_proxy_namespace(self) -> None:
        ingress = self.build()["spec"]["ingress"]

        assert len(ingress) == 1
        peer = ingress[0]["from"][0]
        assert peer["namespaceSelector"]["matchLabels"] == {
            "kubernetes.io/metadata.name": "gitlab-workspaces"
        }

    def test_egress_excludes_private_ranges_and_allows_dns(self) -> None:
        egress = self.build()["spec"]["egress"]

        ip_block = egress[0]["to"][0]["ipBlock"]
        assert ip_block["cidr"] == "0.0.0.0/0"
        assert ip_block["except"] == list(PRIVATE_CIDRS)
        assert {p["protocol"] for p in egress[1]["ports"]} == {"TCP", "UDP"}
        assert all(p["port"] == 53 for p in egress[1]["ports"])

    def test_carries_ownership_metadata(self) -> None:
        metadata = self.build()["metadata"]

        assert metadata["labels"] == {"agent.gitlab.com/id": "1"}
        assert metadata["annotations"] == {"workspaces.gitlab.com/id": "10"}


class TestHelpers:
    def test_domain_template(self) -> None:
        assert get_domain_template("ws1", "example.com") == "{{.port}}-ws1.example.com"

    def test_stringify_keys_is_deep(self) -> None:
        value = {1: {2: [{3: "x"}]}, "t": (1, 2)}

        assert stringify_keys(value) == {"1": {"2": [{"3": "x"}]}, "t": [1, 2]}
