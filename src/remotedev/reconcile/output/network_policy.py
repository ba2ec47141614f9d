"""NetworkPolicy isolating a workspace pod.

Ingress is only allowed from the workspaces proxy. Egress is allowed to the
public internet and to cluster DNS, never to private address ranges.
"""

from remotedev.reconcile.output.resources import Resource, stringify_keys

PROXY_POD_NAME = "gitlab-workspaces-proxy"
DNS_NAMESPACE = "kube-system"
DNS_PORT = 53
PRIVATE_CIDRS = ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")


def _namespace_selector(namespace: str) -> dict:
    return {"matchLabels": {"kubernetes.io/metadata.name": namespace}}


def build_network_policy(
    name: str,
    namespace: str,
    labels: dict[str, str],
    annotations: dict[str, str],
    proxy_namespace: str,
) -> Resource:
    """Build the workspace NetworkPolicy.

    Args:
        name: Workspace name (also the policy name)
        namespace: Workspace namespace
        labels: Ownership labels
        annotations: Ownership annotations
        proxy_namespace: Namespace where the workspaces proxy runs

    Returns:
        NetworkPolicy resource
    """
    ingress = [
        {
            "from": [
                {
                    "namespaceSelector": _namespace_selector(proxy_namespace),
                    "podSelector": {
                        "matchLabels": {"app.kubernetes.io/name": PROXY_POD_NAME},
                    },
                }
            ]
        }
    ]
    egress = [
        {"to": [{"ipBlock": {"cidr": "0.0.0.0/0", "except": list(PRIVATE_CIDRS)}}]},
        {
            "ports": [
                {"port": DNS_PORT, "protocol": "TCP"},
                {"port": DNS_PORT, "protocol": "UDP"},
            ],
            "to": [{"namespaceSelector": _namespace_selector(DNS_NAMESPACE)}],
        },
    ]

    return stringify_keys({
        "apiVersion": "networking.k8s.io/v1",
        "kind": "NetworkPolicy",
        "metadata": {
            "annotations": dict(annotations),
            "labels": dict(labels),
            "name": name,
            "namespace": namespace,
        },
        "spec": {
            "egress": egress,
            "ingress": ingress,
            "podSelector": {},
            "policyTypes": ["Ingress", "Egress"],
        },
    })
