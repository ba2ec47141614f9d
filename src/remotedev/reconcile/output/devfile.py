"""Devfile resource compiler.

Compiles the container and volume components of a processed devfile
(schema 2.2) into the core workload resources of a workspace:

    [*PersistentVolumeClaim, Deployment, Service?]

Unrecoverable devfile problems are logged and yield [], which the desired
config generator treats as "nothing to apply".
"""

import logging
from typing import Any

import yaml

from remotedev.app.config import DevfileConfig, get_settings
from remotedev.core.logging_schema import Component, LogEvent
from remotedev.reconcile.output.resources import Resource, stringify_keys

VARIABLES_VOLUME_NAME = "gl-workspace-variables"
# rwxrwxr--
VARIABLES_FILE_MODE = 0o774


class DevfileError(ValueError):
    """Processed devfile cannot be turned into workspace resources."""


def _load(processed_devfile: str) -> dict[str, Any]:
    try:
        devfile = yaml.safe_load(processed_devfile)
    except yaml.YAMLError as e:
        raise DevfileError(f"invalid YAML: {e}") from e
    if not isinstance(devfile, dict):
        raise DevfileError("devfile root must be a mapping")
    components = devfile.get("components") or []
    if not isinstance(components, list):
        raise DevfileError("components must be a list")
    for component in components:
        if not isinstance(component, dict) or not _is_name(component.get("name")):
            raise DevfileError("every component needs a string name")
    return devfile


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DevfileError(f"{where} must be a mapping")
    return value


def _list(value: Any, where: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DevfileError(f"{where} must be a list")
    return value


def _string_list(value: Any, where: str) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DevfileError(f"{where} must be a list of strings")
    return list(value)


def _quantity(value: Any, where: str) -> str | None:
    """Resource quantity such as 1Gi, 500m or 2."""
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (str, int, float)) or value == "":
        raise DevfileError(f"{where} must be a quantity")
    return str(value)


def _port(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 < value < 65536:
        raise DevfileError(f"{where} must be a port number")
    return value


def _env_value(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if not isinstance(value, (str, int, float)):
        raise DevfileError(f"{where} must be a scalar")
    return str(value)


class DevfileResourceCompiler:
    """Callable implementing the DevfileCompiler interface."""

    def __init__(self, config: DevfileConfig | None = None) -> None:
        self._config = config or DevfileConfig()

    def __call__(
        self,
        *,
        processed_devfile: str,
        name: str,
        namespace: str,
        replicas: int,
        domain_template: str,
        labels: dict[str, str],
        annotations: dict[str, str],
        env_secret_names: list[str],
        file_secret_names: list[str],
        logger: logging.Logger,
    ) -> list[Resource]:
        try:
            return self._compile(
                devfile=_load(processed_devfile),
                name=name,
                namespace=namespace,
                replicas=replicas,
                labels=labels,
                annotations=annotations,
                env_secret_names=env_secret_names,
                file_secret_names=file_secret_names,
            )
        except DevfileError as e:
            logger.warning(
                "Failed to compile devfile",
                extra={
                    "event": LogEvent.DEVFILE_INVALID,
                    "component": Component.DEVFILE,
                    "workspace_name": name,
                    "domain_template": domain_template,
                    "error": str(e),
                },
            )
            return []

    def _compile(
        self,
        devfile: dict[str, Any],
        name: str,
        namespace: str,
        replicas: int,
        labels: dict[str, str],
        annotations: dict[str, str],
        env_secret_names: list[str],
        file_secret_names: list[str],
    ) -> list[Resource]:
        components = devfile.get("components") or []
        container_components = [c for c in components if "container" in c]
        volume_components = [c for c in components if "volume" in c]
        if not container_components:
            raise DevfileError("devfile has no container components")

        metadata = {
            "name": name,
            "namespace": namespace,
            "labels": dict(labels),
            "annotations": dict(annotations),
        }

        pvcs: list[Resource] = []
        volumes: list[dict[str, Any]] = []
        for component in volume_components:
            where = f"volume component {component['name']}"
            volume = _mapping(component["volume"], where)
            if volume.get("ephemeral"):
                volumes.append({"name": component["name"], "emptyDir": {}})
                continue
            claim_name = f"{name}-{component['name']}"
            size = _quantity(volume.get("size"), f"{where} size")
            pvcs.append(
                self._persistent_volume_claim(
                    {**metadata, "name": claim_name},
                    size=size or self._config.default_volume_size,
                )
            )
            volumes.append({
                "name": component["name"],
                "persistentVolumeClaim": {"claimName": claim_name},
            })
        volume_names = {v["name"] for v in volumes}

        if file_secret_names:
            volumes.append({
                "name": VARIABLES_VOLUME_NAME,
                "projected": {
                    "defaultMode": VARIABLES_FILE_MODE,
                    "sources": [{"secret": {"name": s}} for s in file_secret_names],
                },
            })

        containers = []
        endpoints: list[dict[str, Any]] = []
        for component in container_components:
            container, container_endpoints = self._container(
                component, volume_names, env_secret_names, bool(file_secret_names)
            )
            containers.append(container)
            endpoints.extend(container_endpoints)

        deployment = {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": metadata,
            "spec": {
                "replicas": replicas,
                "selector": {"matchLabels": dict(labels)},
                "strategy": {"type": "Recreate"},
                "template": {
                    "metadata": {
                        "name": name,
                        "namespace": namespace,
                        "labels": dict(labels),
                        "annotations": dict(annotations),
                    },
                    "spec": {
                        "containers": containers,
                        "volumes": volumes,
                        "securityContext": {
                            "runAsNonRoot": True,
                            "fsGroup": 0,
                            "fsGroupChangePolicy": "OnRootMismatch",
                        },
                    },
                },
            },
        }

        resources: list[Resource] = [*pvcs, deployment]
        if endpoints:
            resources.append(self._service(metadata, labels, endpoints))
        return [stringify_keys(r) for r in resources]

    def _container(
        self,
        component: dict[str, Any],
        volume_names: set[str],
        env_secret_names: list[str],
        mount_variables: bool,
    ) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        where = f"container {component['name']}"
        spec = _mapping(component["container"], where)
        if not _is_name(spec.get("image")):
            raise DevfileError(f"{where} has no image")

        ports = []
        endpoints = []
        for endpoint in _list(spec.get("endpoints"), f"{where} endpoints"):
            if not isinstance(endpoint, dict) or not _is_name(endpoint.get("name")):
                raise DevfileError(f"{where} has an endpoint without a string name")
            target_port = _port(
                endpoint.get("targetPort"), f"{where} endpoint {endpoint['name']} targetPort"
            )
            ports.append({
                "name": endpoint["name"],
                "containerPort": target_port,
                "protocol": "TCP",
            })
            endpoints.append({"name": endpoint["name"], "targetPort": target_port})

        volume_mounts = []
        for mount in _list(spec.get("volumeMounts"), f"{where} volumeMounts"):
            if (
                not isinstance(mount, dict)
                or not _is_name(mount.get("name"))
                or mount["name"] not in volume_names
            ):
                raise DevfileError(f"{where} has an invalid volume mount: {mount!r}")
            path = mount.get("path")
            if path is not None and not _is_name(path):
                raise DevfileError(f"{where} volume mount {mount['name']} path must be a string")
            volume_mounts.append({
                "name": mount["name"],
                "mountPath": path or f"/{mount['name']}",
            })
        if mount_variables:
            volume_mounts.append({
                "name": VARIABLES_VOLUME_NAME,
                "mountPath": self._config.variables_file_mount_path,
            })

        limits = {}
        requests = {}
        for field, bucket, resource in (
            ("memoryLimit", limits, "memory"),
            ("cpuLimit", limits, "cpu"),
            ("memoryRequest", requests, "memory"),
            ("cpuRequest", requests, "cpu"),
        ):
            quantity = _quantity(spec.get(field), f"{where} {field}")
            if quantity is not None:
                bucket[resource] = quantity

        env = []
        for entry in _list(spec.get("env"), f"{where} env"):
            if not isinstance(entry, dict) or not _is_name(entry.get("name")):
                raise DevfileError(f"{where} has an env entry without a string name")
            env.append({
                "name": entry["name"],
                "value": _env_value(entry.get("value"), f"{where} env {entry['name']}"),
            })

        container: dict[str, Any] = {
            "name": component["name"],
            "image": spec["image"],
            "imagePullPolicy": self._config.image_pull_policy,
            "env": env,
            "envFrom": [{"secretRef": {"name": s}} for s in env_secret_names],
            "ports": ports,
            "volumeMounts": volume_mounts,
            "resources": {"limits": limits, "requests": requests},
            "securityContext": {
                "allowPrivilegeEscalation": False,
                "privileged": False,
                "runAsNonRoot": True,
            },
        }
        command = _string_list(spec.get("command"), f"{where} command")
        if command:
            container["command"] = command
        args = _string_list(spec.get("args"), f"{where} args")
        if args:
            container["args"] = args
        return container, endpoints

    def _persistent_volume_claim(self, metadata: dict[str, Any], size: str) -> Resource:
        return {
            "apiVersion": "v1",
            "kind": "PersistentVolumeClaim",
            "metadata": metadata,
            "spec": {
                "accessModes": ["ReadWriteOnce"],
                "resources": {"requests": {"storage": size}},
            },
        }

    def _service(
        self,
        metadata: dict[str, Any],
        labels: dict[str, str],
        endpoints: list[dict[str, Any]],
    ) -> Resource:
        return {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": metadata,
            "spec": {
                "ports": [
                    {
                        "name": e["name"],
                        "port": e["targetPort"],
                        "targetPort": e["targetPort"],
                    }
                    for e in endpoints
                ],
                "selector": dict(labels),
            },
        }


def compile_devfile(**kwargs: Any) -> list[Resource]:
    """Compile with the configured DevfileConfig (see DevfileResourceCompiler)."""
    return DevfileResourceCompiler(get_settings().devfile)(**kwargs)
