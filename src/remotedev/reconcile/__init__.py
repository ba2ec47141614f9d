"""Workspace reconciliation: agent reports in, desired k8s config out."""
