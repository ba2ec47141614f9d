"""Tests for calculate_actual_state.

Deployment documents follow what the agent's informer reports for a
workspace Deployment.
"""

import pytest
import yaml

from remotedev.core.domain import States, TerminationProgress
from remotedev.reconcile.input import calculate_actual_state


def deployment(text: str) -> dict:
    return yaml.safe_load(text)


RUNNING = """
spec:
  replicas: 1
status:
  availableReplicas: 1
  conditions:
  - reason: MinimumReplicasAvailable
    type: Available
  - reason: NewReplicaSetAvailable
    type: Progressing
"""

STOPPED = """
spec:
  replicas: 0
status:
  conditions:
  - reason: MinimumReplicasAvailable
    type: Available
  - reason: NewReplicaSetAvailable
    type: Progressing
"""


class TestDeploymentStatus:
    """State derived from spec.replicas and the rollout conditions."""

    def test_running(self) -> None:
        assert calculate_actual_state(deployment(RUNNING)) == States.RUNNING

    def test_stopped(self) -> None:
        assert calculate_actual_state(deployment(STOPPED)) == States.STOPPED

    @pytest.mark.parametrize(
        "reason", ["NewReplicaSetCreated", "FoundNewReplicaSet", "ReplicaSetUpdated"]
    )
    def test_rollout_in_progress_scaled_up_is_starting(self, reason: str) -> None:
        info = {
            "spec": {"replicas": 1},
            "status": {"conditions": [{"reason": reason, "type": "Progressing"}]},
        }

        assert calculate_actual_state(info) == States.STARTING

    def test_rollout_in_progress_scaled_down_is_stopping(self) -> None:
        info = {
            "spec": {"replicas": 0},
            "status": {"conditions": [{"reason": "ReplicaSetUpdated", "type": "Progressing"}]},
        }

        assert calculate_actual_state(info) == States.STOPPING

    def test_progress_deadline_exceeded_is_failed(self) -> None:
        info = deployment("""
spec:
  replicas: 1
status:
  conditions:
  - reason: MinimumReplicasUnavailable
    type: Available
  - reason: ProgressDeadlineExceeded
    type: Progressing
  unavailableReplicas: 1
""")

        assert calculate_actual_state(info) == States.FAILED

    def test_scaled_up_with_unavailable_replica_is_starting(self) -> None:
        info = deployment("""
spec:
  replicas: 1
status:
  conditions:
  - reason: MinimumReplicasUnavailable
    type: Available
  - reason: NewReplicaSetAvailable
    type: Progressing
  unavailableReplicas: 1
""")

        assert calculate_actual_state(info) == States.STARTING

    def test_minimum_replicas_unavailable_without_rollout_is_failed(self) -> None:
        info = {
            "spec": {"replicas": 1},
            "status": {
                "conditions": [
                    {"reason": "MinimumReplicasUnavailable", "type": "Available"},
                ]
            },
        }

        assert calculate_actual_state(info) == States.FAILED


class TestUnknown:
    """Incomplete or unrecognised deployment info is Unknown."""

    @pytest.mark.parametrize(
        "info",
        [
            None,
            {},
            {"status": {"conditions": []}},
            {"spec": {"test": 0}, "status": {"conditions": []}},
            {"spec": {"replicas": 0}},
            {"spec": {"replicas": 0}, "status": {"test": []}},
            {"spec": {"replicas": 0}, "status": {"conditions": [{"type": "Progressing"}]}},
            {
                "spec": {"replicas": 2},
                "status": {"conditions": [{"reason": "ReplicaSetUpdated", "type": "Progressing"}]},
            },
            {
                "spec": {"replicas": 0},
                "status": {
                    "conditions": [
                        {"reason": "unrecognized", "type": "Available"},
                        {"reason": "unrecognized", "type": "Progressing"},
                    ]
                },
            },
            {
                "spec": {"replicas": 1},
                "status": {"conditions": [{"reason": "test", "type": "test"}]},
            },
        ],
    )
    def test_unknown(self, info) -> None:
        assert calculate_actual_state(info) == States.UNKNOWN


class TestTerminationAndErrors:
    """Termination progress and error details take precedence."""

    ERROR = {"error_type": "applier", "error_message": "error encountered while applying k8s configs"}

    def test_terminating(self) -> None:
        state = calculate_actual_state(None, termination_progress=TerminationProgress.TERMINATING)

        assert state == States.TERMINATING

    def test_terminated(self) -> None:
        state = calculate_actual_state(None, termination_progress=TerminationProgress.TERMINATED)

        assert state == States.TERMINATED

    def test_error_details(self) -> None:
        assert calculate_actual_state(deployment(RUNNING), latest_error_details=self.ERROR) == States.ERROR

    def test_terminated_wins_over_error(self) -> None:
        state = calculate_actual_state(
            None,
            termination_progress=TerminationProgress.TERMINATED,
            latest_error_details=self.ERROR,
        )

        assert state == States.TERMINATED

    def test_error_wins_over_terminating(self) -> None:
        state = calculate_actual_state(
            None,
            termination_progress=TerminationProgress.TERMINATING,
            latest_error_details=self.ERROR,
        )

        assert state == States.ERROR
