"""Tests for Workspace record helpers."""

from datetime import UTC, datetime, timedelta

from remotedev.core.domain import States
from remotedev.core.models import Workspace

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def make_workspace(**overrides) -> Workspace:
    fields = {
        "id": 1,
        "name": "ws",
        "namespace": "ns",
        "agent_id": 1,
        "processed_devfile": "",
        "dns_zone": "example.dev",
        "created_at": NOW,
        "desired_state_updated_at": NOW,
    }
    fields.update(overrides)
    return Workspace(**fields)


class TestDesiredStateTracking:
    def test_never_responded_counts_as_updated(self) -> None:
        assert make_workspace().desired_state_updated_more_recently_than_last_response_to_agent()

    def test_update_after_response(self) -> None:
        workspace = make_workspace(responded_to_agent_at=NOW - timedelta(seconds=1))

        assert workspace.desired_state_updated_more_recently_than_last_response_to_agent()

    def test_response_after_update(self) -> None:
        workspace = make_workspace(responded_to_agent_at=NOW)

        assert not workspace.desired_state_updated_more_recently_than_last_response_to_agent()

    def test_set_desired_state_bumps_timestamp(self) -> None:
        workspace = make_workspace(responded_to_agent_at=NOW)
        later = NOW + timedelta(minutes=1)

        workspace.set_desired_state(States.STOPPED, later)

        assert workspace.desired_state == States.STOPPED
        assert workspace.desired_state_updated_at == later
        assert workspace.desired_state_updated_more_recently_than_last_response_to_agent()


class TestExpiry:
    def test_not_expired_before_deadline(self) -> None:
        workspace = make_workspace(max_hours_before_termination=24)

        assert not workspace.is_expired(NOW + timedelta(hours=23, minutes=59))

    def test_expired_at_deadline(self) -> None:
        workspace = make_workspace(max_hours_before_termination=24)

        assert workspace.is_expired(NOW + timedelta(hours=24))
