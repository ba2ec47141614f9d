"""Agent report interpretation."""

from remotedev.reconcile.input.actual_state import calculate_actual_state

__all__ = ["calculate_actual_state"]
