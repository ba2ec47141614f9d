"""Remote development workspace reconciler."""

__version__ = "0.1.0"
