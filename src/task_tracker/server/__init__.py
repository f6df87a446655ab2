"""HTTP facade over the task store."""

from .api import create_app

__all__ = ["create_app"]
