"""Clojars registry package.

- client.py: latest release lookup via the Clojars artifact API
"""

from .client import lookup_latest  # noqa: F401

__all__ = ["lookup_latest"]
