"""Maven Central registry package.

- client.py: latest version lookup via the Maven Central search API
"""

from .client import lookup_latest  # noqa: F401

__all__ = ["lookup_latest"]
