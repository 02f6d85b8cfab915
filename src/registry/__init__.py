"""Registry clients, dispatched by registry id.

Registries are queried in the fixed order of Constants.REGISTRY_ORDER;
the ordering policy itself lives in versioning.resolution.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional

from constants import Constants, Registries
from common.result import Err, ErrorKind, Result

from . import clojars, maven

_LOOKUPS: Dict[str, Callable[[str, str], Result]] = {
    Registries.CLOJARS.value: clojars.lookup_latest,
    Registries.MAVEN.value: maven.lookup_latest,
}


def lookup_latest(registry_id: str, group_id: str, artifact_id: str) -> Result:
    """Latest version of ``group_id/artifact_id`` in ``registry_id``."""
    lookup = _LOOKUPS.get(registry_id)
    if lookup is None:
        return Err(ErrorKind.PARSE, {"registry": registry_id, "error": "unknown registry"})
    return lookup(group_id, artifact_id)


class RegistryClient:
    """Ordered set of registries to query; injectable for tests."""

    def __init__(self, registries: Optional[List[str]] = None):
        self.registries = list(registries or Constants.REGISTRY_ORDER)

    def lookup_latest(self, registry_id: str, group_id: str, artifact_id: str) -> Result:
        return lookup_latest(registry_id, group_id, artifact_id)
