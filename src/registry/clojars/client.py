"""Clojars client: latest release of a group/artifact."""
from __future__ import annotations

import logging

from constants import Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, Timer, safe_url
from common.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


def lookup_latest(group_id: str, artifact_id: str, url: str = Constants.REGISTRY_URL_CLOJARS) -> Result:
    """Query the Clojars artifact API for ``latest_release``.

    Args:
        group_id (str): Clojars group.
        artifact_id (str): Clojars artifact.
        url (str, optional): API base. Defaults to Constants.REGISTRY_URL_CLOJARS.

    Returns:
        Result: Ok(version string) or Err(IO) carrying the HTTP status.
    """
    fullurl = f"{url}{group_id}/{artifact_id}"
    headers = {"Accept": "application/json"}

    with Timer() as timer:
        status, _, data = http_client.get_json(fullurl, headers=headers)

    if status != 200:
        logger.debug(
            "HTTP non-200 handled",
            extra=extra_context(
                event="http_response",
                outcome="handled_non_2xx",
                status_code=status,
                duration_ms=timer.duration_ms(),
                target=safe_url(fullurl),
                package_manager="clojars"
            )
        )
        return Err(ErrorKind.IO, {"registry": "clojars", "status": status,
                                  "library": f"{group_id}/{artifact_id}"})

    latest = data.get("latest_release") if isinstance(data, dict) else None
    if not latest:
        return Err(ErrorKind.IO, {"registry": "clojars", "error": "no latest version",
                                  "library": f"{group_id}/{artifact_id}"})

    if is_debug_enabled(logger):
        logger.debug(
            "Resolved latest version",
            extra=extra_context(
                event="resolve",
                outcome="success",
                duration_ms=timer.duration_ms(),
                package_manager="clojars",
                version=latest
            )
        )
    return Ok(str(latest))
