"""Maven Central client: latest published version of a group/artifact."""
from __future__ import annotations

import logging

from constants import Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, Timer, safe_url
from common.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


def lookup_latest(group_id: str, artifact_id: str, url: str = Constants.REGISTRY_URL_MAVEN) -> Result:
    """Query the Maven Central search API for the latest version.

    Args:
        group_id (str): Maven groupId.
        artifact_id (str): Maven artifactId.
        url (str, optional): Search endpoint. Defaults to Constants.REGISTRY_URL_MAVEN.

    Returns:
        Result: Ok(version string) or Err(IO) carrying the HTTP status.
    """
    payload = {
        "q": f'g:"{group_id}" AND a:"{artifact_id}"',
        "rows": 1,
        "wt": "json",
    }
    headers = {"Accept": "application/json"}

    with Timer() as timer:
        status, _, data = http_client.get_json(url, params=payload, headers=headers)

    if status != 200:
        logger.debug(
            "HTTP non-200 handled",
            extra=extra_context(
                event="http_response",
                outcome="handled_non_2xx",
                status_code=status,
                duration_ms=timer.duration_ms(),
                target=safe_url(url),
                package_manager="maven"
            )
        )
        return Err(ErrorKind.IO, {"registry": "maven", "status": status,
                                  "library": f"{group_id}/{artifact_id}"})

    latest = None
    response = data.get("response") if isinstance(data, dict) else None
    docs = response.get("docs") if isinstance(response, dict) else None
    if isinstance(docs, list) and docs and isinstance(docs[0], dict):
        latest = docs[0].get("latestVersion")
    if not latest:
        return Err(ErrorKind.IO, {"registry": "maven", "error": "no latest version",
                                  "library": f"{group_id}/{artifact_id}"})

    if is_debug_enabled(logger):
        logger.debug(
            "Resolved latest version",
            extra=extra_context(
                event="resolve",
                outcome="success",
                duration_ms=timer.duration_ms(),
                package_manager="maven",
                version=latest
            )
        )
    return Ok(str(latest))
