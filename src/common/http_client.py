"""Shared HTTP helpers used by the registry clients.

Encapsulates request/timeout error handling so registry modules avoid
duplicating try/except blocks. Each call performs exactly one request; a
transport failure is reported as status 0 rather than raised.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

# Responses cached for the lifetime of one invocation
_http_cache: Dict[str, Tuple[Any, float]] = {}
HTTP_CACHE_TTL_SEC = 300


def _get_cache_key(method: str, url: str, params: Optional[Dict[str, Any]],
                   headers: Optional[Dict[str, str]] = None) -> str:
    """Generate cache key from request parameters."""
    params_str = str(sorted(params.items())) if params else ""
    headers_str = str(sorted(headers.items())) if headers else ""
    return f"{method}:{url}:{params_str}:{headers_str}"


def _is_cache_valid(cache_entry: Tuple[Any, float]) -> bool:
    """Check if cache entry is still valid."""
    _, cached_time = cache_entry
    return time.time() - cached_time < HTTP_CACHE_TTL_SEC


def clear_cache() -> None:
    """Drop all cached responses."""
    _http_cache.clear()


def robust_get(
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Tuple[int, Dict[str, str], str]:
    """Perform a single GET request with timeout and caching.

    Returns:
        Tuple of (status_code, headers, text); status_code is 0 and text
        holds the error message when the request could not be completed.
    """
    cache_key = _get_cache_key('GET', url, params, headers)
    safe_target = safe_url(url)

    if cache_key in _http_cache and _is_cache_valid(_http_cache[cache_key]):
        cached_data, _ = _http_cache[cache_key]
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP cache hit",
                extra=extra_context(
                    event="cache_hit",
                    component="http_client",
                    action="GET",
                    target=safe_target
                )
            )
        return cached_data

    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target
                )
            )
        try:
            response = requests.get(
                url,
                params=params,
                headers=headers,
                timeout=timeout or Constants.REQUEST_TIMEOUT,
            )
        except requests.Timeout:
            logger.debug(
                "HTTP timeout",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="timeout",
                    target=safe_target
                )
            )
            return 0, {}, f"Request timed out after {timeout or Constants.REQUEST_TIMEOUT} seconds"
        except requests.RequestException as exc:  # includes ConnectionError
            logger.debug(
                "HTTP request exception",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="request_exception",
                    target=safe_target
                )
            )
            return 0, {}, f"Request failed: {exc}"

    if response.status_code < 500:  # Don't cache server errors
        cache_data = (response.status_code, dict(response.headers), response.text)
        _http_cache[cache_key] = (cache_data, time.time())

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                status_code=response.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target
            )
        )
    return response.status_code, dict(response.headers), response.text


def get_json(
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response.

    Args:
        url: Target URL
        params: Optional query parameters
        headers: Optional request headers
        timeout: Override for Constants.REQUEST_TIMEOUT

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(
        url, params=params, headers=headers, timeout=timeout
    )

    if status_code == 200 and text:
        try:
            return status_code, response_headers, json.loads(text)
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        status_code=status_code,
                        target=safe_url(url)
                    )
                )
            return status_code, response_headers, None

    return status_code, response_headers, None
