"""Shared HTTP helpers used by the repository adapters.

Encapsulates request/timeout error handling so adapters avoid duplicating
try/except blocks. Every call is a single attempt: retrying is left to the
caller resubmitting a repository.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

# Status reported when no HTTP response was received at all
NO_RESPONSE = 0


def _default_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT}
    if headers:
        merged.update(headers)
    return merged


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform a GET request with timeout handling and DEBUG traces.

    Returns:
        Tuple of (status_code, headers_dict, body_text). On transport
        failure the status is ``NO_RESPONSE`` and the body holds the error.
    """
    safe_target = safe_url(url)
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
                timeout=Constants.REQUEST_TIMEOUT,
                headers=_default_headers(headers),
                **kwargs
            )
        except requests.Timeout:
            logger.warning(
                "HTTP timeout",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="timeout",
                    target=safe_target
                )
            )
            return NO_RESPONSE, {}, f"Request timed out after {Constants.REQUEST_TIMEOUT} seconds"
        except requests.RequestException as exc:  # includes ConnectionError
            logger.warning(
                "HTTP request exception",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="request_exception",
                    target=safe_target
                )
            )
            return NO_RESPONSE, {}, f"Request failed: {exc}"

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success" if response.status_code < 400 else "error_status",
                status_code=response.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target
            )
        )
    return response.status_code, dict(response.headers), response.text
