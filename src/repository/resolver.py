"""Resolve a normalized repository location to its manifest.

One resolution is a single attempt: adapter selection, default ref lookup,
then manifest fetch. Failures are returned as data on the result so the
validator can render them; nothing is retried here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from common.logging_utils import extra_context, safe_url, Timer

from .errors import ResolutionError
from .provider_registry import ProviderRegistry, provider_registry
from .providers import Manifest, ProviderClient
from .url_normalize import RepositoryLocation

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Outcome of resolving one repository location."""
    location: RepositoryLocation
    driver: Optional[ProviderClient] = None
    root_identifier: Optional[str] = None
    manifest: Optional[Manifest] = None
    canonical_url: Optional[str] = None
    remote_id: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.manifest is not None and self.error is None

    @property
    def error_message(self) -> Optional[str]:
        """Error text as shown to the submitter, prefixed with its class."""
        if self.error is None:
            return None
        return f"[{type(self.error).__name__}] {self.error}"


class VcsResolver:  # pylint: disable=too-few-public-methods
    """Select the adapter for a location and fetch its manifest."""

    def __init__(self, registry: Optional[ProviderRegistry] = None):
        self.registry = registry or provider_registry

    def resolve(self, location: RepositoryLocation) -> ResolutionResult:
        """Resolve ``location``; never raises for adapter failures."""
        result = ResolutionResult(location=location)
        if not location.is_resolvable:
            logger.info(
                "Skipping resolution",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve",
                    outcome=location.problem.value,
                    target=safe_url(location.url)
                )
            )
            return result

        with Timer() as t:
            try:
                driver = self.registry.get_driver(location.url)
                root = driver.root_identifier()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                result.error = exc
                self._log_failure(location, "driver", exc)
                return result

            result.driver = driver
            result.root_identifier = root
            try:
                result.manifest = driver.manifest_at(root)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                result.error = exc
                self._log_failure(location, "manifest", exc)
                return result

        result.canonical_url = driver.canonical_url()
        identity = driver.repository_identity()
        if identity is not None:
            host, repo_id = identity
            result.remote_id = f"{host}/{repo_id}"
        logger.info(
            "Repository resolved",
            extra=extra_context(
                event="resolve",
                component="resolver",
                action="resolve",
                outcome="success",
                target=safe_url(result.canonical_url),
                duration_ms=t.duration_ms()
            )
        )
        return result

    @staticmethod
    def _log_failure(location: RepositoryLocation, stage: str, exc: Exception) -> None:
        expected = isinstance(exc, ResolutionError)
        logger.warning(
            "Repository resolution failed at %s stage: %s",
            stage,
            exc,
            exc_info=not expected,
            extra=extra_context(
                event="resolve",
                component="resolver",
                action=stage,
                outcome=getattr(exc, "kind", "unexpected_error"),
                target=safe_url(location.url)
            )
        )
