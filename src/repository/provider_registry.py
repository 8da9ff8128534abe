"""Registry selecting the repository adapter for a normalized URL."""
from __future__ import annotations

import logging
from typing import List, Optional, Type

from common.logging_utils import extra_context, is_debug_enabled, safe_url

from .bitbucket import BitbucketDriver
from .errors import NoDriverError
from .github import GitHubDriver
from .gitlab import GitLabDriver
from .providers import ProviderClient

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Ordered collection of adapter classes; the first match wins."""

    def __init__(self, drivers: Optional[List[Type[ProviderClient]]] = None):
        self._drivers: List[Type[ProviderClient]] = list(
            drivers if drivers is not None else (GitHubDriver, GitLabDriver, BitbucketDriver)
        )

    def register_driver(self, driver: Type[ProviderClient]) -> None:
        """Register an additional adapter class, checked after the built-ins.

        Args:
            driver: ProviderClient subclass.
        """
        self._drivers.append(driver)

    def get_driver(self, url: str) -> ProviderClient:
        """Instantiate the adapter able to handle ``url``.

        Raises:
            NoDriverError: If no registered adapter recognizes the URL.
        """
        for driver in self._drivers:
            ref = driver.supports(url)
            if ref is not None:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Adapter selected",
                        extra=extra_context(
                            event="decision",
                            component="provider_registry",
                            action="get_driver",
                            outcome=driver.family.value,
                            target=safe_url(url)
                        )
                    )
                return driver(url, ref)
        raise NoDriverError(url)


# Global registry instance
provider_registry = ProviderRegistry()
