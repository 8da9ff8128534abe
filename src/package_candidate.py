"""Package candidate: the entity being built from a submitted repository URL."""
from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from analysis.ownership import PackageLookup, check_ownership
from analysis.repository_validator import RepositoryValidator
from analysis.violations import Violation
from common.logging_utils import extra_context, safe_url
from repository.resolver import ResolutionResult, VcsResolver
from repository.url_normalize import RepositoryLocation, browsable_url, inspect_location
from versioning.models import VersionIndex, VersionRecord
from versioning.sorter import sort_versions

logger = logging.getLogger(__name__)


class PackageNameError(LookupError):
    """Raised when the name of a candidate is read before it was assigned."""


class PackageCandidate:
    """Name, repository and versions of a package under submission.

    Setting the repository normalizes and resolves it once; the cached
    ResolutionResult is what validation inspects, so a validation pass never
    fetches the manifest again.
    """

    def __init__(self, name: str = "", maintainers: Optional[Iterable[Any]] = None):
        self._name = name
        self.maintainers: List[Any] = list(maintainers or [])
        self.location: Optional[RepositoryLocation] = None
        self.resolution: Optional[ResolutionResult] = None
        self.repository_modified = False
        self.remote_id: Optional[str] = None
        self._tag_pattern: Optional[str] = None
        self._versions = VersionIndex([])

    @classmethod
    def from_repository(cls, url: str, resolver: Optional[VcsResolver] = None, **kwargs: Any) -> "PackageCandidate":
        candidate = cls(**kwargs)
        candidate.set_repository(url, resolver=resolver)
        return candidate

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    def require_name(self) -> str:
        if not self._name:
            raise PackageNameError(
                "This should not be called on an invalid package object which was not initialized with a name yet"
            )
        return self._name

    @property
    def vendor(self) -> str:
        return re.sub(r"/.*$", "", self._name, flags=re.DOTALL)

    @property
    def package_name(self) -> str:
        return re.sub(r"^[^/]*/", "", self._name)

    @property
    def repository(self) -> Optional[str]:
        return self.location.url if self.location is not None else None

    @property
    def browsable_repository(self) -> Optional[str]:
        """Get a user-browsable version of the repository URL."""
        if self.location is None:
            return None
        return browsable_url(self.location.url)

    def set_repository(self, url: str, resolver: Optional[VcsResolver] = None) -> ResolutionResult:
        """Normalize and resolve ``url``, adopting the manifest name when unset.

        Args:
            url: Repository location as submitted.
            resolver: Resolver to use (defaults to a VcsResolver on the global registry).

        Returns:
            The resolution result, also kept on ``self.resolution``.
        """
        self.repository_modified = True
        self.remote_id = None
        location = inspect_location(url)
        self.location = location

        result = (resolver or VcsResolver()).resolve(location)
        self.resolution = result

        manifest = result.manifest
        if manifest is not None and manifest.name is not None and not self._name:
            self._name = manifest.name.strip()
        if result.succeeded:
            if result.canonical_url:
                self.location = dataclasses.replace(location, url=result.canonical_url)
            self.remote_id = result.remote_id

        logger.info(
            "Repository set",
            extra=extra_context(
                event="set_repository",
                component="package_candidate",
                outcome="resolved" if result.succeeded else "unresolved",
                target=safe_url(self.location.url)
            )
        )
        return result

    def mark_accepted(self) -> None:
        """Record that the current repository passed validation and was stored."""
        self.repository_modified = False

    def validate(
        self,
        lookup: Optional[PackageLookup] = None,
        validator: Optional[RepositoryValidator] = None,
    ) -> List[Violation]:
        """Collect ownership violations (when a lookup is given) and the chain result."""
        violations: List[Violation] = []
        if lookup is not None:
            violations.extend(check_ownership(self, lookup))
        violations.extend((validator or RepositoryValidator()).validate(self))
        return violations

    # Versions

    def set_versions(self, records: Iterable[VersionRecord]) -> None:
        self._versions = VersionIndex(records)

    @property
    def versions(self) -> List[VersionRecord]:
        return list(self._versions)

    def get_version(self, normalized_version: str) -> Optional[VersionRecord]:
        return self._versions.get(normalized_version)

    def sorted_versions(self) -> List[VersionRecord]:
        return sort_versions(self._versions)

    @property
    def tag_pattern(self) -> Optional[str]:
        """If defined, tags/versions must match this pattern or they will be ignored."""
        return self._tag_pattern

    @tag_pattern.setter
    def tag_pattern(self, pattern: Optional[str]) -> None:
        self._tag_pattern = pattern or None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "repository": self.repository,
            "remote_id": self.remote_id,
        }
