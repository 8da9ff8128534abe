"""Repository and package name validation chain.

Each step inspects the candidate and either returns ``None`` (continue) or
the single Violation that ends the pass. Only the first violation is ever
reported per pass.
"""

import logging
from typing import Callable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from repository.errors import ManifestParseError, NoDriverError, TransportError
from repository.url_normalize import LocationProblem

from .name_policy import DEFAULT_NAME_POLICY, NAME_PATTERN_TEXT, RESERVED_NAMES, NamePolicy
from .violations import Violation, ViolationKind, escape

logger = logging.getLogger(__name__)

_GENERIC_LOCATION_KIND = {
    LocationProblem.LOCAL_PATH: ViolationKind.UNPARSEABLE_URL,
    LocationProblem.UNPARSEABLE: ViolationKind.UNPARSEABLE_URL,
}


class RepositoryValidator:
    """Ordered, short-circuiting validation of a submitted repository."""

    def __init__(self, policy: Optional[NamePolicy] = None):
        self.policy = policy or DEFAULT_NAME_POLICY

    def validate(self, candidate) -> List[Violation]:
        """Run the chain against ``candidate``.

        Args:
            candidate: PackageCandidate-like object exposing name, location,
                resolution and repository_modified.

        Returns:
            An empty list, or a list holding the first violation found.
        """
        # Repository was not set or modified since it was accepted
        if not candidate.repository_modified and candidate.name:
            return []

        steps: List[Callable[[object], Optional[Violation]]] = [
            self._check_location,
            self._check_manifest_fetch,
            self._check_name_present,
            self._check_syntax,
            self._check_blocklist,
            self._check_reserved,
            self._check_suffix,
            self._check_uppercase,
            self._check_name_assigned,
        ]
        for step in steps:
            violation = step(candidate)
            if violation is not None:
                logger.info(
                    "Repository rejected: %s",
                    violation.kind.value,
                    extra=extra_context(
                        event="validation",
                        component="repository_validator",
                        action=step.__name__.lstrip("_"),
                        outcome=violation.kind.value
                    )
                )
                return [violation]

        if is_debug_enabled(logger):
            logger.debug(
                "Repository accepted",
                extra=extra_context(
                    event="validation",
                    component="repository_validator",
                    action="validate",
                    outcome="accepted"
                )
            )
        return []

    @staticmethod
    def _manifest_name(candidate) -> str:
        return candidate.resolution.manifest.name

    @staticmethod
    def _error_kind(error: Exception) -> ViolationKind:
        """Classify an error raised before an adapter was obtained."""
        if isinstance(error, TransportError):
            return ViolationKind.TRANSPORT_FAILURE
        if isinstance(error, ManifestParseError):
            return ViolationKind.MANIFEST_PARSE_ERROR
        return ViolationKind.NO_ADAPTER_FOUND

    def _check_location(self, candidate) -> Optional[Violation]:
        resolution = candidate.resolution
        if resolution is not None and resolution.driver is not None:
            return None

        location = candidate.location
        problem = location.problem if location is not None else None
        if problem == LocationProblem.INSECURE_SCHEME:
            return Violation(
                ViolationKind.INSECURE_SCHEME,
                "Non-secure HTTP URLs are not supported, make sure you use an HTTPS or SSH URL",
            )
        if problem == LocationProblem.EMBEDDED_CREDENTIALS:
            return Violation(
                ViolationKind.EMBEDDED_CREDENTIALS,
                "URLs with user@host are not supported, use a read-only public URL",
            )
        error = resolution.error if resolution is not None else None
        if error is not None and not isinstance(error, NoDriverError):
            return Violation(
                self._error_kind(error),
                "Uncaught Exception: " + escape(resolution.error_message),
            )
        return Violation(
            _GENERIC_LOCATION_KIND.get(problem, ViolationKind.NO_ADAPTER_FOUND),
            "No valid/supported repository was found at the given URL",
        )

    def _check_manifest_fetch(self, candidate) -> Optional[Violation]:
        resolution = candidate.resolution
        error = resolution.error
        if error is None:
            return None
        if isinstance(error, TransportError) and error.not_found:
            return Violation(
                ViolationKind.MANIFEST_NOT_FOUND,
                f"No {Constants.MANIFEST_FILE} was found in the "
                f"{escape(resolution.root_identifier or '')} branch.",
            )
        kind = (
            ViolationKind.TRANSPORT_FAILURE
            if isinstance(error, TransportError)
            else ViolationKind.MANIFEST_PARSE_ERROR
        )
        return Violation(
            kind,
            f"We had problems parsing your {Constants.MANIFEST_FILE} file, "
            f"the parser reports: {escape(str(error))}",
        )

    def _check_name_present(self, candidate) -> Optional[Violation]:
        if candidate.resolution.manifest is not None and self._manifest_name(candidate):
            return None
        return Violation(
            ViolationKind.MANIFEST_MISSING_NAME,
            f"The package name was not found in the {Constants.MANIFEST_FILE}, "
            "make sure there is a name present.",
        )

    def _check_syntax(self, candidate) -> Optional[Violation]:
        name = self._manifest_name(candidate)
        if self.policy.is_valid_syntax(name):
            return None
        return Violation(
            ViolationKind.NAME_SYNTAX_INVALID,
            f"The package name {escape(name)} is invalid, it should have a vendor name, "
            "a forward slash, and a package name. The vendor and package name can be "
            "words separated by -, . or _. The complete name should match "
            f'"{NAME_PATTERN_TEXT}".',
        )

    def _check_blocklist(self, candidate) -> Optional[Violation]:
        name = self._manifest_name(candidate)
        if not self.policy.is_blocked(name):
            return None
        return Violation(
            ViolationKind.NAME_BLOCKED,
            f"The package name {escape(name)} is blocked, if you think this is a mistake "
            "please get in touch with us.",
        )

    def _check_reserved(self, candidate) -> Optional[Violation]:
        name = self._manifest_name(candidate)
        if not self.policy.is_reserved(name):
            return None
        return Violation(
            ViolationKind.NAME_RESERVED,
            f"The package name {escape(name)} is reserved, package and vendor names can not "
            f"match any of: {', '.join(RESERVED_NAMES)}.",
        )

    def _check_suffix(self, candidate) -> Optional[Violation]:
        name = self._manifest_name(candidate)
        if not self.policy.has_invalid_suffix(name):
            return None
        return Violation(
            ViolationKind.NAME_INVALID_SUFFIX,
            f"The package name {escape(name)} is invalid, package names can not end in .json, "
            "consider renaming it or perhaps using a -json suffix instead.",
        )

    def _check_uppercase(self, candidate) -> Optional[Violation]:
        name = self._manifest_name(candidate)
        if not self.policy.has_uppercase(name):
            return None
        return Violation(
            ViolationKind.NAME_HAS_UPPERCASE,
            f"The package name {escape(name)} is invalid, it should not contain uppercase "
            f"characters. We suggest using {self.policy.suggest_name(name)} instead.",
        )

    @staticmethod
    def _check_name_assigned(candidate) -> Optional[Violation]:
        if candidate.name:
            return None
        return Violation(
            ViolationKind.NAME_UNEXPECTED_EMPTY,
            "An unexpected error has made our parser fail to find a package name in your "
            "repository, if you think this is incorrect please try again",
        )
