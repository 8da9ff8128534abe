"""Checks against already-registered packages: name uniqueness and vendor ownership.

The lookups are supplied by the persistence layer through ``PackageLookup``;
a ``NoResultError`` from a lookup means there is nothing to conflict with.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol

from common.logging_utils import extra_context
from constants import Constants

from .violations import Violation, ViolationKind, escape

logger = logging.getLogger(__name__)


class NoResultError(LookupError):
    """Raised by a lookup that found nothing."""


class PackageLookup(Protocol):
    """Read access to registered packages."""

    def find_by_name(self, name: str) -> Optional[Any]:
        ...

    def is_vendor_taken(self, vendor: str, excluding_maintainer: Optional[Any]) -> bool:
        ...


def check_unique(name: str, lookup: PackageLookup) -> Optional[Violation]:
    """Reject a name already used by another package."""
    if not name:
        return None
    try:
        existing = lookup.find_by_name(name)
    except NoResultError:
        return None
    if not existing:
        return None
    url = Constants.PACKAGE_URL_TEMPLATE.format(name=name)
    return Violation(
        ViolationKind.NAME_NOT_UNIQUE,
        f'A package with the name <a href="{escape(url)}">{escape(name)}</a> already exists.',
    )


def check_vendor_writable(
    vendor: str, maintainer: Optional[Any], lookup: PackageLookup
) -> Optional[Violation]:
    """Reject a vendor namespace claimed by a different set of maintainers."""
    if not vendor:
        return None
    try:
        taken = lookup.is_vendor_taken(vendor, maintainer)
    except NoResultError:
        return None
    if not taken:
        return None
    url = Constants.VENDOR_URL_TEMPLATE.format(vendor=vendor)
    vendor_html = escape(vendor)
    return Violation(
        ViolationKind.VENDOR_NOT_WRITABLE,
        f'The vendor name "{vendor_html}" was already claimed by someone else on {Constants.SITE_NAME}. '
        "You may ask them to add your package and give you maintainership access. "
        "If they add you as a maintainer on any package in that vendor namespace, "
        "you will then be able to add new packages in that namespace. "
        "The packages already in that vendor namespace can be found at "
        f'<a href="{escape(url)}">{vendor_html}</a>. '
        "If those packages belong to you but were submitted by someone else, you can "
        f'<a href="mailto:{Constants.CONTACT_EMAIL}">contact us</a> to resolve the issue.',
    )


def check_ownership(candidate, lookup: PackageLookup) -> List[Violation]:
    """Run both independent checks for ``candidate`` and collect violations."""
    violations = []
    maintainer = candidate.maintainers[0] if candidate.maintainers else None
    for violation in (
        check_unique(candidate.name, lookup),
        check_vendor_writable(candidate.vendor, maintainer, lookup),
    ):
        if violation is not None:
            logger.info(
                "Ownership check failed: %s",
                violation.kind.value,
                extra=extra_context(
                    event="decision",
                    component="ownership",
                    action="check_ownership",
                    outcome=violation.kind.value,
                ),
            )
            violations.append(violation)
    return violations
