"""Ordering of version records, most relevant first.

Branch aliases let a development branch sort as the version it aliases,
other ``dev-*`` branches sink to a low sentinel, and the repository's default
branch is pulled to the top. Numeric ordering uses ``packaging.version``.
"""

import functools
import re
from typing import Iterable, List, Optional, Tuple, Union

from packaging.version import InvalidVersion, Version

from constants import Constants

from .models import VersionRecord

_ALIAS_DEV_RE = re.compile(r"(\.x)?-dev$")
# Composer patch-level stability maps onto post-releases
_PATCH_LEVEL_RE = re.compile(r"[-_.]?(?:patch|pl|p)[-_.]?(\d*)$", re.IGNORECASE)

SortKey = Tuple[int, Union[Version, str]]


def effective_version(record: VersionRecord) -> str:
    """Return the version string a record is ordered by."""
    version = record.normalized_version

    # use branch alias for sorting if one is provided
    alias = record.branch_aliases.get(version)
    if isinstance(alias, str):
        version = _ALIAS_DEV_RE.sub(Constants.BRANCH_ALIAS_MAX, alias)

    if version.startswith("dev-"):
        version = Constants.DEV_SENTINEL
    return version


def parse_version(version: str) -> Optional[Version]:
    """Parse a normalized version, or return None when it is not a version."""
    candidate = _PATCH_LEVEL_RE.sub(lambda m: ".post" + (m.group(1) or "0"), version)
    try:
        return Version(candidate)
    except InvalidVersion:
        return None


def _sort_key(version: str) -> SortKey:
    parsed = parse_version(version)
    if parsed is None:
        return (0, version)
    return (1, parsed)


def _released_key(record: VersionRecord) -> float:
    if record.released_at is None:
        return float("-inf")
    return record.released_at.timestamp()


def _tie_break(a: VersionRecord, b: VersionRecord) -> int:
    """Newest release first, then the normalized strings ascending."""
    a_released, b_released = _released_key(a), _released_key(b)
    if a_released == b_released:
        return (a.normalized_version > b.normalized_version) - (a.normalized_version < b.normalized_version)
    return 1 if b_released > a_released else -1


def compare_versions(a: VersionRecord, b: VersionRecord) -> int:
    """Comparator for descending relevance: negative when ``a`` goes first.

    A default branch that sorts at the dev sentinel always goes first. The
    left operand is checked before the right one, so two such records
    compare as -1 in both directions.
    """
    a_version = effective_version(a)
    b_version = effective_version(b)

    if a_version == Constants.DEV_SENTINEL and a.is_default_branch:
        return -1
    if b_version == Constants.DEV_SENTINEL and b.is_default_branch:
        return 1

    if a_version == b_version:
        return _tie_break(a, b)

    a_key, b_key = _sort_key(a_version), _sort_key(b_version)
    if a_key > b_key:
        return -1
    if a_key < b_key:
        return 1
    # Distinct strings naming the same version, e.g. "1.0" and "1.0.0"
    return _tie_break(a, b)


def sort_versions(records: Iterable[VersionRecord]) -> List[VersionRecord]:
    """Return ``records`` ordered most relevant first (stable)."""
    return sorted(records, key=functools.cmp_to_key(compare_versions))
