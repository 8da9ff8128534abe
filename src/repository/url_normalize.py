"""Repository URL normalization.

Rewrites the SSH, ``git://`` and browse-style variants of the supported
hosting families into one public HTTPS form, and classifies locations that
must not be resolved at all (local paths, plain HTTP, embedded credentials,
unparseable strings). Everything here is pure string work.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LocationProblem(Enum):
    """Reasons a repository location is not handed to the resolver."""

    LOCAL_PATH = "local_path"
    INSECURE_SCHEME = "insecure_scheme"
    EMBEDDED_CREDENTIALS = "embedded_credentials"
    UNPARSEABLE = "unparseable"


_LOCAL_PATH_RE = re.compile(r"^(\.|[a-z]:|/)", re.IGNORECASE)

# (pattern, replacement) pairs applied in order; each one is idempotent
_REWRITES = [
    # GitHub
    (re.compile(r"^git@github\.com:", re.IGNORECASE), "https://github.com/"),
    (re.compile(r"^git://github\.com/", re.IGNORECASE), "https://github.com/"),
    (re.compile(r"^(https://github\.com/.*?)(?:\.git)+$", re.IGNORECASE), r"\1"),
    # GitLab
    (re.compile(r"^git@gitlab\.com:", re.IGNORECASE), "https://gitlab.com/"),
    (re.compile(r"^(https://gitlab\.com/.*?)(?:\.git)+$", re.IGNORECASE), r"\1"),
    # Bitbucket
    (re.compile(r"^git@+bitbucket\.org:", re.IGNORECASE), "https://bitbucket.org/"),
    (re.compile(r"^bitbucket\.org:", re.IGNORECASE), "https://bitbucket.org/"),
    (re.compile(r"^https://[a-z0-9_-]*@bitbucket\.org/", re.IGNORECASE), "https://bitbucket.org/"),
    (
        re.compile(r"^(https://bitbucket\.org/[^/]+/[^/]+?)(?:\.git)?/src/.*$", re.IGNORECASE),
        r"\1.git",
    ),
]

_SCHEME_RE = re.compile(r"^(https?|git|svn)://", re.IGNORECASE)
_INSECURE_RE = re.compile(r"^http://")
_CREDENTIALS_RE = re.compile(r"https?://.+@")
_VALID_SYNTAX_RE = re.compile(
    r"""^(
        [a-z0-9][^@\s]+@[a-z0-9\-_.]+:\S+
        | [a-z0-9]+://\S+
    )\Z""",
    re.VERBOSE,
)

_REF_PATTERNS = [
    re.compile(r"^[a-z0-9+]+://(?:[^/@]*@)?(?P<host>[^/:]+)(?::\d+)?/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$",
               re.IGNORECASE),
    re.compile(r"^[^@\s]+@(?P<host>[^:]+):/?(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$"),
]

_BITBUCKET_ANY_RE = re.compile(r"(://|@)bitbucket\.org[:/]", re.IGNORECASE)
_BITBUCKET_BROWSABLE_RE = re.compile(
    r"^(?:git@|https://|git://)bitbucket\.org[:/](.+?)(?:\.git)?$", re.IGNORECASE
)
_GITHUB_BROWSABLE_RE = re.compile(r"^(git://github\.com/|git@github\.com:)")


@dataclass(frozen=True)
class RepoRef:
    """Host/owner/repository triple extracted from a normalized URL."""
    host: str
    owner: str
    repo: str


@dataclass(frozen=True)
class RepositoryLocation:
    """A submitted repository URL after normalization."""
    raw: str
    url: str
    problem: Optional[LocationProblem] = None

    @property
    def is_resolvable(self) -> bool:
        return self.problem is None


def is_local_path(url: str) -> bool:
    """Return True for strings that look like filesystem paths."""
    return bool(_LOCAL_PATH_RE.match(url))


def normalize_repo_url(url: str) -> str:
    """Return the canonical form of a repository URL.

    Local filesystem paths and strings no rule recognizes come back
    unchanged.
    """
    if is_local_path(url):
        return url
    for pattern, replacement in _REWRITES:
        url = pattern.sub(replacement, url)
    return _SCHEME_RE.sub(lambda m: m.group(1).lower() + "://", url)


def inspect_location(raw: str) -> RepositoryLocation:
    """Normalize ``raw`` and flag anything that must not be resolved."""
    if is_local_path(raw):
        return RepositoryLocation(raw=raw, url=raw, problem=LocationProblem.LOCAL_PATH)

    url = normalize_repo_url(raw)
    problem = None
    if _INSECURE_RE.match(url):
        problem = LocationProblem.INSECURE_SCHEME
    elif _CREDENTIALS_RE.search(url):
        problem = LocationProblem.EMBEDDED_CREDENTIALS
    elif not _VALID_SYNTAX_RE.match(url):
        problem = LocationProblem.UNPARSEABLE
    return RepositoryLocation(raw=raw, url=url, problem=problem)


def parse_repo_ref(url: str) -> Optional[RepoRef]:
    """Split a normalized ``scheme://host/owner/repo`` or SSH URL."""
    for pattern in _REF_PATTERNS:
        m = pattern.match(url)
        if m:
            return RepoRef(host=m.group("host").lower(), owner=m.group("owner"), repo=m.group("repo"))
    return None


def browsable_url(url: str) -> str:
    """Return a URL a person can open in a browser."""
    if _BITBUCKET_ANY_RE.search(url):
        return _BITBUCKET_BROWSABLE_RE.sub(r"https://bitbucket.org/\1", url)
    return _GITHUB_BROWSABLE_RE.sub("https://github.com/", url)
