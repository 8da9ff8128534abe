"""Structured validation failures reported back to the submitter."""

import html
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from constants import Constants


class ViolationKind(Enum):
    """Classification of every violation the validators can emit."""
    UNPARSEABLE_URL = "unparseable_url"
    INSECURE_SCHEME = "insecure_scheme"
    EMBEDDED_CREDENTIALS = "embedded_credentials"
    NO_ADAPTER_FOUND = "no_adapter_found"
    TRANSPORT_FAILURE = "transport_failure"
    MANIFEST_NOT_FOUND = "manifest_not_found"
    MANIFEST_PARSE_ERROR = "manifest_parse_error"
    MANIFEST_MISSING_NAME = "manifest_missing_name"
    NAME_SYNTAX_INVALID = "name_syntax_invalid"
    NAME_BLOCKED = "name_blocked"
    NAME_RESERVED = "name_reserved"
    NAME_INVALID_SUFFIX = "name_invalid_suffix"
    NAME_HAS_UPPERCASE = "name_has_uppercase"
    NAME_UNEXPECTED_EMPTY = "name_unexpected_empty"
    NAME_NOT_UNIQUE = "name_not_unique"
    VENDOR_NOT_WRITABLE = "vendor_not_writable"


@dataclass(frozen=True)
class Violation:
    """A single failure attached to a property path."""
    kind: ViolationKind
    message: str
    path: str = field(default=Constants.VIOLATION_PATH)

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "kind": self.kind.value, "message": self.message}


def escape(text: str) -> str:
    """HTML-escape user supplied text; double quotes are escaped, single are not."""
    return html.escape(text, quote=False).replace('"', "&quot;")
