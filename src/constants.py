"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    VALIDATION_FAILED = 3


class HostFamily(Enum):
    """Repository hosting families with a dedicated adapter.

    Args:
        Enum (string): Hosting family identifiers.
    """

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "PACKINTAKE_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "packintake/0.1"

    # Repository API constants
    GITHUB_API_BASE = "https://api.github.com"
    GITLAB_API_BASE = "https://gitlab.com/api/v4"
    BITBUCKET_API_BASE = "https://api.bitbucket.org/2.0"
    GITHUB_DOMAINS = ["github.com"]
    GITLAB_DOMAINS = ["gitlab.com"]

    # Manifest read from the repository root at the default branch
    MANIFEST_FILE = "composer.json"

    # Links rendered inside violation messages
    PACKAGE_URL_TEMPLATE = "/packages/{name}"
    VENDOR_URL_TEMPLATE = "/packages/{vendor}/"
    CONTACT_EMAIL = "contact@packagist.org"
    SITE_NAME = "Packagist.org"

    # Version sorting
    DEV_SENTINEL = "0.0.0-alpha"
    BRANCH_ALIAS_MAX = ".9999999-dev"

    # Violations are always attached to this property path
    VIOLATION_PATH = "repository"
