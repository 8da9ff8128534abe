"""Runtime configuration: YAML file, environment overrides and name policy.

Precedence (lowest to highest): Constants defaults, YAML config file,
environment variables. Loading never raises so a bad config file cannot
break the CLI; problems are logged instead.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, Optional

import yaml

from analysis.name_policy import (
    DEFAULT_ALLOWED_VENDOR_PREFIXES,
    DEFAULT_BLOCKED_TERMS,
    DEFAULT_NAME_POLICY,
    NamePolicy,
)
from constants import Constants

logger = logging.getLogger(__name__)

ENV_REQUEST_TIMEOUT = "PACKINTAKE_REQUEST_TIMEOUT"
ENV_GITHUB_DOMAINS = "PACKINTAKE_GITHUB_DOMAINS"
ENV_GITLAB_DOMAINS = "PACKINTAKE_GITLAB_DOMAINS"

# config key -> Constants attribute
_SCALAR_SETTINGS = {
    ("http", "timeout"): ("REQUEST_TIMEOUT", int),
    ("http", "user_agent"): ("USER_AGENT", str),
    ("manifest", "file"): ("MANIFEST_FILE", str),
    ("links", "package_url_template"): ("PACKAGE_URL_TEMPLATE", str),
    ("links", "vendor_url_template"): ("VENDOR_URL_TEMPLATE", str),
    ("links", "contact_email"): ("CONTACT_EMAIL", str),
    ("links", "site_name"): ("SITE_NAME", str),
}


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load the YAML configuration file.

    Args:
        path: Path to a YAML file, or None.

    Returns:
        Parsed mapping, or {} when the file is absent or unreadable.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.error("Config file %s must contain a mapping at the top level", path)
        return {}
    return data


def _split_domains(value: Any) -> Optional[list]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return None
    domains = [str(v).strip().lower() for v in value if str(v).strip()]
    return domains or None


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply config file values onto Constants."""
    for (section, key), (attr, cast) in _SCALAR_SETTINGS.items():
        value = (cfg.get(section) or {}).get(key)
        if value is None:
            continue
        try:
            setattr(Constants, attr, cast(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid config value %s.%s=%r", section, key, value)

    hosts = cfg.get("hosts") or {}
    github = _split_domains(hosts.get("github_domains"))
    if github:
        Constants.GITHUB_DOMAINS = github
    gitlab = _split_domains(hosts.get("gitlab_domains"))
    if gitlab:
        Constants.GITLAB_DOMAINS = gitlab


def apply_env_overrides() -> None:
    """Apply PACKINTAKE_* environment variables onto Constants."""
    timeout = os.environ.get(ENV_REQUEST_TIMEOUT)
    if timeout:
        try:
            Constants.REQUEST_TIMEOUT = int(timeout)
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", ENV_REQUEST_TIMEOUT, timeout)
    github = _split_domains(os.environ.get(ENV_GITHUB_DOMAINS))
    if github:
        Constants.GITHUB_DOMAINS = github
    gitlab = _split_domains(os.environ.get(ENV_GITLAB_DOMAINS))
    if gitlab:
        Constants.GITLAB_DOMAINS = gitlab


def build_name_policy(cfg: Dict[str, Any]) -> NamePolicy:
    """Build the name policy from the ``policy`` section, or return the default.

    Recognized keys: ``blocklist_pattern`` (complete regex),
    ``blocked_terms`` (list of regex alternatives) and
    ``allowed_vendor_prefixes`` (list of vendor regex fragments).
    """
    policy = cfg.get("policy") or {}
    if not any(k in policy for k in ("blocklist_pattern", "blocked_terms", "allowed_vendor_prefixes")):
        return DEFAULT_NAME_POLICY
    allowed = policy.get("allowed_vendor_prefixes")
    if allowed is None:
        allowed = DEFAULT_ALLOWED_VENDOR_PREFIXES
    try:
        return NamePolicy.build(
            blocked_terms=policy.get("blocked_terms") or DEFAULT_BLOCKED_TERMS,
            allowed_vendor_prefixes=allowed,
            blocklist_pattern=policy.get("blocklist_pattern"),
        )
    except (re.error, TypeError) as exc:
        logger.error("Invalid name policy in config, using defaults: %s", exc)
        return DEFAULT_NAME_POLICY
