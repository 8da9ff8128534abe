"""Tests for YAML config loading, env overrides and name policy construction."""

import textwrap

from analysis.name_policy import DEFAULT_NAME_POLICY
from cli_config import apply_config, apply_env_overrides, build_name_policy, load_config
from constants import Constants


def _write(tmp_path, text):
    path = tmp_path / "packintake.yml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return str(path)


class TestLoadConfig:

    def test_none_path(self):
        assert load_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yml")) == {}

    def test_invalid_yaml(self, tmp_path):
        assert load_config(_write(tmp_path, "http: [unclosed\n")) == {}

    def test_non_mapping(self, tmp_path):
        assert load_config(_write(tmp_path, "- a\n- b\n")) == {}

    def test_empty_file(self, tmp_path):
        assert load_config(_write(tmp_path, "")) == {}

    def test_mapping(self, tmp_path):
        cfg = load_config(_write(tmp_path, """
            http:
              timeout: 5
        """))
        assert cfg == {"http": {"timeout": 5}}


class TestApplyConfig:

    def test_scalar_settings(self, tmp_path):
        cfg = load_config(_write(tmp_path, """
            http:
              timeout: "12"
              user_agent: custom-agent/1.0
            manifest:
              file: package.json
            links:
              site_name: Example Registry
              contact_email: help@example.org
        """))
        apply_config(cfg)
        assert Constants.REQUEST_TIMEOUT == 12
        assert Constants.USER_AGENT == "custom-agent/1.0"
        assert Constants.MANIFEST_FILE == "package.json"
        assert Constants.SITE_NAME == "Example Registry"
        assert Constants.CONTACT_EMAIL == "help@example.org"

    def test_invalid_value_ignored(self):
        apply_config({"http": {"timeout": "soon"}})
        assert Constants.REQUEST_TIMEOUT == 30

    def test_host_domains(self):
        apply_config({"hosts": {"github_domains": ["github.com", "GHE.example.com"], "gitlab_domains": "gitlab.com, git.example.org"}})
        assert Constants.GITHUB_DOMAINS == ["github.com", "ghe.example.com"]
        assert Constants.GITLAB_DOMAINS == ["gitlab.com", "git.example.org"]

    def test_empty_sections(self):
        apply_config({"http": None, "hosts": None})
        assert Constants.REQUEST_TIMEOUT == 30
        assert Constants.GITHUB_DOMAINS == ["github.com"]


class TestEnvOverrides:

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PACKINTAKE_REQUEST_TIMEOUT", "7")
        monkeypatch.setenv("PACKINTAKE_GITHUB_DOMAINS", "github.com,ghe.corp")
        monkeypatch.setenv("PACKINTAKE_GITLAB_DOMAINS", "gitlab.corp")
        apply_env_overrides()
        assert Constants.REQUEST_TIMEOUT == 7
        assert Constants.GITHUB_DOMAINS == ["github.com", "ghe.corp"]
        assert Constants.GITLAB_DOMAINS == ["gitlab.corp"]

    def test_invalid_timeout_ignored(self, monkeypatch):
        monkeypatch.setenv("PACKINTAKE_REQUEST_TIMEOUT", "fast")
        monkeypatch.delenv("PACKINTAKE_GITHUB_DOMAINS", raising=False)
        monkeypatch.delenv("PACKINTAKE_GITLAB_DOMAINS", raising=False)
        apply_env_overrides()
        assert Constants.REQUEST_TIMEOUT == 30


class TestBuildNamePolicy:

    def test_default_without_section(self):
        assert build_name_policy({}) is DEFAULT_NAME_POLICY

    def test_blocked_terms(self):
        policy = build_name_policy({"policy": {"blocked_terms": ["casino"]}})
        assert policy.is_blocked("acme/online-casino")
        assert not policy.is_blocked("acme/free-movie")

    def test_allowed_vendor_prefixes(self):
        policy = build_name_policy({"policy": {"blocked_terms": ["casino"], "allowed_vendor_prefixes": ["casino-tools"]}})
        assert not policy.is_blocked("casino-tools/roulette-casino")
        assert policy.is_blocked("other/casino")

    def test_empty_allowlist(self):
        policy = build_name_policy({"policy": {"allowed_vendor_prefixes": []}})
        assert policy.allowlist is None
        assert policy.is_blocked("watchfulli/free-movie")

    def test_null_allowlist_keeps_default(self):
        policy = build_name_policy({"policy": {"allowed_vendor_prefixes": None}})
        assert not policy.is_blocked("watchfulli/free-movie")

    def test_full_pattern(self):
        policy = build_name_policy({"policy": {"blocklist_pattern": "^spam/"}})
        assert policy.is_blocked("spam/thing")
        assert not policy.is_blocked("acme/spam")

    def test_invalid_pattern_falls_back(self):
        assert build_name_policy({"policy": {"blocklist_pattern": "(unclosed"}}) is DEFAULT_NAME_POLICY
