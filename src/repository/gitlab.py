"""GitLab adapter.

Provides a lightweight REST v4 client for reading a project's default
branch and the manifest file stored at a ref.
"""
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

from constants import Constants, HostFamily

from .providers import Manifest, ProviderClient
from .url_normalize import RepoRef, parse_repo_ref


class GitLabDriver(ProviderClient):
    """Adapter for gitlab.com and configured self-hosted GitLab instances."""

    family = HostFamily.GITLAB

    def __init__(self, url: str, ref: RepoRef):
        super().__init__(url, ref)
        self._project: Optional[Dict[str, Any]] = None

    @classmethod
    def supports(cls, url: str) -> Optional[RepoRef]:
        if not url.startswith(("https://", "http://", "git@")):
            return None
        ref = parse_repo_ref(url)
        if ref is None or ref.host not in [d.lower() for d in Constants.GITLAB_DOMAINS]:
            return None
        return ref

    @property
    def api_base(self) -> str:
        if self.ref.host == "gitlab.com":
            return Constants.GITLAB_API_BASE
        return f"https://{self.ref.host}/api/v4"

    def _project_url(self) -> str:
        # URL encode the project path
        project_path = quote(f"{self.ref.owner}/{self.ref.repo}", safe='')
        return f"{self.api_base}/projects/{project_path}"

    def get_project(self) -> Dict[str, Any]:
        """Fetch project metadata.

        Returns:
            Dict with default_branch, web_url and path_with_namespace
        """
        if self._project is None:
            data = self._get_json(self._project_url())
            self._project = {
                'default_branch': data.get('default_branch'),
                'web_url': data.get('web_url'),
                'path_with_namespace': data.get('path_with_namespace'),
            } if isinstance(data, dict) else {}
        return self._project

    def root_identifier(self) -> str:
        return self.get_project().get('default_branch') or "master"

    def manifest_at(self, identifier: str) -> Manifest:
        file_path = quote(Constants.MANIFEST_FILE, safe='')
        url = f"{self._project_url()}/repository/files/{file_path}/raw?ref={quote(identifier, safe='')}"
        return Manifest.from_text(self._get_text(url))

    def canonical_url(self) -> str:
        path = (self._project or {}).get('path_with_namespace')
        if path:
            return f"https://{self.ref.host}/{path}"
        return f"https://{self.ref.host}/{self.ref.owner}/{self.ref.repo}"
