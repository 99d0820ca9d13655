from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from relnotes.config import GITHUB_API_URL, PAGE_SIZE
from relnotes.errors import GitHubAPIError
from relnotes.utils.http_client import request as http_request


class GitHubClient:
    """Thin wrapper over the handful of GitHub REST endpoints the changelog needs."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        """
        Parameters:
            token (str): Token sent as a Bearer credential; may be empty for public reads.
            repository (str): Repository in ``owner/name`` form.
            api_url (str): REST API root, e.g. ``https://api.github.com`` or a GHES ``/api/v3`` URL.
        """
        self._token = token
        self.repository = repository
        self._api_url = api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self._api_url}/repos/{self.repository}/{path.lstrip('/')}"

    def _call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = self._url(path)
        logger.debug(f"GitHub {method} {url} params={params}")
        resp: requests.Response = http_request(
            method, url, headers=self._headers(), params=params, json=json
        )
        if resp.status_code >= 400:
            message = None
            try:
                message = (resp.json() or {}).get("message")
            except ValueError:
                message = (resp.text or "").strip()[:200] or None
            raise GitHubAPIError(method, url, resp.status_code, message)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # --- releases -----------------------------------------------------------

    def list_releases(self, page: int = 1, per_page: int = PAGE_SIZE) -> List[Dict[str, Any]]:
        return self._call("GET", "releases", params={"per_page": per_page, "page": page})

    def get_release_by_tag(self, tag: str) -> Dict[str, Any]:
        return self._call("GET", f"releases/tags/{tag}")

    def update_release(self, release_id: int, body: str) -> Dict[str, Any]:
        return self._call("PATCH", f"releases/{release_id}", json={"body": body})

    def create_release(self, tag_name: str, name: str, body: str) -> Dict[str, Any]:
        return self._call(
            "POST",
            "releases",
            json={"tag_name": tag_name, "name": name, "body": body},
        )

    # --- tags / refs --------------------------------------------------------

    def list_tags(self, page: int = 1, per_page: int = PAGE_SIZE) -> List[Dict[str, Any]]:
        return self._call("GET", "tags", params={"per_page": per_page, "page": page})

    def get_tag_ref(self, tag: str) -> Dict[str, Any]:
        return self._call("GET", f"git/ref/tags/{tag}")

    def get_tag_object(self, sha: str) -> Dict[str, Any]:
        return self._call("GET", f"git/tags/{sha}")

    def resolve_tag_sha(self, tag: str) -> str:
        """Return the commit SHA a tag points to, peeling annotated tag objects."""
        obj = (self.get_tag_ref(tag) or {}).get("object") or {}
        # Annotated tags may point at other tag objects; bound the walk.
        for _ in range(5):
            if obj.get("type") != "tag":
                break
            obj = (self.get_tag_object(obj["sha"]) or {}).get("object") or {}
        sha = obj.get("sha")
        if not sha:
            raise GitHubAPIError("GET", self._url(f"git/ref/tags/{tag}"), 200, "missing object sha")
        return sha

    # --- commits ------------------------------------------------------------

    def compare(
        self, base: str, head: str, page: int = 1, per_page: int = PAGE_SIZE
    ) -> Dict[str, Any]:
        return self._call(
            "GET",
            f"compare/{base}...{head}",
            params={"per_page": per_page, "page": page},
        )

    def list_pulls_for_commit(self, sha: str) -> List[Dict[str, Any]]:
        return self._call("GET", f"commits/{sha}/pulls") or []
