from __future__ import annotations

import json
import threading
import time
from http.server import BaseHTTPRequestHandler
from typing import Any, Dict, List, Optional


class FakeGitHub:
    """In-memory stand-in for GitHubClient; records write calls."""

    def __init__(
        self,
        *,
        releases: Optional[List[Dict[str, Any]]] = None,
        tags: Optional[List[Dict[str, Any]]] = None,
        tag_shas: Optional[Dict[str, str]] = None,
        release_ids: Optional[Dict[str, int]] = None,
        commits: Optional[List[Dict[str, Any]]] = None,
        pulls: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        html_url: str = "https://github.com/acme/shop/compare/a...b",
    ) -> None:
        self.repository = "acme/shop"
        self.releases = releases or []
        self.tags = tags or []
        self.tag_shas = tag_shas or {}
        self.release_ids = release_ids or {}
        self.commits = commits or []
        self.pulls = pulls or {}
        self.html_url = html_url
        self.calls: List[tuple] = []

    @staticmethod
    def _page(items, page, per_page):
        start = (page - 1) * per_page
        return items[start : start + per_page]

    def list_releases(self, page=1, per_page=100):
        self.calls.append(("list_releases", page))
        return self._page(self.releases, page, per_page)

    def list_tags(self, page=1, per_page=100):
        self.calls.append(("list_tags", page))
        return self._page(self.tags, page, per_page)

    def resolve_tag_sha(self, tag):
        return self.tag_shas[tag]

    def get_release_by_tag(self, tag):
        return {"id": self.release_ids[tag], "tag_name": tag}

    def compare(self, base, head, page=1, per_page=100):
        self.calls.append(("compare", base, head, page))
        return {"html_url": self.html_url, "commits": self._page(self.commits, page, per_page)}

    def list_pulls_for_commit(self, sha):
        return self.pulls.get(sha, [])

    def update_release(self, release_id, body):
        self.calls.append(("update_release", release_id, body))
        return {"id": release_id, "body": body}

    def create_release(self, tag_name, name, body):
        self.calls.append(("create_release", tag_name, name, body))
        return {"id": 99, "tag_name": tag_name, "name": name, "body": body}


def make_commit(sha: str, message: str) -> Dict[str, Any]:
    return {"sha": sha, "commit": {"message": message}}



class FakeLinearAPI:
    """
    Answers the Linear GraphQL documents over HTTP.

    Served by a local ``ThreadingHTTPServer`` (see the ``linear_api`` fixture);
    every answer is delayed by ``latency`` seconds so concurrent requests overlap.
    """

    def __init__(
        self,
        *,
        states: Optional[List[Dict[str, Any]]] = None,
        issues: Optional[Dict[str, Dict[str, Any]]] = None,
        latency: float = 0.1,
    ) -> None:
        self.states = states or []
        self.issues = issues or {}
        self.latency = latency
        self.url = ""
        self.updates: List[tuple] = []
        self.authorizations: List[str] = []
        self._lock = threading.Lock()

    def respond(self, query: str, variables: Dict[str, Any], authorization: str) -> Dict[str, Any]:
        with self._lock:
            self.authorizations.append(authorization)
        if "issueUpdate" in query:
            with self._lock:
                self.updates.append((variables["id"], variables["stateId"]))
            return {"issueUpdate": {"success": True}}
        if "workflowStates" in query:
            return {
                "workflowStates": {
                    "nodes": self.states,
                    "pageInfo": {"hasNextPage": False, "endCursor": None},
                }
            }
        return {"issue": self.issues.get(variables.get("id", ""))}


class LinearAPIHandler(BaseHTTPRequestHandler):
    def do_POST(self) -> None:
        api: FakeLinearAPI = self.server.linear  # type: ignore[attr-defined]
        length = int(self.headers.get("Content-Length") or 0)
        payload = json.loads(self.rfile.read(length) or b"{}")
        data = api.respond(
            payload.get("query") or "",
            payload.get("variables") or {},
            self.headers.get("Authorization") or "",
        )
        time.sleep(api.latency)
        body = json.dumps({"data": data}).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        pass
