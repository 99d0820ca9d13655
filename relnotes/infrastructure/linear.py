from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from gql import Client, gql
from gql.transport.requests import RequestsHTTPTransport
from loguru import logger

from relnotes.config import HTTP_TIMEOUT, LINEAR_API_URL
from relnotes.errors import IssueTrackerError

WORKFLOW_STATES_QUERY = gql(
    """
    query WorkflowStates($after: String) {
      workflowStates(first: 250, after: $after) {
        nodes {
          id
          name
          team {
            id
          }
        }
        pageInfo {
          hasNextPage
          endCursor
        }
      }
    }
    """
)

ISSUE_QUERY = gql(
    """
    query Issue($id: String!) {
      issue(id: $id) {
        id
        identifier
        team {
          id
        }
      }
    }
    """
)

ISSUE_UPDATE_MUTATION = gql(
    """
    mutation IssueUpdate($id: String!, $stateId: String!) {
      issueUpdate(id: $id, input: { stateId: $stateId }) {
        success
      }
    }
    """
)


@dataclass
class WorkflowState:
    id: str
    name: str
    team_id: Optional[str]


@dataclass
class LinearIssue:
    id: str
    identifier: str
    team_id: Optional[str]


class LinearClient:
    """
    Minimal Linear GraphQL client: workflow states, issue lookup and state updates.

    Every request opens its own gql session on a fresh transport, so one client
    can be shared by the fan-out worker threads.
    """

    def __init__(self, *, api_key: str, url: str = LINEAR_API_URL) -> None:
        self._api_key = api_key
        self._url = url

    def _build_client(self) -> Client:
        transport = RequestsHTTPTransport(
            url=self._url,
            headers={"Authorization": self._api_key},
            verify=True,
            retries=3,
            timeout=int(HTTP_TIMEOUT),
        )
        return Client(transport=transport, fetch_schema_from_transport=False)

    def execute(self, document: Any, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            with self._build_client() as session:
                return session.execute(document, variable_values=variables or {})
        except Exception as exc:
            raise IssueTrackerError(f"Linear API request failed: {exc}") from exc

    def workflow_states(self) -> List[WorkflowState]:
        states: List[WorkflowState] = []
        cursor: Optional[str] = None
        while True:
            result = self.execute(WORKFLOW_STATES_QUERY, {"after": cursor})
            data = result.get("workflowStates") or {}
            for node in data.get("nodes") or []:
                team = node.get("team") or {}
                states.append(
                    WorkflowState(id=node["id"], name=node.get("name", ""), team_id=team.get("id"))
                )
            page_info = data.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
        logger.debug(f"Linear: fetched {len(states)} workflow states")
        return states

    def issue(self, identifier: str) -> LinearIssue:
        result = self.execute(ISSUE_QUERY, {"id": identifier})
        node = result.get("issue")
        if not node:
            raise IssueTrackerError(f"Linear issue '{identifier}' not found")
        team = node.get("team") or {}
        return LinearIssue(
            id=node["id"],
            identifier=node.get("identifier") or identifier,
            team_id=team.get("id"),
        )

    def update_issue_state(self, issue_id: str, state_id: str) -> bool:
        result = self.execute(ISSUE_UPDATE_MUTATION, {"id": issue_id, "stateId": state_id})
        return bool((result.get("issueUpdate") or {}).get("success"))
