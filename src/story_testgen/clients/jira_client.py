"""
Jira API Client
Fetches stories and writes generated test cases back as linked issues
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from story_testgen.config import JiraSettings
from story_testgen.core.jira_models import (
    CreatedIssue,
    JiraErrorResponse,
    JiraIssue,
    JiraProjectInfo,
    ProjectReference,
)
from story_testgen.core.models import AdfNode

logger = logging.getLogger(__name__)


class JiraError(Exception):
    """Jira request failed; ``messages`` holds the tracker-provided error texts"""

    def __init__(self, message: str, status_code: Optional[int] = None, messages: Optional[List[str]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.messages = messages or []


class JiraClient:
    """Client for interacting with Jira API."""

    def __init__(self, settings: JiraSettings, session: Optional[requests.Session] = None):
        """
        Initialize Jira client.

        Args:
            settings: Site URL, credentials and field configuration
            session: Optional preconfigured session (mainly for tests)
        """
        self.settings = settings
        self.base_url = settings.base_url
        self.timeout = settings.timeout
        self.session = session or requests.Session()
        self.session.auth = (settings.email, settings.api_token)
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/rest/api/3/{path.lstrip('/')}"

    @staticmethod
    def _error_messages(response: requests.Response) -> List[str]:
        """Parse errorMessages/errors from a Jira error body, [] if the body is not Jira JSON"""
        try:
            body = response.json()
        except ValueError:
            return []
        if not isinstance(body, dict):
            return []
        try:
            return JiraErrorResponse.model_validate(body).messages()
        except ValidationError:
            return []

    def _raise_for_error(self, response: requests.Response, prefix: str) -> None:
        if response.ok:
            return
        messages = self._error_messages(response)
        if messages:
            detail = "\n".join(messages)
        else:
            detail = f"{response.status_code} {response.reason}"
        raise JiraError(f"{prefix}: {detail}", status_code=response.status_code, messages=messages)

    def get_issue(self, key: str) -> JiraIssue:
        """
        Fetch a single Jira issue with the fields the generator needs.

        Args:
            key: Issue key (e.g., 'PROJ-123')

        Returns:
            Parsed JiraIssue

        Raises:
            JiraError: If the request fails or the issue cannot be parsed
        """
        ac_field = self.settings.acceptance_criteria_field
        params = {"fields": f"summary,description,issuetype,project,{ac_field}"}
        logger.debug("Fetching issue %s", key)
        try:
            r = self.session.get(self._url(f"issue/{key}"), params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise JiraError(f"Failed to fetch issue: {e}") from e

        self._raise_for_error(r, "Failed to fetch issue")

        data = r.json()
        fields = dict(data.get("fields") or {})
        fields["acceptance_criteria"] = fields.pop(ac_field, None)
        data["fields"] = fields
        try:
            return JiraIssue.model_validate(data)
        except ValidationError as e:
            raise JiraError(f"Failed to fetch issue: unexpected response ({e.error_count()} invalid fields)") from e

    def create_issue(
        self,
        project: ProjectReference,
        summary: str,
        description: AdfNode,
        issue_type: Optional[str] = None,
    ) -> CreatedIssue:
        """
        Create an issue (a test case) with an ADF description.

        Raises:
            JiraError: With Jira's validation messages, e.g. 'project: ...'
        """
        payload = {
            "fields": {
                "project": project.to_payload(),
                "summary": summary,
                "description": description.to_dict(),
                "issuetype": {"name": issue_type or self.settings.test_issue_type},
            }
        }
        try:
            r = self.session.post(self._url("issue"), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise JiraError(f"Failed to create test case: {e}") from e

        self._raise_for_error(r, "Failed to create test case")
        return CreatedIssue.model_validate(r.json())

    def link_issues(self, inward_key: str, outward_key: str, link_type: Optional[str] = None) -> None:
        """Create an issue link, e.g. story <- 'Tests' - test case"""
        payload = {
            "type": {"name": link_type or self.settings.link_type},
            "inwardIssue": {"key": inward_key},
            "outwardIssue": {"key": outward_key},
        }
        try:
            r = self.session.post(self._url("issueLink"), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise JiraError(f"Failed to link issues: {e}") from e
        self._raise_for_error(r, "Failed to link issues")

    def set_resolution(self, key: str, resolution: Optional[str] = None) -> None:
        payload = {"fields": {"resolution": {"name": resolution or self.settings.pending_resolution}}}
        try:
            r = self.session.put(self._url(f"issue/{key}"), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise JiraError(f"Failed to update issue: {e}") from e
        self._raise_for_error(r, "Failed to update issue")

    def get_projects(self) -> List[JiraProjectInfo]:
        try:
            r = self.session.get(self._url("project"), timeout=self.timeout)
        except requests.RequestException as e:
            raise JiraError(f"Failed to fetch projects: {e}") from e
        self._raise_for_error(r, "Failed to fetch projects")
        return [JiraProjectInfo.model_validate(p) for p in r.json()]

    def search_issues(self, jql: str, max_results: int = 20) -> List[Dict[str, Any]]:
        """
        Search issues with JQL.

        Returns:
            Raw issue dictionaries (key, summary, issuetype, project, status)
        """
        params = {
            "jql": jql,
            "fields": "summary,key,issuetype,project,status",
            "maxResults": max_results,
        }
        try:
            r = self.session.get(self._url("search/jql"), params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise JiraError(f"Failed to search issues: {e}") from e
        self._raise_for_error(r, "Failed to search issues")
        return r.json().get("issues", [])
