"""
Story Workflow
Fetch a Jira story, generate its test cases and write them back as linked Test issues
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from story_testgen.clients.jira_client import JiraClient, JiraError
from story_testgen.core.jira_models import CreatedIssue, JiraIssue, JiraProjectInfo, ProjectReference
from story_testgen.core.models import GeneratedTestCase
from story_testgen.generators.orchestrator import GenerationOutcome, TestCaseOrchestrator
from story_testgen.utils.adf import text_to_document
from story_testgen.utils.formatters import format_test_case_description

logger = logging.getLogger(__name__)

STORY_ISSUE_TYPE = "story"

_PARENTHESISED_KEY_RE = re.compile(r"\(([A-Za-z][A-Za-z0-9]*)\)")
_LEADING_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*")


@dataclass
class CreationReport:
    """Result of writing test cases to Jira"""
    created: List[CreatedIssue] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def resolve_project_key(target: str, projects: Sequence[JiraProjectInfo] = ()) -> str:
    """
    Resolve a user-supplied project reference to a project key.

    Tries an exact key, then a project name, then a parenthesised key such
    as 'TCM-XRAY (TC)', and finally the leading key token ('TCM').

    Raises:
        ValueError: If nothing resembling a key can be derived
    """
    target = (target or "").strip()
    if not target:
        raise ValueError("Project reference cannot be empty")

    for project in projects:
        if project.key.upper() == target.upper():
            return project.key
    for project in projects:
        if project.name and project.name.lower() == target.lower():
            return project.key

    known_keys = {p.key.upper(): p.key for p in projects}
    match = _PARENTHESISED_KEY_RE.search(target)
    if match and match.group(1).upper() in known_keys:
        return known_keys[match.group(1).upper()]

    match = _LEADING_KEY_RE.match(target)
    if not match:
        raise ValueError(f"Cannot derive a project key from '{target}'")
    return match.group(0).upper()


class StoryWorkflow:
    """Glue between the Jira client and the generation pipeline."""

    def __init__(self, jira: JiraClient, orchestrator: TestCaseOrchestrator, model_available: bool = False):
        self.jira = jira
        self.orchestrator = orchestrator
        self.model_available = model_available
        self.settings = jira.settings

    def fetch_story(self, key: str) -> JiraIssue:
        return self.jira.get_issue(key)

    async def generate(self, issue: JiraIssue) -> GenerationOutcome:
        """Generate test cases from the story's summary, description and acceptance criteria"""
        outcome = await self.orchestrator.generate_with_details(
            issue.story_text(),
            issue.acceptance_criteria_text(),
            self.model_available,
        )
        logger.info(
            "Generated %d test case(s) for %s from %s",
            len(outcome.test_cases), issue.key, outcome.source,
        )
        return outcome

    def create_test_cases(
        self,
        story: JiraIssue,
        test_cases: Sequence[GeneratedTestCase],
        target_project: Optional[str] = None,
        projects: Sequence[JiraProjectInfo] = (),
        link_to_story: bool = True,
        set_pending: bool = True,
    ) -> CreationReport:
        """
        Create each test case as a Jira issue linked to the story.

        Link and resolution updates are best effort; a failure there is
        logged and the test case still counts as created.

        Raises:
            ValueError: If the issue is not a Story or there is nothing to create
        """
        if story.issue_type.lower() != STORY_ISSUE_TYPE:
            raise ValueError(
                f"Test cases can only be added to Stories. Current issue type: '{story.issue_type}'"
            )
        if not test_cases:
            raise ValueError("No test cases to create. Generate test cases first.")

        story_project = story.fields.project
        project_key = resolve_project_key(target_project or story_project.key, projects)
        fallback_id = story_project.id if project_key == story_project.key else None

        report = CreationReport()
        for index, test_case in enumerate(test_cases, 1):
            logger.info("Creating test case %d/%d: %s", index, len(test_cases), test_case.title)
            if not test_case.is_submittable():
                report.errors.append(f"Skipped {test_case.title}: no test steps")
                continue
            try:
                created = self._create_one(test_case, story.key, project_key, fallback_id)
            except JiraError as e:
                report.errors.append(f"Failed to create {test_case.title}: {e}")
                logger.warning("Failed to create %s: %s", test_case.title, e)
                continue

            report.created.append(created)
            if link_to_story:
                self._link(story.key, created.key)
            if set_pending:
                self._set_pending(created.key)

        return report

    def _create_one(self, test_case, story_key, project_key, fallback_id) -> CreatedIssue:
        body = text_to_document(format_test_case_description(test_case, story_key))
        try:
            return self.jira.create_issue(ProjectReference(key=project_key), test_case.title, body)
        except JiraError as e:
            if not fallback_id or not any(m.lower().startswith("project") for m in e.messages):
                raise
            logger.info("Retrying with project id %s after project error", fallback_id)
            return self.jira.create_issue(ProjectReference(id=fallback_id), test_case.title, body)

    def _link(self, story_key: str, test_key: str) -> None:
        try:
            self.jira.link_issues(inward_key=story_key, outward_key=test_key)
        except JiraError as e:
            logger.warning("Could not link %s to %s: %s", test_key, story_key, e)

    def _set_pending(self, test_key: str) -> None:
        try:
            self.jira.set_resolution(test_key)
        except JiraError as e:
            logger.warning("Could not set resolution on %s: %s", test_key, e)
