"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides
fixtures that can be used across all test files.
"""
import pytest
from unittest.mock import AsyncMock, Mock

from story_testgen.config import JiraSettings, LLMSettings
from story_testgen.core.jira_models import JiraIssue
from story_testgen.core.models import GeneratedTestCase, Priority


# ===== Test Data Fixtures =====

@pytest.fixture
def sample_adf_description():
    """Fixture providing a Jira description in Atlassian Document Format"""
    return {
        "version": 1,
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "As a user I want to log in"},
                    {"type": "hardBreak"},
                    {"type": "text", "text": "so that I can see my dashboard"},
                ],
            },
            {
                "type": "mediaSingle",
                "content": [{"type": "media", "attrs": {"id": "abc-123"}}],
            },
            {"type": "paragraph", "content": []},
        ],
    }


@pytest.fixture
def sample_acceptance_criteria():
    """Fixture providing bullet-style acceptance criteria"""
    return "- User must log in\n- User should see dashboard"


@pytest.fixture
def sample_issue_json(sample_adf_description):
    """Fixture providing a raw Jira issue response (acceptance criteria in the custom field)"""
    return {
        "id": "10042",
        "key": "PROJ-42",
        "fields": {
            "summary": "Login page",
            "description": sample_adf_description,
            "customfield_10026": "- User must log in\n- User should see dashboard",
            "issuetype": {"name": "Story", "id": "10001"},
            "project": {"key": "PROJ", "id": "10000", "name": "Project"},
        },
    }


@pytest.fixture
def sample_story(sample_issue_json):
    """Fixture providing a parsed story"""
    data = dict(sample_issue_json)
    fields = dict(data["fields"])
    fields["acceptance_criteria"] = fields.pop("customfield_10026")
    data["fields"] = fields
    return JiraIssue.model_validate(data)


@pytest.fixture
def sample_test_case():
    """Fixture providing a generated test case"""
    return GeneratedTestCase(
        title="TC-1: Verify login",
        description="Verify login with valid credentials",
        steps=["Open the login page", "Submit valid credentials"],
        expected_result="User lands on the dashboard",
        priority=Priority.HIGH,
    )


# ===== Configuration Fixtures =====

@pytest.fixture
def jira_settings():
    """Fixture providing Jira settings"""
    return JiraSettings(
        base_url="https://test.atlassian.net",
        email="qa@example.com",
        api_token="token-123",
    )


@pytest.fixture
def llm_settings():
    """Fixture providing model settings with a key"""
    return LLMSettings(api_key="test-key")


# ===== Mock Fixtures =====

@pytest.fixture
def mock_llm():
    """Fixture providing a mocked LLM client with an async complete()"""
    mock = Mock()
    mock.complete = AsyncMock(return_value=("[]", None))
    return mock


# ===== Pytest Configuration =====

def pytest_configure(config):
    """Pytest configuration hook"""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers",
        "integration: Integration tests (slower, may use real APIs)"
    )
