"""Tests for formatting utilities"""
import pytest
from story_testgen.core.models import GeneratedTestCase, Priority
from story_testgen.utils.formatters import slugify, format_test_case_description


class TestSlugify:
    """Tests for slugify function"""

    def test_issue_key(self):
        """Test slugifying an issue key"""
        assert slugify("PROJ-123") == "proj-123"

    def test_removes_special_chars(self):
        """Test removing special characters"""
        assert slugify("Test@Case#123!") == "testcase123"

    def test_multiple_spaces(self):
        """Test collapsing whitespace"""
        assert slugify("Test   Case") == "test-case"

    def test_empty_string(self):
        """Test an empty string"""
        assert slugify("") == ""


class TestFormatTestCaseDescription:
    """Tests for the Jira issue body of a test case"""

    def test_full_body_with_parent(self, sample_test_case):
        """Test the full body with a related story"""
        body = format_test_case_description(sample_test_case, "PROJ-42")

        assert body == (
            "Verify login with valid credentials\n"
            "\n"
            "Steps:\n"
            "1. Open the login page\n"
            "2. Submit valid credentials\n"
            "\n"
            "Expected Result:\n"
            "User lands on the dashboard\n"
            "\n"
            "Priority: High\n"
            "\n"
            "Related Story: PROJ-42"
        )

    def test_without_parent(self):
        """Test the body without a related story"""
        tc = GeneratedTestCase(title="T", steps=["Only step"], expected_result="Done", priority=Priority.LOW)

        body = format_test_case_description(tc)

        assert body.endswith("Priority: Low")
        assert "Related Story" not in body
        assert "1. Only step" in body
