"""String formatting utilities"""
import re
from typing import Optional

from story_testgen.core.models import GeneratedTestCase


def slugify(text: str) -> str:
    """
    Convert text to a filename-friendly slug.

    Args:
        text: The text to convert

    Returns:
        A slugified version of the text

    Example:
        >>> slugify("PROJ-123")
        'proj-123'

        >>> slugify("Hello World!")
        'hello-world'
    """
    if not text:
        return ""

    text = text.strip().lower()
    text = re.sub(r"[^a-z0-9\-\s]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)

    return text


def format_test_case_description(test_case: GeneratedTestCase, parent_issue_key: Optional[str] = None) -> str:
    """
    Build the plain-text issue body for a generated test case.

    Example output:
        Verify login with valid credentials

        Steps:
        1. Open the login page
        2. Submit valid credentials

        Expected Result:
        User lands on the dashboard

        Priority: High

        Related Story: PROJ-42
    """
    steps_text = "\n".join(
        f"{index}. {step}" for index, step in enumerate(test_case.steps, 1)
    )

    body = (
        f"{test_case.description}\n"
        f"\n"
        f"Steps:\n"
        f"{steps_text}\n"
        f"\n"
        f"Expected Result:\n"
        f"{test_case.expected_result}\n"
        f"\n"
        f"Priority: {test_case.priority.value}"
    )

    if parent_issue_key:
        body += f"\n\nRelated Story: {parent_issue_key}"

    return body
