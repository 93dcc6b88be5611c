"""
Rule-based Test Case Generator
Deterministic test cases from parsed acceptance criteria, used when no model is available
"""

from typing import Iterable, List

from story_testgen.core.models import Criterion, GeneratedTestCase, Priority

HIGH_PRIORITY_WORDS = ("critical", "must", "required")
MEDIUM_PRIORITY_WORDS = ("should", "important")


def determine_priority(text: str) -> Priority:
    """Keyword heuristic: critical/must/required -> High, should/important -> Medium, else Low"""
    lowered = (text or "").lower()
    if any(word in lowered for word in HIGH_PRIORITY_WORDS):
        return Priority.HIGH
    if any(word in lowered for word in MEDIUM_PRIORITY_WORDS):
        return Priority.MEDIUM
    return Priority.LOW


class RuleBasedTestCaseGenerator:
    """Maps each criterion to one test case."""

    def generate(self, criteria: Iterable[Criterion]) -> List[GeneratedTestCase]:
        test_cases = []
        for index, criterion in enumerate(criteria, 1):
            test_cases.append(
                GeneratedTestCase(
                    title=f"TC-{index}: Verify {criterion.summary}",
                    description=f"Test case to verify: {criterion.description}",
                    steps=list(criterion.steps),
                    expected_result=criterion.expected_result,
                    priority=determine_priority(criterion.description),
                )
            )
        return test_cases
