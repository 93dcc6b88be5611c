"""
Prompt Builder
Composes the system and user messages sent to the generative model
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

TEST_CASE_COUNT = 10

SYSTEM_PROMPT = """You are a QA test engineer. When asked to write test cases for a description, you analyze the description and create test cases that are specific to what's described.
You do not use generic or template test cases. Each test case must be tailored to the actual features and requirements in the description.
Always return a valid JSON array."""

USER_PROMPT_TEMPLATE = """Write {count} test cases for the following description. Make sure each test case is specific to what's described, not generic.

Description:
{description}

Generate {count} test cases that directly test the features and requirements mentioned in the description above. Each test case should be tailored to the specific functionality described.

Return as JSON array:
[
  {{
    "title": "TC-01: Specific test case title",
    "description": "Objective of this test",
    "steps": ["Step 1", "Step 2", "Step 3"],
    "expectedResult": "Expected outcome",
    "priority": "High"
  }}
]

Return ONLY the JSON array:"""


@dataclass(frozen=True)
class PromptMessages:
    """System and user message pair for one model call"""
    system_message: str
    user_message: str

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to send to the model"""
        return not self.user_message


class PromptBuilder:
    """Builds deterministic prompts from story text and acceptance criteria."""

    def __init__(self, test_case_count: int = TEST_CASE_COUNT):
        self.test_case_count = test_case_count

    @staticmethod
    def combine(story_text: Optional[str], acceptance_criteria: Optional[str]) -> str:
        """Story text followed by an 'Acceptance Criteria:' section when criteria are present"""
        parts = []
        if story_text and story_text.strip():
            parts.append(story_text)
        if acceptance_criteria and acceptance_criteria.strip():
            parts.append("Acceptance Criteria:\n" + acceptance_criteria)
        return "\n\n".join(parts)

    def build(self, story_text: Optional[str], acceptance_criteria: Optional[str]) -> PromptMessages:
        """
        Build the message pair.

        Returns:
            PromptMessages; ``user_message`` is empty when both inputs are blank
        """
        description = self.combine(story_text, acceptance_criteria)
        if not description.strip():
            logger.warning("Story text and acceptance criteria are blank, no prompt built")
            return PromptMessages(system_message=SYSTEM_PROMPT, user_message="")

        user_message = USER_PROMPT_TEMPLATE.format(
            count=self.test_case_count,
            description=description,
        )
        logger.debug("Built prompt of %d characters", len(user_message))
        return PromptMessages(system_message=SYSTEM_PROMPT, user_message=user_message)
