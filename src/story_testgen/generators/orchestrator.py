"""
Test Case Orchestrator
Chooses between the model path and the rule-based path for one story
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from story_testgen.core.models import GeneratedTestCase
from story_testgen.generators.criteria_parser import CriteriaParser
from story_testgen.generators.prompt_builder import PromptBuilder
from story_testgen.generators.response_parser import ModelResponseParser
from story_testgen.generators.rule_based import RuleBasedTestCaseGenerator

logger = logging.getLogger(__name__)

SOURCE_MODEL = "model"
SOURCE_RULES = "rules"


@dataclass
class GenerationOutcome:
    """Test cases plus diagnostics on how they were produced"""
    test_cases: List[GeneratedTestCase]
    source: str
    model_error: Optional[str] = None


class TestCaseOrchestrator:
    """
    Model first, rules as fallback.

    The model path is used when it is available and yields at least one
    parsed test case. Any model failure (transport error, timeout,
    cancellation, unparseable reply) falls back to the rule-based path.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        llm=None,
        prompt_builder: Optional[PromptBuilder] = None,
        response_parser: Optional[ModelResponseParser] = None,
        criteria_parser: Optional[CriteriaParser] = None,
        rule_generator: Optional[RuleBasedTestCaseGenerator] = None,
        model_timeout: Optional[float] = None,
    ):
        """
        Args:
            llm: Object with ``async complete(system, user) -> (text, error)``,
                usually an LLMClient; None disables the model path
            model_timeout: Seconds to wait for the model before falling back
        """
        self.llm = llm
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.response_parser = response_parser or ModelResponseParser()
        self.criteria_parser = criteria_parser or CriteriaParser()
        self.rule_generator = rule_generator or RuleBasedTestCaseGenerator()
        self.model_timeout = model_timeout

    async def generate(
        self,
        story_text: Optional[str],
        acceptance_criteria: Optional[str],
        model_available: bool,
    ) -> List[GeneratedTestCase]:
        outcome = await self.generate_with_details(story_text, acceptance_criteria, model_available)
        return outcome.test_cases

    async def generate_with_details(
        self,
        story_text: Optional[str],
        acceptance_criteria: Optional[str],
        model_available: bool,
    ) -> GenerationOutcome:
        """
        Generate test cases for one story.

        Returns:
            GenerationOutcome; ``test_cases`` may be empty, ``model_error``
            explains why the model path was skipped or failed
        """
        model_error = None

        if model_available and self.llm is not None:
            test_cases, model_error = await self._generate_with_model(story_text, acceptance_criteria)
            if test_cases:
                return GenerationOutcome(test_cases=test_cases, source=SOURCE_MODEL)
            logger.info("Falling back to rule-based generation: %s", model_error)
        elif model_available:
            model_error = "no model client configured"
        else:
            model_error = "model unavailable"

        test_cases = self.generate_rule_based(acceptance_criteria)
        if not test_cases:
            logger.info("No rule-based test cases derivable from acceptance criteria")
        return GenerationOutcome(test_cases=test_cases, source=SOURCE_RULES, model_error=model_error)

    def generate_rule_based(self, acceptance_criteria: Optional[str]) -> List[GeneratedTestCase]:
        criteria = self.criteria_parser.parse(acceptance_criteria)
        return self.rule_generator.generate(criteria)

    async def _generate_with_model(self, story_text, acceptance_criteria):
        messages = self.prompt_builder.build(story_text, acceptance_criteria)
        if messages.is_empty:
            return [], "empty prompt"

        try:
            call = self.llm.complete(messages.system_message, messages.user_message)
            if self.model_timeout:
                response_text, error = await asyncio.wait_for(call, timeout=self.model_timeout)
            else:
                response_text, error = await call
        except asyncio.TimeoutError:
            logger.warning("Model call timed out after %ss", self.model_timeout)
            return [], "model call timed out"
        except asyncio.CancelledError:
            logger.warning("Model call was cancelled")
            return [], "model call cancelled"
        except Exception as e:
            logger.warning("Model call failed: %s", e)
            return [], f"model call failed: {e}"

        if error or not response_text:
            return [], error or "empty model response"

        test_cases = self.response_parser.parse(response_text)
        if not test_cases:
            return [], "no test cases parsed from model response"
        return test_cases, None
