"""
Model Response Parser
Turns a generative model's free-form reply into GeneratedTestCase records.

Strategies are tried in order and the first non-empty result wins:
1. JSON array (optionally inside a fenced code block, with surrounding prose)
2. Text segmented by "TC-<n>:" markers
3. Text segmented by numbered list items, only when no TC markers exist
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from story_testgen.core.models import GeneratedTestCase, Priority

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Test Case"
DEFAULT_JSON_STEPS = [
    "Step 1: Navigate to feature",
    "Step 2: Perform action",
    "Step 3: Verify result",
]
DEFAULT_TEXT_STEPS = [
    "Navigate to the feature",
    "Perform the required action",
    "Verify the expected outcome",
]
DEFAULT_TEXT_EXPECTED = "Expected behavior is achieved"

JSON_FENCE_RE = re.compile(r"```json\s*(.*?)```", re.IGNORECASE | re.DOTALL)
ANY_FENCE_RE = re.compile(r"```(?:[A-Za-z]+)?\s*(.*?)```", re.DOTALL)

TC_MARKER_RE = re.compile(r"TC-\d+[:.]")
NUMBERED_MARKER_RE = re.compile(r"^\d+[.)]", re.MULTILINE)

STEP_CLAUSE_RE = re.compile(
    r"(?:Step\s+\d+[:.]|\d+[:.])\s*(.+?)(?=(?:Step\s+\d+[:.]|\d+[:.])|$)",
    re.IGNORECASE,
)
GHERKIN_CLAUSE_RE = re.compile(
    r"(?:Given|When|Then|And|But)\s+(.+?)(?=(?:Given|When|Then|And|But)|$)",
    re.IGNORECASE,
)
EXPECTED_LABEL_RE = re.compile(
    r"Expected(?:\s+(?:Result|Outcome))?\s*[:.]?\s*(.+?)(?:\.|$)",
    re.IGNORECASE,
)
OUTCOME_RE = re.compile(r"(?:should|must|will)\s+(.+?)(?:\.|$)", re.IGNORECASE)

Strategy = Callable[[str], Optional[List[GeneratedTestCase]]]


class ModelResponseParser:
    """Parses model output into test cases; never raises."""

    def __init__(self):
        self.strategies: Sequence[Tuple[str, Strategy]] = (
            ("json", self.parse_json),
            ("tc-markers", self.parse_tc_markers),
            ("numbered-list", self.parse_numbered_list),
        )

    def parse(self, raw_response: Optional[str]) -> List[GeneratedTestCase]:
        """
        Parse a model response.

        Args:
            raw_response: Text returned by the model

        Returns:
            Test cases from the first strategy that yields any, or [] when
            none does
        """
        text = (raw_response or "").strip()
        if not text:
            return []

        for name, strategy in self.strategies:
            try:
                result = strategy(text)
            except Exception as e:
                logger.warning("Response parsing strategy '%s' failed: %s", name, e)
                continue
            if result:
                logger.info("Parsed %d test case(s) using '%s' strategy", len(result), name)
                return result
            logger.debug("Strategy '%s' produced no test cases", name)

        logger.warning("Could not derive any test cases from model response (%d chars)", len(text))
        return []

    # ------------------------------------------------------------------
    # JSON strategy
    # ------------------------------------------------------------------

    def parse_json(self, text: str) -> Optional[List[GeneratedTestCase]]:
        json_text = self._locate_json_array(text)
        if json_text is None:
            logger.debug("No JSON array found in response")
            return None

        try:
            items = json.loads(json_text)
        except json.JSONDecodeError as e:
            logger.debug("JSON parsing failed: %s", e)
            return None

        if not isinstance(items, list):
            return None

        test_cases = []
        for index, element in enumerate(items, 1):
            try:
                test_cases.append(self._case_from_json(element))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping test case %d in model response: %s", index, e)
        return test_cases

    @staticmethod
    def _locate_json_array(text: str) -> Optional[str]:
        fenced = JSON_FENCE_RE.search(text) or ANY_FENCE_RE.search(text)
        if fenced:
            text = fenced.group(1).strip()

        start = text.find("[")
        end = text.rfind("]")
        if start < 0 or end <= start:
            return None
        return text[start:end + 1]

    def _case_from_json(self, element: Any) -> GeneratedTestCase:
        if not isinstance(element, dict):
            raise TypeError(f"expected an object, got {type(element).__name__}")

        steps = self._json_steps(element.get("steps"))

        return GeneratedTestCase(
            title=self._json_text(element, "title", DEFAULT_TITLE) or DEFAULT_TITLE,
            description=self._json_text(element, "description", ""),
            steps=steps or list(DEFAULT_JSON_STEPS),
            expected_result=self._json_text(element, "expectedResult", ""),
            priority=Priority.from_label(self._json_text(element, "priority", Priority.MEDIUM.value)),
        )

    @staticmethod
    def _scalar_text(value: Any) -> Optional[str]:
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return None

    def _json_text(self, element: Dict[str, Any], key: str, default: str) -> str:
        value = element.get(key)
        if value is None:
            return default
        text = self._scalar_text(value)
        if text is None:
            raise TypeError(f"'{key}' is not a string")
        return text

    def _json_steps(self, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        steps = (self._scalar_text(item) for item in value)
        return [step for step in steps if step]

    # ------------------------------------------------------------------
    # Text strategies
    # ------------------------------------------------------------------

    def parse_tc_markers(self, text: str) -> Optional[List[GeneratedTestCase]]:
        return self._cases_from_segments(_segments(text, TC_MARKER_RE))

    def parse_numbered_list(self, text: str) -> Optional[List[GeneratedTestCase]]:
        if TC_MARKER_RE.search(text):
            return None
        return self._cases_from_segments(_segments(text, NUMBERED_MARKER_RE))

    def _cases_from_segments(self, segments: Iterator[str]) -> List[GeneratedTestCase]:
        test_cases = []
        for segment in segments:
            lines = [line.strip() for line in segment.split("\n") if line.strip()]
            if not lines:
                continue
            headline = lines[0]
            test_cases.append(
                GeneratedTestCase(
                    title=f"TC-{len(test_cases) + 1}: {headline}",
                    description=lines[1] if len(lines) > 1 else headline,
                    steps=extract_text_steps(segment),
                    expected_result=extract_text_expected(segment),
                    priority=Priority.MEDIUM,
                )
            )
        return test_cases


def _segments(text: str, marker: "re.Pattern[str]") -> Iterator[str]:
    """Text between consecutive marker matches (the last runs to the end)"""
    matches = list(marker.finditer(text))
    for current, following in zip(matches, matches[1:] + [None]):
        end = following.start() if following is not None else len(text)
        yield text[current.end():end]


def extract_text_steps(text: str) -> List[str]:
    """Numbered/'Step N:' clauses, else Given/When/Then clauses, else default steps"""
    for pattern in (STEP_CLAUSE_RE, GHERKIN_CLAUSE_RE):
        steps = [m.group(1).strip() for m in pattern.finditer(text)]
        steps = [s for s in steps if s]
        if steps:
            return steps
    return list(DEFAULT_TEXT_STEPS)


def extract_text_expected(text: str) -> str:
    for pattern in (EXPECTED_LABEL_RE, OUTCOME_RE):
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return DEFAULT_TEXT_EXPECTED
