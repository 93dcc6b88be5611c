"""
Acceptance Criteria Parser
Splits free-form acceptance criteria text into discrete, testable criteria
"""

import logging
import re
from typing import List, Optional

from story_testgen.core.models import Criterion

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 50
MIN_FRAGMENT_LENGTH = 10

DEFAULT_STEPS = [
    "Navigate to the relevant screen",
    "Perform the required action",
    "Verify the expected outcome",
]
DEFAULT_EXPECTED_RESULT = "The feature works as expected"

BULLET_RE = re.compile(r"^[-*•◦▪‣·]\s*(.*)$")
ORDINAL_RE = re.compile(r"^\d+[.)]\s*(.*)$")
LABEL_RE = re.compile(r"^(?:AC:?|Given|When|Then|And|But)\s+(.*)$", re.IGNORECASE)
REQUIREMENT_WORD_RE = re.compile(r"should|must|verify|ensure", re.IGNORECASE)

GHERKIN_CLAUSE_RE = re.compile(
    r"(?:Given|When|Then|And|But)\s+(.+?)(?=(?:Given|When|Then|And|But)|$)",
    re.IGNORECASE,
)
EXPECTATION_RE = re.compile(
    r"(?:should|must|expected|verify|ensure)\s+(.+?)(?:\.|$)",
    re.IGNORECASE,
)

PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]")


def summarize(text: str, limit: int = SUMMARY_LENGTH) -> str:
    """First ``limit`` characters of ``text``, with '...' when truncated"""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def extract_steps(text: str) -> List[str]:
    """Given/When/Then/And/But clauses in order, or the default navigate/perform/verify steps"""
    steps = [m.group(1).strip() for m in GHERKIN_CLAUSE_RE.finditer(text)]
    steps = [s for s in steps if s]
    return steps or list(DEFAULT_STEPS)


def extract_expected_result(text: str) -> str:
    match = EXPECTATION_RE.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return DEFAULT_EXPECTED_RESULT


class CriteriaParser:
    """Parses acceptance criteria text into Criterion records."""

    def parse(self, raw_criteria: Optional[str]) -> List[Criterion]:
        """
        Parse acceptance criteria.

        Structured lines (bullets, ordinals, Gherkin/AC labels, requirement
        sentences) are tried first. When none are found the text is split
        into paragraphs, or failing that into sentences.

        Args:
            raw_criteria: Acceptance criteria as plain text

        Returns:
            Criteria in source order; empty for None or blank input
        """
        if not raw_criteria or not raw_criteria.strip():
            return []

        contents = self._structured_contents(raw_criteria)
        if not contents:
            contents = self._unstructured_contents(raw_criteria)
            logger.debug("No structured criteria found, split text into %d fragment(s)", len(contents))

        return [self.build_criterion(content) for content in contents]

    @staticmethod
    def build_criterion(content: str) -> Criterion:
        return Criterion(
            summary=summarize(content),
            description=content,
            steps=extract_steps(content),
            expected_result=extract_expected_result(content),
        )

    def _structured_contents(self, text: str) -> List[str]:
        contents = []
        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if not line:
                continue
            content = self._match_line(line)
            if content:
                contents.append(content)
        return contents

    @staticmethod
    def _match_line(line: str) -> Optional[str]:
        for pattern in (BULLET_RE, ORDINAL_RE, LABEL_RE):
            match = pattern.match(line)
            if match:
                return match.group(1).strip()

        if len(line) > MIN_FRAGMENT_LENGTH and REQUIREMENT_WORD_RE.search(line):
            return line

        return None

    @staticmethod
    def _unstructured_contents(text: str) -> List[str]:
        paragraphs = [p.strip() for p in PARAGRAPH_SPLIT_RE.split(text) if p.strip()]
        if len(paragraphs) > 1:
            return paragraphs

        fragments = [s.strip() for s in SENTENCE_SPLIT_RE.split(text)]
        return [s for s in fragments if len(s) > MIN_FRAGMENT_LENGTH]
