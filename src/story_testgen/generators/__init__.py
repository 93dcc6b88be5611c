"""
Test Case Generators
Rule-based and model-based derivation of test cases from a story
"""

from .criteria_parser import CriteriaParser
from .rule_based import RuleBasedTestCaseGenerator
from .prompt_builder import PromptBuilder, PromptMessages
from .response_parser import ModelResponseParser
from .orchestrator import TestCaseOrchestrator, GenerationOutcome

__all__ = [
    'CriteriaParser',
    'RuleBasedTestCaseGenerator',
    'PromptBuilder',
    'PromptMessages',
    'ModelResponseParser',
    'TestCaseOrchestrator',
    'GenerationOutcome',
]
