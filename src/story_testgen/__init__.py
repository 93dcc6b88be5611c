"""Story Test Case Generator"""

from .core.models import (
    AdfNode,
    NodeKind,
    Criterion,
    GeneratedTestCase,
    Priority
)

from .config import JiraSettings, LLMSettings
from .clients.jira_client import JiraClient, JiraError
from .clients.llm_client import LLMClient
from .generators import TestCaseOrchestrator

__version__ = "1.0.0"

__all__ = [
    'AdfNode',
    'NodeKind',
    'Criterion',
    'GeneratedTestCase',
    'Priority',
    'JiraSettings',
    'LLMSettings',
    'JiraClient',
    'JiraError',
    'LLMClient',
    'TestCaseOrchestrator',
]
