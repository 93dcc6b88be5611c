"""
Configuration for the Jira and model collaborators.

Settings are plain objects built explicitly (or from environment variables via
``from_env``) and passed to the clients; nothing here is global.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_AC_FIELD = "customfield_10026"
DEFAULT_LLM_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_LLM_MODEL = "llama-3.1-8b-instant"


def normalize_base_url(base_url: str) -> str:
    """
    Normalize a Jira base URL.

    Adds https:// when the scheme is missing, repairs 'https:/host' style
    typos and strips trailing slashes.

    Raises:
        ValueError: If the URL is empty
    """
    url = (base_url or "").strip()
    if not url:
        raise ValueError("Base URL cannot be empty")

    if url.startswith(("http://", "https://")):
        pass
    elif url.startswith("http:/"):
        url = url.replace("http:/", "http://", 1)
    elif url.startswith("https:/"):
        url = url.replace("https:/", "https://", 1)
    else:
        url = f"https://{url}"

    return url.rstrip("/")


@dataclass
class JiraSettings:
    """Connection and field settings for a Jira Cloud site"""
    base_url: str
    email: str
    api_token: str
    acceptance_criteria_field: str = DEFAULT_AC_FIELD
    test_issue_type: str = "Test"
    link_type: str = "Tests"
    pending_resolution: str = "Pending"
    timeout: int = 30

    def __post_init__(self):
        """Validate credentials and normalize the URL"""
        self.base_url = normalize_base_url(self.base_url)
        self.email = (self.email or "").strip()
        self.api_token = (self.api_token or "").strip()
        if not self.email:
            raise ValueError("Email cannot be empty")
        if not self.api_token:
            raise ValueError("API Token cannot be empty")

    @classmethod
    def from_env(cls) -> "JiraSettings":
        return cls(
            base_url=os.getenv("JIRA_BASE_URL", ""),
            email=os.getenv("JIRA_EMAIL", ""),
            api_token=os.getenv("JIRA_API_TOKEN", ""),
            acceptance_criteria_field=os.getenv("JIRA_AC_FIELD", DEFAULT_AC_FIELD),
            test_issue_type=os.getenv("JIRA_TEST_ISSUE_TYPE", "Test"),
            link_type=os.getenv("JIRA_LINK_TYPE", "Tests"),
        )


@dataclass
class LLMSettings:
    """Model endpoint settings; the model path is enabled only with an API key"""
    api_key: Optional[str] = None
    model: str = DEFAULT_LLM_MODEL
    base_url: str = DEFAULT_LLM_BASE_URL
    temperature: float = 0.9
    max_tokens: int = 8000
    timeout: float = 60.0

    def __post_init__(self):
        self.api_key = (self.api_key or "").strip()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "LLMSettings":
        return cls(
            api_key=os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY"),
            model=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
            base_url=os.getenv("LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
        )
