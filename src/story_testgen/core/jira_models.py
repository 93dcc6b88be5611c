"""
Pydantic models for the Jira REST payloads used by the generator.

Only the fields the pipeline depends on are declared; everything else in the
Jira response is ignored.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from story_testgen.utils.adf import extract_text


class JiraIssueType(BaseModel):
    """Issue type reference (Story, Bug, Test, ...)"""
    model_config = ConfigDict(extra="ignore")

    name: str
    id: Optional[str] = None


class JiraProject(BaseModel):
    """Project the issue belongs to"""
    model_config = ConfigDict(extra="ignore")

    key: str
    id: Optional[str] = None
    name: Optional[str] = None


class JiraFields(BaseModel):
    """
    Issue fields.

    ``description`` and ``acceptance_criteria`` may be ADF documents, plain
    strings or null depending on the field configuration. The acceptance
    criteria custom field id is instance specific, so the client copies it
    into ``acceptance_criteria`` before validation.
    """
    model_config = ConfigDict(extra="ignore")

    summary: Optional[str] = ""
    description: Optional[Any] = None
    acceptance_criteria: Optional[Any] = None
    issuetype: JiraIssueType
    project: JiraProject


class JiraIssue(BaseModel):
    """Issue returned by GET /rest/api/3/issue/{key}"""
    model_config = ConfigDict(extra="ignore")

    id: str
    key: str
    fields: JiraFields

    def description_text(self) -> str:
        return extract_text(self.fields.description)

    def acceptance_criteria_text(self) -> str:
        return extract_text(self.fields.acceptance_criteria)

    def story_text(self) -> str:
        """Summary and description joined by a blank line, skipping blank parts"""
        parts = [self.fields.summary or "", self.description_text()]
        return "\n\n".join(p.strip() for p in parts if p and p.strip())

    @property
    def issue_type(self) -> str:
        return self.fields.issuetype.name


class ProjectReference(BaseModel):
    """Project reference for issue creation, by key or id"""
    key: Optional[str] = None
    id: Optional[str] = None

    @model_validator(mode="after")
    def _require_key_or_id(self):
        if not self.key and not self.id:
            raise ValueError("Either project key or project id must be provided")
        return self

    def to_payload(self) -> Dict[str, str]:
        return self.model_dump(exclude_none=True)


class CreatedIssue(BaseModel):
    """Response of POST /rest/api/3/issue"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    key: str
    self_url: str = Field(default="", alias="self")


class JiraProjectInfo(BaseModel):
    """Entry of GET /rest/api/3/project"""
    model_config = ConfigDict(extra="ignore")

    id: str
    key: str
    name: str = ""


class JiraErrorResponse(BaseModel):
    """Jira error body: generic messages plus per-field validation errors"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    error_messages: List[str] = Field(default_factory=list, alias="errorMessages")
    errors: Dict[str, Any] = Field(default_factory=dict)

    def messages(self) -> List[str]:
        result = list(self.error_messages)
        result.extend(f"{field}: {message}" for field, message in self.errors.items())
        return result
