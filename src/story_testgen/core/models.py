"""
Core data models for the story test case generator.

Atlassian Document Format nodes, parsed acceptance criteria and the
canonical generated test case record shared by both generation paths.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum


class Priority(Enum):
    """Test priority levels"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "Priority":
        """Map a free-form label (e.g. 'high', ' Low ') to a Priority, defaulting to MEDIUM"""
        if isinstance(label, Priority):
            return label
        if not label:
            return cls.MEDIUM
        wanted = str(label).strip().lower()
        for priority in cls:
            if priority.value.lower() == wanted:
                return priority
        return cls.MEDIUM


class NodeKind(Enum):
    """ADF node types the extractor understands"""
    DOC = "doc"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    MEDIA = "media"
    MEDIA_SINGLE = "mediaSingle"
    OTHER = "other"

    @classmethod
    def from_type(cls, type_name: Optional[str]) -> "NodeKind":
        for kind in cls:
            if kind is not cls.OTHER and kind.value == type_name:
                return kind
        return cls.OTHER


@dataclass
class AdfNode:
    """
    A node in an Atlassian Document Format tree.

    Leaf kinds (text, hardBreak, media) keep an empty ``children`` list.
    ``type_name`` preserves the raw Jira type for kinds mapped to OTHER
    (bulletList, listItem, heading, ...).
    """
    kind: NodeKind
    children: List["AdfNode"] = field(default_factory=list)
    text: Optional[str] = None
    type_name: Optional[str] = None

    def __post_init__(self):
        if self.type_name is None:
            self.type_name = self.kind.value

    @classmethod
    def doc(cls, children: List["AdfNode"]) -> "AdfNode":
        return cls(NodeKind.DOC, children=list(children))

    @classmethod
    def paragraph(cls, children: Optional[List["AdfNode"]] = None) -> "AdfNode":
        return cls(NodeKind.PARAGRAPH, children=list(children or []))

    @classmethod
    def text_node(cls, text: str) -> "AdfNode":
        return cls(NodeKind.TEXT, text=text)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdfNode":
        """
        Build a node tree from raw ADF JSON as returned by the Jira API.

        Non-dict children are dropped and non-string text is stringified
        rather than raising.
        """
        if not isinstance(data, dict):
            return cls(NodeKind.OTHER, type_name="")

        type_name = data.get("type")
        kind = NodeKind.from_type(type_name)

        children = []
        content = data.get("content")
        if isinstance(content, list):
            for child in content:
                if isinstance(child, dict):
                    children.append(cls.from_dict(child))

        text = data.get("text") if kind is NodeKind.TEXT else None
        if text is not None and not isinstance(text, str):
            text = str(text)

        return cls(kind, children=children, text=text, type_name=type_name or "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ADF JSON shape accepted by Jira"""
        if self.kind is NodeKind.DOC:
            return {
                "version": 1,
                "type": "doc",
                "content": [child.to_dict() for child in self.children],
            }
        if self.kind is NodeKind.TEXT:
            return {"type": "text", "text": self.text or ""}

        result: Dict[str, Any] = {"type": self.type_name}
        if self.children or self.kind is NodeKind.PARAGRAPH:
            result["content"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class Criterion:
    """One discrete, testable requirement parsed from acceptance criteria"""
    summary: str
    description: str
    steps: List[str]
    expected_result: str


@dataclass
class GeneratedTestCase:
    """Canonical test case produced by the rule-based or model path"""
    title: str
    description: str = ""
    steps: List[str] = field(default_factory=list)
    expected_result: str = ""
    priority: Priority = Priority.MEDIUM

    def __post_init__(self):
        """Validate test case data"""
        if not self.title or not self.title.strip():
            raise ValueError("Test case title cannot be empty")
        if not isinstance(self.priority, Priority):
            self.priority = Priority.from_label(self.priority)

    def is_submittable(self) -> bool:
        """A test case can be sent to Jira only when it has at least one non-empty step"""
        return any(step and step.strip() for step in self.steps)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "title": self.title,
            "description": self.description,
            "steps": list(self.steps),
            "expectedResult": self.expected_result,
            "priority": self.priority.value,
        }
