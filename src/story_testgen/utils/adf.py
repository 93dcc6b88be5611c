"""
Atlassian Document Format helpers.

Converts Jira rich-text fields (ADF trees or legacy plain strings) to flat text
for the generators, and plain text back to ADF for issue creation.
"""
from typing import Any, Dict, Optional, Union

from story_testgen.core.models import AdfNode, NodeKind

MEDIA_PLACEHOLDER = "[Media attachment]"

AdfInput = Optional[Union[AdfNode, Dict[str, Any], str]]


def extract_text(node: AdfInput) -> str:
    """
    Flatten an ADF node (or plain string) to text.

    Paragraphs end with a newline, hard breaks become newlines and media
    nodes are replaced with a placeholder. Unknown node kinds contribute
    the text of their children.

    Args:
        node: ADF node, raw ADF dict, plain string or None

    Returns:
        Extracted text ("" for None or unrecognised input)
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, dict):
        node = AdfNode.from_dict(node)
    if not isinstance(node, AdfNode):
        return ""
    return _walk(node)


def _walk(node: AdfNode) -> str:
    kind = node.kind

    if kind is NodeKind.TEXT:
        return node.text or ""
    if kind in (NodeKind.MEDIA, NodeKind.MEDIA_SINGLE):
        return MEDIA_PLACEHOLDER
    if kind is NodeKind.HARD_BREAK:
        return "\n"

    inner = "".join(_walk(child) for child in node.children)
    if kind is NodeKind.PARAGRAPH:
        return inner + "\n"
    return inner


def text_to_document(text: Optional[str]) -> AdfNode:
    """
    Convert plain text to an ADF document, one paragraph per line.

    Blank lines become empty paragraphs; the document always holds at
    least one paragraph.
    """
    if not text or not text.strip():
        return AdfNode.doc([AdfNode.paragraph()])

    paragraphs = []
    for line in text.split("\n"):
        if not line.strip():
            paragraphs.append(AdfNode.paragraph())
        else:
            paragraphs.append(AdfNode.paragraph([AdfNode.text_node(line)]))

    return AdfNode.doc(paragraphs)
