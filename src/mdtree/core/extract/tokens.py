"""markdown-it inline syntax tree to Inline conversion"""

from typing import Optional

from loguru import logger
from markdown_it.tree import SyntaxTreeNode

from mdtree.core.models import (
    HTML,
    Code,
    Emphasis,
    Inline,
    InlineImage,
    LineBreak,
    Link,
    SoftBreak,
    Strikethrough,
    Strong,
    Text,
)


CONTAINER_TYPES = {
    "em":     Emphasis,
    "strong": Strong,
    "s":      Strikethrough,
}


def _attr(node: SyntaxTreeNode, name: str) -> str:
    value = node.attrs.get(name)
    return str(value) if value is not None else ""


def tokens_to_inlines(nodes: list[SyntaxTreeNode]) -> list[Inline]:
    """Convert inline syntax tree nodes, skipping unsupported node types."""
    return [inline for inline in map(token_to_inline, nodes) if inline is not None]


def token_to_inline(node: SyntaxTreeNode) -> Optional[Inline]:
    """Convert one inline syntax tree node and its children to an inline, or None."""
    kind = node.type
    if kind == "text":
        return Text(value=node.content)
    if kind == "softbreak":
        return SoftBreak()
    if kind == "hardbreak":
        return LineBreak()
    if kind == "code_inline":
        return Code(value=node.content)
    if kind == "html_inline":
        return HTML(value=node.content)
    if kind in CONTAINER_TYPES:
        return CONTAINER_TYPES[kind](children=tokens_to_inlines(node.children))
    if kind == "link":
        return Link(destination=_attr(node, "href"), children=tokens_to_inlines(node.children))
    if kind == "image":
        return InlineImage(source=_attr(node, "src"), children=tokens_to_inlines(node.children))

    logger.debug("Unknown inline token type '{}' skipped", kind)
    return None
