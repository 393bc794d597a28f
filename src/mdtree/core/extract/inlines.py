"""HTML node to Inline conversion"""

from typing import Optional

from loguru import logger

from mdtree.core.models import (
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
from mdtree.core.node import HTMLNode, NodeKind


NEWLINES = "\n\r\x0b\x0c\x85\u2028\u2029"

CONTAINER_TAGS = {
    "em":     Emphasis,
    "strong": Strong,
    "del":    Strikethrough,
}


def build_inlines(nodes: list[HTMLNode]) -> list[Inline]:
    """Convert each node to an inline, dropping nodes that contribute nothing."""
    return [inline for inline in map(build_inline, nodes) if inline is not None]


def _text_inline(node: HTMLNode) -> Optional[Inline]:
    content = (node.content or "").strip(NEWLINES)
    if not content:
        return None
    return SoftBreak() if content == " " else Text(value=content)


def build_inline(node: HTMLNode) -> Optional[Inline]:
    """Convert one HTML node and its subtree to an inline, or None."""
    if node.kind is NodeKind.text:
        return _text_inline(node)
    if node.kind is not NodeKind.element:
        return None

    name = node.name
    if name == "br":
        return LineBreak()
    if name == "code":
        return Code(value=node.content or "")
    if name in CONTAINER_TAGS:
        return CONTAINER_TAGS[name](children=build_inlines(node.children))
    if name == "a":
        return Link(destination=node["href"] or "", children=build_inlines(node.children))
    if name == "img":
        alt = node["alt"]
        return InlineImage(
            source=node["src"] or "",
            children=[Text(value=alt)] if alt is not None else [],
        )

    content = node.content
    if not content:
        return None
    logger.debug("Unrecognized inline element <{}> degraded to text", name)
    return Text(value=content)
