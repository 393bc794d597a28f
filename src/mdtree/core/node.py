"""Read-only view over lxml HTML tree nodes, with text runs exposed as nodes"""

from enum import Enum
from typing import Optional

from lxml import etree


# HTML 4 elements the libxml2 tag registry classifies as block level.
# Tags outside the registry (most HTML5 additions) are never block elements.
BLOCK_TAGS = frozenset({
    "address", "area", "base", "blockquote", "body", "caption", "center", "col",
    "colgroup", "dd", "dir", "div", "dl", "dt", "fieldset", "form", "frame",
    "frameset", "h1", "h2", "h3", "h4", "h5", "h6", "head", "hr", "html",
    "isindex", "legend", "li", "link", "menu", "meta", "noframes", "noscript",
    "ol", "optgroup", "option", "p", "param", "pre", "style", "table", "tbody",
    "td", "tfoot", "th", "thead", "title", "tr", "ul",
})

# Text runs that are pure structural noise between elements
NOISE = ("", "\n")


class NodeKind(str, Enum):
    element = "element"
    text = "text"
    other = "other"


class HTMLNode:
    """One node of a parsed HTML tree: an element, a text run, or anything else.

    lxml keeps character data on the ``text``/``tail`` of elements; this view
    turns those runs into text nodes so children come back in document order.
    Accessors never mutate the tree and never raise: absent data is ``None``.
    """

    __slots__ = ("_element", "_text")

    def __init__(self, element=None, text: Optional[str] = None):
        self._element = element
        self._text = text

    @classmethod
    def text_run(cls, text: str) -> "HTMLNode":
        return cls(text=text)

    def __repr__(self) -> str:
        if self.kind is NodeKind.text:
            return f"HTMLNode(text={self._text!r})"
        return f"HTMLNode(<{self.name}>)"

    @property
    def kind(self) -> NodeKind:
        if self._element is None:
            return NodeKind.text
        if isinstance(self._element.tag, str):
            return NodeKind.element
        return NodeKind.other

    @property
    def name(self) -> Optional[str]:
        if self.kind is not NodeKind.element:
            return None
        return self._element.tag.lower()

    @property
    def is_block_element(self) -> bool:
        return self.name in BLOCK_TAGS

    def __getitem__(self, attribute: str) -> Optional[str]:
        if self.kind is not NodeKind.element:
            return None
        if attribute not in self._element.attrib:
            return None
        return self._element.get(attribute) or ""

    @property
    def content(self) -> Optional[str]:
        """Text content: the run itself, or every descendant text run of an element."""
        kind = self.kind
        if kind is NodeKind.text:
            return self._text
        if kind is NodeKind.element:
            return etree.tostring(self._element, method="text", encoding="unicode", with_tail=False)
        return self._element.text

    @property
    def children(self) -> list["HTMLNode"]:
        """Child elements and text runs in document order, minus empty and lone-newline runs."""
        if self.kind is not NodeKind.element:
            return []
        nodes = []
        if self._element.text is not None:
            nodes.append(HTMLNode.text_run(self._element.text))
        for child in self._element:
            nodes.append(HTMLNode(child))
            if child.tail is not None:
                nodes.append(HTMLNode.text_run(child.tail))
        return [
            node for node in nodes
            if node.kind is NodeKind.element
            or (node.kind is NodeKind.text and node.content not in NOISE)
        ]
