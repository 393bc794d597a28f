"""HTML node to Block conversion, including list item decomposition"""

import re
from itertools import dropwhile, takewhile
from typing import Optional

from loguru import logger

from mdtree.core.extract.inlines import build_inlines
from mdtree.core.models import (
    Block,
    Blockquote,
    BulletedList,
    CodeBlock,
    Heading,
    Inline,
    ListItem,
    NumberedList,
    Paragraph,
    TaskList,
    TaskListItem,
    Text,
    ThematicBreak,
)
from mdtree.core.node import HTMLNode, NodeKind


HEADING_LEVELS: dict[str, int] = {f"h{level}": level for level in range(1, 7)}

START_RE = re.compile(r"[+-]?[0-9]+")


def build_blocks(nodes: list[HTMLNode]) -> list[Block]:
    """Convert each node to a block, dropping nodes that produce none."""
    return [block for block in map(build_block, nodes) if block is not None]


def build_block(node: HTMLNode) -> Optional[Block]:
    """Convert one HTML node and its subtree to a block, or None."""
    if node.kind is not NodeKind.element or node.name is None:
        return None

    name = node.name
    if name == "blockquote":
        return Blockquote(children=build_blocks(node.children))
    if name in ("ul", "ol") and has_task_list_items(node):
        return TaskList(
            tight=is_tight_list(node),
            items=[_task_list_item(child) for child in node.children if _is_list_item(child)],
        )
    if name == "ul":
        return BulletedList(
            tight=is_tight_list(node),
            items=[_list_item(child) for child in node.children if _is_list_item(child)],
        )
    if name == "ol":
        return NumberedList(
            tight=is_tight_list(node),
            start=list_start(node),
            items=[_list_item(child) for child in node.children if _is_list_item(child)],
        )
    if name == "pre":
        return CodeBlock(info=node["lang"], content=node.content or "")
    if name == "p":
        return Paragraph(inlines=build_inlines(node.children))
    if name in HEADING_LEVELS:
        return Heading(level=HEADING_LEVELS[name], inlines=build_inlines(node.children))
    if name == "table":
        logger.debug("Table dropped; tables produce no block")
        return None
    if name == "hr":
        return ThematicBreak()

    content = node.content
    if not content:
        return None
    logger.debug("Unrecognized block element <{}> degraded to paragraph", name)
    return Paragraph(inlines=[Text(value=content)])


# --- list helpers ---

def _is_list_item(node: HTMLNode) -> bool:
    return node.kind is NodeKind.element and node.name == "li"


def _checkbox(item: HTMLNode) -> Optional[HTMLNode]:
    """Locate the checkbox input: a direct child, or the first child of a p child."""
    for child in item.children:
        if child.name == "input":
            return child
        if child.name == "p":
            first = next(iter(child.children), None)
            if first is not None and first.name == "input":
                return first
    return None


def is_task_list_item(node: HTMLNode) -> bool:
    return _is_list_item(node) and _checkbox(node) is not None


def has_task_list_items(node: HTMLNode) -> bool:
    return any(is_task_list_item(child) for child in node.children)


def is_task_list_item_checked(node: HTMLNode) -> bool:
    """True if the item's first child, or that child's first child, carries `checked`."""
    if not _is_list_item(node):
        return False
    first = next(iter(node.children), None)
    if first is None:
        return False
    if first["checked"] is not None:
        return True
    nested = next(iter(first.children), None)
    return nested is not None and nested["checked"] is not None


def is_tight_list(node: HTMLNode) -> bool:
    """A list is tight unless its first item's first child is a paragraph."""
    if node.kind is not NodeKind.element or node.name not in ("ul", "ol"):
        return False
    first_item = next(iter(node.children), None)
    if first_item is None:
        return True
    first_child = next(iter(first_item.children), None)
    return first_child is None or first_child.name != "p"


def list_start(node: HTMLNode) -> int:
    """The ol start attribute, or 1 when absent, unparsable, or negative."""
    value = node["start"] if node.name == "ol" else None
    if value is None:
        return 1
    if START_RE.fullmatch(value) is None:
        return 1
    start = int(value)
    return start if start >= 0 else 1


def list_item_blocks(node: HTMLNode) -> list[Block]:
    """Leading non-block children become one paragraph, followed by the remaining blocks."""
    if not _is_list_item(node):
        return []

    children = node.children
    blocks: list[Block] = []

    inlines = build_inlines(list(takewhile(lambda n: not n.is_block_element, children)))
    if inlines:
        blocks.append(Paragraph(inlines=inlines))

    blocks.extend(build_blocks(list(dropwhile(lambda n: not n.is_block_element, children))))
    return blocks


def _trim_leading_whitespace(blocks: list[Block]) -> list[Block]:
    """Strip leading whitespace from the first text inline of a leading paragraph."""
    if not blocks or not isinstance(blocks[0], Paragraph):
        return blocks
    return [Paragraph(inlines=_trim_inlines(blocks[0].inlines)), *blocks[1:]]


def _trim_inlines(inlines: tuple[Inline, ...]) -> list[Inline]:
    if not inlines or not isinstance(inlines[0], Text):
        return list(inlines)
    return [Text(value=inlines[0].value.lstrip()), *inlines[1:]]


def _task_list_item(node: HTMLNode) -> TaskListItem:
    return TaskListItem(
        is_completed=is_task_list_item_checked(node),
        blocks=_trim_leading_whitespace(list_item_blocks(node)),
    )


def _list_item(node: HTMLNode) -> ListItem:
    return ListItem(blocks=list_item_blocks(node))
