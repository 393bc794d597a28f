"""Document model: block and inline nodes, list items, and inline tree utilities"""

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Callable, Iterable, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field


V = TypeVar("V")


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# === INLINES ===


class _InlineNode(_Node):
    """Shared tree operations for every inline variant."""

    def apply(self, transform: Callable[["Inline"], Iterable["Inline"]]) -> list["Inline"]:
        """Rewrite this node bottom-up: children first, then transform the rebuilt node."""
        return list(transform(self))

    def collect(self, extract: Callable[["Inline"], Iterable[V]]) -> list[V]:
        """Fold this node bottom-up: children's values, then this node's own."""
        return list(extract(self))

    @property
    def text(self) -> str:
        return text([self])

    @property
    def image(self) -> Optional["Image"]:
        return None


class _ContainerInline(_InlineNode):
    children: tuple["Inline", ...] = ()

    def apply(self, transform: Callable[["Inline"], Iterable["Inline"]]) -> list["Inline"]:
        rebuilt = self.model_copy(update={"children": tuple(apply(self.children, transform))})
        return list(transform(rebuilt))

    def collect(self, extract: Callable[["Inline"], Iterable[V]]) -> list[V]:
        values = collect(self.children, extract)
        values.extend(extract(self))
        return values


class Text(_InlineNode):
    type: Literal["text"] = "text"
    value: str


class SoftBreak(_InlineNode):
    type: Literal["soft_break"] = "soft_break"


class LineBreak(_InlineNode):
    type: Literal["line_break"] = "line_break"


class Code(_InlineNode):
    type: Literal["code"] = "code"
    value: str


class HTML(_InlineNode):
    type: Literal["html"] = "html"
    value: str


class Emphasis(_ContainerInline):
    type: Literal["emphasis"] = "emphasis"


class Strong(_ContainerInline):
    type: Literal["strong"] = "strong"


class Strikethrough(_ContainerInline):
    type: Literal["strikethrough"] = "strikethrough"


class Link(_ContainerInline):
    type: Literal["link"] = "link"
    destination: str

    @property
    def image(self) -> Optional["Image"]:
        if len(self.children) != 1 or not isinstance(self.children[0], InlineImage):
            return None
        inner = self.children[0]
        return Image(source=inner.source, alt=text(inner.children), destination=self.destination)


class InlineImage(_ContainerInline):
    type: Literal["image"] = "image"
    source: str

    @property
    def image(self) -> Optional["Image"]:
        return Image(source=self.source, alt=text(self.children))


Inline = Annotated[
    Union[
        Text,
        SoftBreak,
        LineBreak,
        Code,
        HTML,
        Emphasis,
        Strong,
        Strikethrough,
        Link,
        InlineImage,
    ],
    Field(discriminator="type"),
]


class Image(_Node):
    """Image descriptor derived from an image inline or a link wrapping one."""
    source:      Optional[str] = None
    alt:         str = ""
    destination: Optional[str] = None


def apply(inlines: Iterable[Inline], transform: Callable[[Inline], Iterable[Inline]]) -> list[Inline]:
    """Rewrite each inline tree bottom-up, splicing in whatever transform returns."""
    return [result for inline in inlines for result in inline.apply(transform)]


def collect(inlines: Iterable[Inline], extract: Callable[[Inline], Iterable[V]]) -> list[V]:
    """Fold each inline tree bottom-up into one flat list, in document order."""
    return [value for inline in inlines for value in inline.collect(extract)]


def _text_values(inline: Inline) -> list[str]:
    return [inline.value] if isinstance(inline, Text) else []


def text(inlines: Iterable[Inline]) -> str:
    """Concatenated literal text of the text inlines, ignoring every other variant."""
    return "".join(collect(inlines, _text_values))


# === BLOCKS ===


class ListItem(_Node):
    blocks: tuple["Block", ...] = ()


class TaskListItem(_Node):
    is_completed: bool = False
    blocks:       tuple["Block", ...] = ()


class Blockquote(_Node):
    type:     Literal["blockquote"] = "blockquote"
    children: tuple["Block", ...] = ()


class BulletedList(_Node):
    type:  Literal["bulleted_list"] = "bulleted_list"
    tight: bool
    items: tuple[ListItem, ...] = ()


class NumberedList(_Node):
    type:  Literal["numbered_list"] = "numbered_list"
    tight: bool
    start: int = Field(default=1, ge=0)
    items: tuple[ListItem, ...] = ()


class TaskList(_Node):
    type:  Literal["task_list"] = "task_list"
    tight: bool
    items: tuple[TaskListItem, ...] = ()


class CodeBlock(_Node):
    type:    Literal["code_block"] = "code_block"
    info:    Optional[str] = None   # fence info string (language)
    content: str = ""


class Paragraph(_Node):
    type:    Literal["paragraph"] = "paragraph"
    inlines: tuple[Inline, ...] = ()


class Heading(_Node):
    type:    Literal["heading"] = "heading"
    level:   int = Field(ge=1, le=6)
    inlines: tuple[Inline, ...] = ()


class ThematicBreak(_Node):
    type: Literal["thematic_break"] = "thematic_break"


Block = Annotated[
    Union[
        Blockquote,
        BulletedList,
        NumberedList,
        TaskList,
        CodeBlock,
        Paragraph,
        Heading,
        ThematicBreak,
    ],
    Field(discriminator="type"),
]


# Update forward references
for _model in (Emphasis, Strong, Strikethrough, Link, InlineImage,
               ListItem, TaskListItem, Blockquote, BulletedList, NumberedList, TaskList):
    _model.model_rebuild()


def _inline_runs(blocks: Iterable[Block]) -> Iterable[tuple[Inline, ...]]:
    """Yield the inline sequence of every leaf block, depth-first."""
    for block in blocks:
        if isinstance(block, (Paragraph, Heading)):
            yield block.inlines
        elif isinstance(block, Blockquote):
            yield from _inline_runs(block.children)
        elif isinstance(block, (BulletedList, NumberedList, TaskList)):
            for item in block.items:
                yield from _inline_runs(item.blocks)


def _images_in(inlines: Iterable[Inline]) -> Iterable[Image]:
    for inline in inlines:
        image = inline.image
        if image is not None:
            yield image
        elif isinstance(inline, _ContainerInline):
            yield from _images_in(inline.children)


def images(blocks: Iterable[Block]) -> list[Image]:
    """Every image in a block tree in document order; a linked image is reported once."""
    return [image for run in _inline_runs(blocks) for image in _images_in(run)]


def _block_lines(block: Any) -> Iterable[str]:
    if isinstance(block, (Paragraph, Heading)):
        yield text(block.inlines)
    elif isinstance(block, CodeBlock):
        yield block.content.rstrip("\n")
    elif isinstance(block, Blockquote):
        for child in block.children:
            yield from _block_lines(child)
    elif isinstance(block, (BulletedList, NumberedList, TaskList)):
        for item in block.items:
            for child in item.blocks:
                yield from _block_lines(child)


def plain_text(blocks: Iterable[Block]) -> str:
    """Flattened text of a block tree, one line per leaf block."""
    return "\n".join(line for block in blocks for line in _block_lines(block))


# === DOCUMENTS ===


class ExtractedDoc(BaseModel):
    """Export contract: a source file's metadata and its block tree."""
    slug: str
    path: str
    hash: str                       # sha256 of the raw file content
    frontmatter: dict[str, Any] = {}
    blocks: list[Block]


@dataclass
class ParsedDoc:
    """Internal read result for one source file; not persisted."""
    path:         Path
    slug:         str
    raw_markdown: str          # full file content (includes frontmatter)
    markdown:     str          # body only (frontmatter stripped)
    hash:         str
    frontmatter:  dict[str, Any]
