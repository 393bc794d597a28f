"""Markdown compilation, HTML tree parsing, frontmatter extraction, and file discovery"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger
from lxml import etree, html
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml, unescapeAll
from mdit_py_plugins.tasklists import tasklists_plugin

from mdtree.config import DEFAULT_OPTIONS, ParsingOptions
from mdtree.core.models import ParsedDoc
from mdtree.core.node import HTMLNode, NodeKind
from mdtree.core.utils.hashing import sha256
from mdtree.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}

# GFM tagfilter: raw tags that are escaped in rendered output
TAGFILTER_RE = re.compile(
    r'<(?=/?(?:title|textarea|style|xmp|iframe|noembed|noframes|script|plaintext)[\s/>])',
    re.IGNORECASE,
)


class DocumentModelError(RuntimeError):
    """The Markdown compiler or HTML tree parser could not produce a document."""


def _render_softbreak(self, tokens, idx, options, env) -> str:
    return " "


def _render_del_open(self, tokens, idx, options, env) -> str:
    return "<del>"


def _render_del_close(self, tokens, idx, options, env) -> str:
    return "</del>"


def _render_fence(self, tokens, idx, options, env) -> str:
    token = tokens[idx]
    info = unescapeAll(token.info).strip() if token.info else ""
    lang = info.split(maxsplit=1)[0] if info else ""
    lang_attr = f' lang="{escapeHtml(lang)}"' if lang else ""
    return f"<pre{lang_attr}><code>{escapeHtml(token.content)}</code></pre>\n"


@lru_cache(maxsize=8)
def make_parser(extensions: frozenset[str]) -> MarkdownIt:
    """Build a MarkdownIt instance for the given extension set."""
    md = MarkdownIt("gfm-like", options_update={"linkify": "autolink" in extensions, "html": True})
    for ext, rule in (("strikethrough", "strikethrough"), ("table", "table")):
        if ext in extensions:
            md.enable(rule)
        else:
            md.disable(rule)
    if "tasklist" in extensions:
        tasklists_plugin(md)
    md.add_render_rule("softbreak", _render_softbreak)
    md.add_render_rule("fence", _render_fence)
    md.add_render_rule("s_open", _render_del_open)
    md.add_render_rule("s_close", _render_del_close)
    return md


def compile_markdown(markdown: str, options: ParsingOptions = DEFAULT_OPTIONS) -> str:
    """Render Markdown to HTML with the configured extension set."""
    rendered = make_parser(options.extensions).render(markdown)
    if "tagfilter" in options.extensions:
        rendered = TAGFILTER_RE.sub("&lt;", rendered)
    return rendered


def _tree_depth(element) -> int:
    deepest = 0
    stack = [(element, 1)]
    while stack:
        el, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in el)
    return deepest


class HTMLDocument:
    """A parsed HTML document; owns the lxml tree its nodes view."""

    def __init__(self, markup: str, options: ParsingOptions = DEFAULT_OPTIONS):
        self._root = None
        if not markup.strip():
            return
        parser = html.HTMLParser(
            recover=options.recover,
            no_network=options.no_network,
            remove_blank_text=options.remove_blank_text,
            compact=options.compact,
        )
        try:
            self._root = html.document_fromstring(markup, parser=parser)
        except (etree.ParserError, etree.XMLSyntaxError) as e:
            raise DocumentModelError(f"Failed to parse HTML: {e}") from e

        depth = _tree_depth(self._root)
        if depth > options.max_depth:
            raise DocumentModelError(f"Document nesting depth {depth} exceeds limit of {options.max_depth}")

    @classmethod
    def from_markdown(cls, markdown: str, options: ParsingOptions = DEFAULT_OPTIONS) -> "HTMLDocument":
        try:
            markup = compile_markdown(markdown, options)
        except Exception as e:
            raise DocumentModelError(f"Failed to compile Markdown: {e}") from e
        logger.debug("Compiled {} chars of Markdown to {} chars of HTML", len(markdown), len(markup))
        return cls(markup, options)

    @property
    def root(self) -> Optional[HTMLNode]:
        if self._root is None:
            return None
        return HTMLNode(self._root)

    @property
    def body(self) -> Optional[HTMLNode]:
        root = self.root
        if root is None:
            return None
        return next(
            (node for node in root.children if node.kind is NodeKind.element and node.name == "body"),
            None,
        )


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def parse_file(path: Path) -> ParsedDoc:
    """Read a single markdown file into a ParsedDoc with frontmatter split off."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw)
    slug = frontmatter.get('slug') or slugify(path.stem)
    return ParsedDoc(
        path=path,
        slug=slug,
        raw_markdown=raw,
        markdown=body,
        hash=sha256(raw),
        frontmatter=frontmatter,
    )
