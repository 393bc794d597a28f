"""Pipeline step functions: Markdown to document model, extraction and export orchestration"""

from pathlib import Path

from loguru import logger
from markdown_it.tree import SyntaxTreeNode

from mdtree.config import DEFAULT_OPTIONS, ParsingOptions
from mdtree.core.export import write_doc
from mdtree.core.extract.blocks import build_blocks
from mdtree.core.extract.tokens import tokens_to_inlines
from mdtree.core.models import Block, ExtractedDoc, Inline, ParsedDoc
from mdtree.core.parse import HTMLDocument, make_parser, discover_files, parse_file


def document_model(source: str, options: ParsingOptions = DEFAULT_OPTIONS) -> list[Block]:
    """Convert Markdown source text to its block tree.

    Raises DocumentModelError when the source cannot be compiled or parsed;
    a document without a body yields an empty list.
    """
    body = HTMLDocument.from_markdown(source, options).body
    if body is None:
        return []
    blocks = build_blocks(body.children)
    logger.debug("Built {} top-level block(s)", len(blocks))
    return blocks


def inline_model(source: str, options: ParsingOptions = DEFAULT_OPTIONS) -> list[Inline]:
    """Convert a run of inline Markdown directly from the compiler's syntax tree."""
    tokens = make_parser(options.extensions).parseInline(source)
    root = SyntaxTreeNode(tokens)
    return [inline for node in root.children for inline in tokens_to_inlines(node.children)]


def extract_doc(parsed: ParsedDoc, options: ParsingOptions = DEFAULT_OPTIONS) -> ExtractedDoc:
    """Convert a ParsedDoc into its exported document model."""
    return ExtractedDoc(
        slug=parsed.slug,
        path=str(parsed.path),
        hash=parsed.hash,
        frontmatter=parsed.frontmatter,
        blocks=document_model(parsed.markdown, options),
    )


def run_extract(
    path: str,
    output_dir: Path,
    options: ParsingOptions = DEFAULT_OPTIONS,
    fmt: str = "json",
    ) -> list[tuple[Path, Path]]:
    """Build the document model for every file under path. Returns (source_path, output_file) pairs."""
    results = []
    for p in discover_files(Path(path)):
        try:
            doc = extract_doc(parse_file(p), options)
            results.append((p, write_doc(doc, output_dir, fmt)))
        except Exception as e:
            raise RuntimeError(f"Failed to extract {p}: {e}") from e
    return results
