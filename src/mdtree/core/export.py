"""Export: serialise extracted documents to JSON or YAML output files"""

from pathlib import Path

import yaml

from mdtree.core.models import ExtractedDoc


def build_payload(doc: ExtractedDoc) -> dict:
    """Return the JSON-compatible dict for a document, block tree included."""
    return doc.model_dump(mode="json")


def render_doc(doc: ExtractedDoc, fmt: str = "json") -> str:
    """Serialise a document as JSON or YAML text."""
    if fmt == "json":
        return doc.model_dump_json(indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(build_payload(doc), allow_unicode=True, sort_keys=False)
    raise ValueError(f"Unsupported output format: {fmt}")


def write_doc(doc: ExtractedDoc, output_dir: Path, fmt: str = "json") -> Path:
    """Write a single document to output_dir as <slug>.<fmt>. Returns the written path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_file = output_dir / f"{doc.slug}.{fmt}"
    out_file.write_text(render_doc(doc, fmt), encoding="utf-8")
    return out_file
