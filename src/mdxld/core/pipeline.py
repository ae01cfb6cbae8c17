"""Ingest pipeline: discover -> load -> parse -> save -> extract -> ingest"""

from pathlib import Path

from loguru import logger

from mdxld.config import Settings
from mdxld.core.extract.relationships import extract_relationships
from mdxld.core.loader import FileLoader, discover_files
from mdxld.core.models import Document
from mdxld.core.parse import parse_with_tree
from mdxld.crud.store import DocumentStore


def document_id(doc: Document, path: Path, root: Path) -> str:
    """The document's $id when it has one, else its path relative to root."""
    identifier = doc.identifier or doc.metadata.get("$id")
    if isinstance(identifier, str) and identifier:
        return identifier
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def run_ingest(
    path: str | Path,
    store: DocumentStore,
    settings: Settings,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Parse every document under path into store and replace its relationships.

    Returns (counts, changes) where counts has created/updated/unchanged/relationships
    and changes lists (status, id) for created or updated documents.
    """
    path = Path(path)
    root = path if path.is_dir() else path.parent
    loader = FileLoader()
    counts = {"created": 0, "updated": 0, "unchanged": 0, "relationships": 0}
    changes = []
    for p in discover_files(path):
        try:
            doc = parse_with_tree(loader.load(p), settings.mode, settings.parser_preset)
        except (OSError, UnicodeDecodeError) as e:
            raise RuntimeError(f"Failed to load {p}: {e}") from e
        doc_id = document_id(doc, p, root)
        result = store.save(doc_id, doc)
        counts[result.status] += 1
        if result.status != "unchanged":
            changes.append((result.status, doc_id))

        store.delete_relationships(doc_id)
        rels = extract_relationships(doc, doc_id, **settings.extract_options())
        store.ingest(rels)
        counts["relationships"] += len(rels)
        logger.debug("{}: {} ({} relationships)", result.status, doc_id, len(rels))
    return counts, changes
