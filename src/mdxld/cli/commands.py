"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from mdxld.config import Settings, load_config
from mdxld.core.extract.relationships import extract_relationships
from mdxld.core.jsonld import to_jsonld
from mdxld.core.loader import FileLoader
from mdxld.core.models import Document
from mdxld.core.parse import parse, parse_with_tree
from mdxld.core.pipeline import run_ingest
from mdxld.core.stringify import stringify
from mdxld.core.validate import validate_text
from mdxld.crud.database import init_db, make_engine
from mdxld.crud.sql_store import SQLStore


ModeOption = Annotated[Optional[str], typer.Option("--mode", help="expanded or flat")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _read(path: str) -> str:
    try:
        return FileLoader().load(path)
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


def _echo_json(data) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _document_json(doc: Document, tree: bool) -> dict:
    data = doc.model_dump(mode="json", exclude_none=True)
    if tree and doc.tree is not None:
        data["tree"] = doc.tree.model_dump(mode="json", exclude_none=True)
    return data


def parse_cmd(
    path: Annotated[str, typer.Argument(help="Document to parse")],
    mode: ModeOption = None,
    tree: Annotated[bool, typer.Option("--tree", help="Include the body syntax tree")] = False,
    jsonld: Annotated[bool, typer.Option("--jsonld", help="Print the frontmatter as JSON-LD")] = False,
    ):
    """Parse a document and print it as JSON."""
    settings = _settings(overrides={"mode": mode})
    text = _read(path)
    if tree:
        doc = parse_with_tree(text, settings.mode, settings.parser_preset)
    else:
        doc = parse(text, settings.mode)
    _echo_json(to_jsonld(doc) if jsonld else _document_json(doc, tree))


def stringify_cmd(
    path: Annotated[str, typer.Argument(help="Document to normalize")],
    mode: ModeOption = None,
    out: Annotated[Optional[str], typer.Option("--out", help="Write to this file instead of stdout")] = None,
    ):
    """Parse a document and write it back in canonical form."""
    settings = _settings(overrides={"mode": mode})
    text = stringify(parse(_read(path), settings.mode))
    if out:
        Path(out).write_text(text, encoding="utf-8")
        typer.echo(f"  {path} -> {out}")
    else:
        typer.echo(text, nl=False)


def validate_cmd(
    path: Annotated[str, typer.Argument(help="Document to check")],
    mode: ModeOption = None,
    ):
    """Strictly check a document's frontmatter; exit 1 on problems."""
    settings = _settings(overrides={"mode": mode})
    result = validate_text(_read(path), settings.mode)
    if not result.success:
        for error in result.errors:
            typer.echo(f"  {error}", err=True)
        _fail(f"{path} is not a valid document")
    typer.echo(f"{path}: ok")


def links_cmd(
    path: Annotated[str, typer.Argument(help="Document to scan")],
    source_id: Annotated[Optional[str], typer.Option("--source-id", help="Relationship source; defaults to $id or the path")] = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Resolve relative targets against this URL")] = None,
    internal_only: Annotated[Optional[bool], typer.Option("--internal-only/--all-hosts", help="Keep only links to the base URL's host")] = None,
    images: Annotated[Optional[bool], typer.Option("--images/--no-images")] = None,
    imports: Annotated[Optional[bool], typer.Option("--imports/--no-imports")] = None,
    embeds: Annotated[Optional[bool], typer.Option("--embeds/--no-embeds")] = None,
    mentions: Annotated[Optional[bool], typer.Option("--mentions/--no-mentions")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print relationships as JSON")] = False,
    ):
    """Extract outbound relationships from a document."""
    settings = _settings(overrides={
        "base_url": base_url, "internal_only": internal_only,
        "include_images": images, "include_imports": imports,
        "include_embeds": embeds, "include_mentions": mentions,
    })
    doc = parse_with_tree(_read(path), settings.mode, settings.parser_preset)
    source = source_id or doc.identifier or path
    rels = extract_relationships(doc, source, **settings.extract_options())
    if as_json:
        _echo_json([r.model_dump(mode="json", by_alias=True) for r in rels])
        return
    for r in rels:
        typer.echo(f"{r.type.value}\t{r.to}\t{r.data.get('line')}:{r.data.get('column')}")
    typer.echo(f"{len(rels)} relationship(s) from {source}")


def ingest_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to ingest")],
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="SQLAlchemy database URL")] = None,
    mode: ModeOption = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Resolve relative targets against this URL")] = None,
    ):
    """Store documents and their relationships in the database."""
    settings = _settings(overrides={"db_url": db_url, "mode": mode, "base_url": base_url})
    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            counts, changes = run_ingest(path, SQLStore(session), settings)
    except Exception as e:
        _fail("Ingest failed", e)
    for status, doc_id in changes:
        typer.echo(f"  {status}: {doc_id}")
    typer.echo(
        f"Ingest complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['relationships']} relationship(s)"
    )


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")
