"""Frontmatter decoding and document parsing"""

from dataclasses import dataclass, field
from typing import Any

import yaml
from loguru import logger

from mdxld.core.linked_data import normalize
from mdxld.core.models import Document, Mode
from mdxld.core.tree.build import to_tree


MARKER = '---'


class FrontmatterError(ValueError):
    """A malformed frontmatter block. line/column are 1-based and file-relative."""

    def __init__(self, message: str, line: int, column: int = 1):
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


@dataclass(frozen=True)
class Frontmatter:
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ''


def _is_marker(line: str) -> bool:
    return line.rstrip() == MARKER


def split_frontmatter(text: str) -> tuple[str, str] | None:
    """Return (block, body) when text opens with a metadata block, else None.

    Only the two marker lines are consumed; the body is kept verbatim.
    Raises FrontmatterError when the block is never closed.
    """
    lines = text.split('\n')
    if not _is_marker(lines[0]):
        return None
    for i in range(1, len(lines)):
        if _is_marker(lines[i]):
            return '\n'.join(lines[1:i]), '\n'.join(lines[i + 1:])
    raise FrontmatterError("Unterminated frontmatter block", line=1)


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader whose mapping keys are always str, so `1` and `true` stay distinct."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            mapping[key if isinstance(key, str) else str(key)] = self.construct_object(value_node, deep=deep)
        return mapping


def load_block(block: str) -> dict[str, Any]:
    """Parse a frontmatter block with a safe YAML loader; raises FrontmatterError."""
    if not block.strip():
        return {}
    try:
        data = yaml.load(block, Loader=_FrontmatterLoader)
    except yaml.YAMLError as e:
        mark = getattr(e, 'problem_mark', None) or getattr(e, 'context_mark', None)
        # block starts on line 2 of the document
        line = mark.line + 2 if mark else 2
        column = mark.column + 1 if mark else 1
        problem = getattr(e, 'problem', None) or str(e)
        raise FrontmatterError(f"Invalid YAML frontmatter: {problem}", line, column) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}", line=2,
        )
    return data


def decode(text: str) -> Frontmatter:
    """Split text into (metadata, body).

    Malformed blocks never raise: the whole text becomes the body, metadata is
    empty, and a warning names the offending line/column.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    try:
        split = split_frontmatter(text)
        if split is None:
            return Frontmatter(metadata={}, body=text)
        block, body = split
        return Frontmatter(metadata=load_block(block), body=body)
    except FrontmatterError as e:
        logger.warning("Treating document as body-only: {}", e)
        return Frontmatter(metadata={}, body=text)


def parse(text: str, mode: Mode | str = Mode.expanded) -> Document:
    """Parse an MDXLD document. expanded lifts $id/$type/$context; flat keeps them in metadata."""
    fm = decode(text)
    return normalize(fm.metadata, mode=mode, body=fm.body)


def parse_with_tree(text: str, mode: Mode | str = Mode.expanded, preset: str = 'gfm-like') -> Document:
    """Parse text and attach the body's syntax tree."""
    doc = parse(text, mode)
    return doc.with_tree(to_tree(doc, preset))
