"""Serialize Documents back to frontmatter + body text"""

from typing import Any

import yaml

from mdxld.core.linked_data import denormalize
from mdxld.core.models import Document, Mode


MARKER = '---'


def dump_block(metadata: dict[str, Any]) -> str:
    """Render metadata as a YAML block (block sequences, indented mappings), newline-terminated."""
    return yaml.safe_dump(metadata, default_flow_style=False, allow_unicode=True, sort_keys=False)


def encode(metadata: dict[str, Any], body: str) -> str:
    """Return body with a frontmatter block prepended.

    With no metadata the body is returned alone, unless its first line is a
    marker line, which needs an empty block in front to survive re-parsing.
    """
    if not metadata:
        if body.split('\n', 1)[0].rstrip() == MARKER:
            return f"{MARKER}\n{MARKER}\n{body}"
        return body
    return f"{MARKER}\n{dump_block(metadata)}{MARKER}\n{body}"


def stringify(doc: Document, mode: Mode | str | None = None) -> str:
    """Inverse of parse: rebuild the document text, defaulting to the mode doc was parsed in."""
    return encode(denormalize(doc, mode), doc.body)
