"""Outbound link extraction: walk the syntax tree and classify each reference"""

import re
from typing import Callable, Optional

from loguru import logger

from mdxld.core.models import Document, ExtractedLink, RelationshipType
from mdxld.core.tree.build import to_tree
from mdxld.core.tree.nodes import (
    Image, Link, LinkReference, MdxComponent, MdxImportExport, Mention, walk,
    text_content,
)
from mdxld.core.utils.slug import slugify
from mdxld.core.utils.urls import is_absolute_url, is_internal_url, is_relative_path, resolve_url


IMPORT_RE = re.compile(r'''(?:import|export)\s+(?:[\w\s{},*$]+?\s+from\s+)?['"]([^'"]+)['"]''')

# Checked in this order; the first string-literal attribute wins.
EMBED_ATTRIBUTES = ('src', 'href', 'url', 'source')


def import_specifier(statement: str) -> Optional[str]:
    """Module specifier of an import/export statement when it names content.

    Absolute URLs and ./ or ../ paths qualify; bare package names do not.
    """
    m = IMPORT_RE.search(statement)
    if not m:
        return None
    specifier = m.group(1)
    if is_absolute_url(specifier) or is_relative_path(specifier):
        return specifier
    return None


def embed_url(node: MdxComponent) -> Optional[str]:
    for name in EMBED_ATTRIBUTES:
        attr = node.attribute(name)
        if attr is not None and attr.value is not None and not attr.expression:
            return attr.value
    return None


def _position(node) -> dict:
    if node.position is None:
        return {'line': None, 'column': None}
    return {'line': node.position.line, 'column': node.position.column}


def _link(node: Link, base_url):
    return ExtractedLink(
        url=resolve_url(node.url, base_url), type=RelationshipType.link,
        text=text_content(node), title=node.title, **_position(node),
    )


def _reference(node: LinkReference, base_url):
    return ExtractedLink(
        url=resolve_url(node.url, base_url), type=RelationshipType.reference,
        text=text_content(node), title=node.title, label=node.label, **_position(node),
    )


def _image(node: Image, base_url):
    return ExtractedLink(
        url=resolve_url(node.url, base_url), type=RelationshipType.image,
        text=node.alt, title=node.title, **_position(node),
    )


def _import(node: MdxImportExport, base_url):
    specifier = import_specifier(node.value)
    if specifier is None:
        return None
    return ExtractedLink(
        url=resolve_url(specifier, base_url), type=RelationshipType.import_, **_position(node),
    )


def _embed(node: MdxComponent, base_url):
    url = embed_url(node)
    if url is None:
        return None
    return ExtractedLink(
        url=resolve_url(url, base_url), type=RelationshipType.embed, text=node.name,
        attributes={a.name: a.value for a in node.attributes}, **_position(node),
    )


def _mention(node: Mention, base_url):
    if node.kind == 'user':
        url = node.value
    else:
        url = resolve_url(slugify(node.value), base_url)
    return ExtractedLink(
        url=url, type=RelationshipType.mention, text=node.text or node.value, **_position(node),
    )


HANDLERS: dict[type, Callable] = {
    Link:            _link,
    LinkReference:   _reference,
    Image:           _image,
    MdxImportExport: _import,
    MdxComponent:    _embed,
    Mention:         _mention,
}


def extract_links(
    doc: Document,
    *,
    base_url: str | None = None,
    include_images: bool = True,
    include_imports: bool = True,
    include_embeds: bool = True,
    include_mentions: bool = True,
    internal_only: bool = False,
    preset: str = 'gfm-like',
) -> list[ExtractedLink]:
    """Return every outbound link in doc's body, in document order.

    Uses doc.tree when one is attached. With internal_only and a base_url,
    links to other hosts are dropped; without a base_url the filter is a no-op.
    """
    skip = set()
    if not include_images:
        skip.add(Image)
    if not include_imports:
        skip.add(MdxImportExport)
    if not include_embeds:
        skip.add(MdxComponent)
    if not include_mentions:
        skip.add(Mention)

    tree = doc.tree if doc.tree is not None else to_tree(doc, preset)
    links = []
    for node in walk(tree):
        handler = HANDLERS.get(type(node))
        if handler is None or type(node) in skip:
            continue
        link = handler(node, base_url)
        if link is not None:
            links.append(link)

    if internal_only and base_url:
        kept = [link for link in links if is_internal_url(link.url, base_url)]
        logger.debug("internal_only kept {}/{} links for base {}", len(kept), len(links), base_url)
        return kept
    return links
