"""Convert a document body into a typed syntax tree via markdown-it tokens"""

import re

from markdown_it import MarkdownIt

from mdxld.core.models import Document
from mdxld.core.stringify import dump_block
from mdxld.core.linked_data import denormalize
from mdxld.core.tree.mdx import mdx_plugin, parse_attributes
from mdxld.core.tree.nodes import (
    Blockquote, Break, Code, Delete, Emphasis, Heading, Html, Image, InlineCode,
    Link, LinkReference, List, ListItem, MdxComponent, MdxImportExport, Mention,
    Paragraph, Position, Root, Strong, Table, TableCell, TableRow, Text,
    ThematicBreak, Yaml,
)
from mdxld.core.utils.tokens import code_info, heading_level


INLINE_OPEN_RE = re.compile(r'^<([A-Za-z][\w.-]*)(.*?)(/?)>$', re.DOTALL)
INLINE_CLOSE_RE = re.compile(r'^</([A-Za-z][\w.-]*)\s*>$')
ALIGN_RE = re.compile(r'text-align:\s*(\w+)')

# HTML elements that never take a close tag
VOID_ELEMENTS = {
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input', 'link', 'meta',
    'param', 'source', 'track', 'wbr',
}


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name with the MDX rules enabled."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    return md.use(mdx_plugin)


def _normalize_newlines(text: str) -> str:
    return text.replace('\r\n', '\n').replace('\r', '\n')


class _TreeBuilder:
    """Folds a flat markdown-it token stream into nested nodes."""

    def __init__(self, source: str):
        self.lines = _normalize_newlines(source).split('\n')
        self.last_line = 0

    def _block_position(self, token) -> Position | None:
        if not token.map:
            return None
        line = token.map[0]
        self.last_line = line
        text = self.lines[line] if line < len(self.lines) else ''
        return Position(line=line + 1, column=len(text) - len(text.lstrip()) + 1)

    def _inline_position(self, token, offset: int | None) -> Position:
        """Map an offset inside an inline token's content back to body line/column."""
        start_line = token.map[0] if token.map else self.last_line
        if offset is None:
            return Position(line=start_line + 1, column=1)
        content = token.content
        line_start = content.rfind('\n', 0, offset) + 1
        line_end = content.find('\n', line_start)
        content_line = content[line_start:line_end if line_end >= 0 else len(content)]
        line = start_line + content.count('\n', 0, offset)
        source_line = self.lines[line] if line < len(self.lines) else ''
        prefix = source_line.find(content_line) if content_line else 0
        return Position(line=line + 1, column=max(prefix, 0) + offset - line_start + 1)

    def _block_node(self, token):
        t = token.type
        position = self._block_position(token)
        if t == 'heading_open':
            return Heading(depth=heading_level(token) or 1, position=position)
        if t == 'paragraph_open':
            return Paragraph(position=position)
        if t == 'blockquote_open':
            return Blockquote(position=position)
        if t == 'bullet_list_open':
            return List(ordered=False, position=position)
        if t == 'ordered_list_open':
            return List(ordered=True, start=int(token.attrs.get('start', 1)), position=position)
        if t == 'list_item_open':
            return ListItem(position=position)
        if t == 'table_open':
            return Table(position=position)
        if t == 'tr_open':
            return TableRow(position=position)
        if t in ('th_open', 'td_open'):
            align = ALIGN_RE.search(str(token.attrs.get('style', '')))
            return TableCell(header=t == 'th_open', align=align.group(1) if align else None, position=position)
        if t in ('fence', 'code_block'):
            lang, meta = code_info(token)
            return Code(lang=lang, meta=meta, value=token.content.rstrip('\n'), position=position)
        if t == 'html_block':
            return Html(value=token.content.rstrip('\n'), position=position)
        if t == 'hr':
            return ThematicBreak(position=position)
        if t == 'mdx_esm':
            return MdxImportExport(value=token.content, position=position)
        if t in ('mdx_component', 'mdx_component_open'):
            return MdxComponent(name=token.meta['name'], attributes=token.meta['attributes'], position=position)
        return None

    def build(self, tokens: list) -> list:
        root = Root()
        stack = [root]
        for token in tokens:
            if token.nesting < 0:
                if len(stack) > 1:
                    stack.pop()
                continue
            if token.type == 'inline':
                stack[-1].children.extend(self._inline(token))
                continue
            node = self._block_node(token)
            if node is None:
                if token.nesting > 0:
                    stack.append(stack[-1])
                continue
            stack[-1].children.append(node)
            if token.nesting > 0:
                stack.append(node)
        return root.children

    def _inline(self, token) -> list:
        if token.map:
            self.last_line = token.map[0]
        container = Paragraph()
        stack = [container]

        def append(node):
            siblings = stack[-1].children
            if isinstance(node, Text) and siblings and isinstance(siblings[-1], Text):
                siblings[-1].value += node.value
            else:
                siblings.append(node)

        for child in token.children or []:
            t = child.type
            if t == 'link_open':
                position = self._inline_position(token, child.meta.get('offset'))
                href = str(child.attrs.get('href', ''))
                title = child.attrs.get('title')
                if child.meta.get('reference'):
                    node = LinkReference(url=href, label=child.meta.get('label'), title=title, position=position)
                else:
                    node = Link(url=href, title=title, position=position)
                append(node)
                stack.append(node)
            elif t in ('em_open', 'strong_open', 's_open'):
                node = {'em_open': Emphasis, 'strong_open': Strong, 's_open': Delete}[t]()
                append(node)
                stack.append(node)
            elif t in ('link_close', 'em_close', 'strong_close', 's_close'):
                if len(stack) > 1:
                    stack.pop()
            elif t == 'text' and child.content:
                append(Text(value=child.content))
            elif t == 'softbreak':
                append(Text(value='\n'))
            elif t == 'hardbreak':
                append(Break())
            elif t == 'code_inline':
                append(InlineCode(value=child.content))
            elif t == 'image':
                append(Image(
                    url=str(child.attrs.get('src', '')),
                    alt=child.content,
                    title=child.attrs.get('title'),
                    position=self._inline_position(token, child.meta.get('offset')),
                ))
            elif t == 'mention':
                append(Mention(
                    kind=child.meta['kind'],
                    value=child.meta['value'],
                    text=child.meta['text'],
                    position=self._inline_position(token, child.meta.get('offset')),
                ))
            elif t == 'html_inline':
                self._inline_html(token, child, stack, append)
        return container.children

    def _inline_html(self, token, child, stack, append) -> None:
        """Inline tags become inline components; a matching close tag ends the open one."""
        raw = child.content.strip()
        closing = INLINE_CLOSE_RE.match(raw)
        if closing:
            top = stack[-1]
            if len(stack) > 1 and isinstance(top, MdxComponent) and top.name == closing.group(1):
                stack.pop()
            else:
                append(Html(value=child.content))
            return
        opening = INLINE_OPEN_RE.match(raw)
        if not opening:
            append(Html(value=child.content))
            return
        name, attrs, self_closing = opening.groups()
        node = MdxComponent(
            name=name,
            attributes=parse_attributes(attrs),
            inline=True,
            position=self._inline_position(token, child.meta.get('offset')),
        )
        append(node)
        if not self_closing and name not in VOID_ELEMENTS:
            stack.append(node)


def to_tree(doc: Document | str, preset: str = 'gfm-like') -> Root:
    """Parse a document body (or a bare body string) into a Root node.

    A yaml node carrying the frontmatter precedes the body nodes when the
    document has any metadata. Each call returns a fresh tree.
    """
    if isinstance(doc, Document):
        body = doc.body
        data = denormalize(doc)
    elif isinstance(doc, str):
        body, data = doc, {}
    else:
        raise TypeError(f"Expected Document or str, got {type(doc).__name__}")

    tokens = make_parser(preset).parse(body)
    root = Root(position=Position(line=1, column=1))
    if data:
        root.children.append(Yaml(value=dump_block(data).rstrip('\n')))
    root.children.extend(_TreeBuilder(body).build(tokens))
    return root
