"""Serialize a syntax tree back to markdown text or a Document"""

from mdxld.core.models import Document, Mode
from mdxld.core.parse import parse
from mdxld.core.tree.nodes import (
    Attribute, Blockquote, Break, Code, Delete, Emphasis, Heading, Html, Image,
    InlineCode, Link, LinkReference, List, ListItem, MdxComponent,
    MdxImportExport, Mention, Paragraph, Root, Strong, Table, TableCell,
    TableRow, Text, ThematicBreak, Yaml,
)


SEPARATORS = {None: '---', 'left': ':---', 'center': ':---:', 'right': '---:'}


def _title(title: str | None) -> str:
    return f' "{title}"' if title else ''


def _attribute(attr: Attribute) -> str:
    if attr.value is None:
        return attr.name
    if attr.expression:
        return f'{attr.name}={{{attr.value}}}'
    return f'{attr.name}="{attr.value}"'


def _indent(text: str, prefix: str) -> str:
    return '\n'.join(prefix + line if line else line for line in text.split('\n'))


class _Renderer:
    """Renders nodes to markdown. Reference definitions are collected and emitted last."""

    def __init__(self):
        self.definitions: dict[str, str] = {}

    def blocks(self, nodes) -> str:
        return '\n\n'.join(self.block(n) for n in nodes if not isinstance(n, Yaml))

    def inline(self, nodes) -> str:
        return ''.join(self.inline_node(n) for n in nodes)

    def block(self, node) -> str:
        if isinstance(node, Heading):
            return f"{'#' * node.depth} {self.inline(node.children)}"
        if isinstance(node, Paragraph):
            return self.inline(node.children)
        if isinstance(node, Code):
            info = ' '.join(p for p in (node.lang, node.meta) if p)
            return f"```{info}\n{node.value}\n```"
        if isinstance(node, Blockquote):
            return '\n'.join(f'> {line}'.rstrip() for line in self.blocks(node.children).split('\n'))
        if isinstance(node, List):
            return self._list(node)
        if isinstance(node, ThematicBreak):
            return '***'
        if isinstance(node, Table):
            return self._table(node)
        if isinstance(node, (Html, MdxImportExport)):
            return node.value
        if isinstance(node, MdxComponent):
            return self._component(node)
        return self.inline_node(node)

    def inline_node(self, node) -> str:
        if isinstance(node, Text):
            return node.value
        if isinstance(node, Emphasis):
            return f'*{self.inline(node.children)}*'
        if isinstance(node, Strong):
            return f'**{self.inline(node.children)}**'
        if isinstance(node, Delete):
            return f'~~{self.inline(node.children)}~~'
        if isinstance(node, InlineCode):
            return f'`{node.value}`'
        if isinstance(node, Break):
            return '\\\n'
        if isinstance(node, Link):
            return f'[{self.inline(node.children)}]({node.url}{_title(node.title)})'
        if isinstance(node, LinkReference):
            text = self.inline(node.children)
            label = node.label or text
            self.definitions.setdefault(label, f'[{label}]: {node.url}{_title(node.title)}')
            return f'[{text}][{label}]' if label != text else f'[{text}][]'
        if isinstance(node, Image):
            return f'![{node.alt}]({node.url}{_title(node.title)})'
        if isinstance(node, Mention):
            if node.kind == 'user':
                return node.value
            if node.text and node.text != node.value:
                return f'[[{node.value}|{node.text}]]'
            return f'[[{node.value}]]'
        if isinstance(node, Html):
            return node.value
        if isinstance(node, MdxComponent):
            return self._component(node)
        if isinstance(node, Yaml):
            return ''
        return self.blocks(getattr(node, 'children', None) or [])

    def _list(self, node: List) -> str:
        items = []
        start = node.start if node.start is not None else 1
        for i, item in enumerate(node.children):
            marker = f'{start + i}. ' if node.ordered else '- '
            content = self.blocks(item.children) if isinstance(item, ListItem) else self.block(item)
            first, _, rest = content.partition('\n')
            items.append(marker + first + ('\n' + _indent(rest, ' ' * len(marker)) if rest else ''))
        return '\n'.join(items)

    def _table(self, node: Table) -> str:
        rows = [r for r in node.children if isinstance(r, TableRow)]
        if not rows:
            return ''
        lines = []
        for i, row in enumerate(rows):
            cells = [self.inline(c.children) for c in row.children if isinstance(c, TableCell)]
            lines.append('| ' + ' | '.join(cells) + ' |')
            if i == 0:
                aligns = [c.align for c in row.children if isinstance(c, TableCell)]
                lines.append('| ' + ' | '.join(SEPARATORS.get(a, '---') for a in aligns) + ' |')
        return '\n'.join(lines)

    def _component(self, node: MdxComponent) -> str:
        attrs = ' '.join(_attribute(a) for a in node.attributes)
        head = f'{node.name} {attrs}' if attrs else node.name
        if not node.children:
            return f'<{head} />'
        if node.inline:
            return f'<{head}>{self.inline(node.children)}</{node.name}>'
        return f'<{head}>\n{self.blocks(node.children)}\n</{node.name}>'


def stringify_tree(root: Root) -> str:
    """Render root as markdown. A yaml child becomes the frontmatter block."""
    renderer = _Renderer()
    content = renderer.blocks(root.children)
    if renderer.definitions:
        content += '\n\n' + '\n'.join(renderer.definitions.values())
    yaml_node = next((n for n in root.children if isinstance(n, Yaml)), None)
    if yaml_node is not None and yaml_node.value:
        return f"---\n{yaml_node.value}\n---\n\n{content}"
    return content


def from_tree(root: Root, mode: Mode | str = Mode.expanded) -> Document:
    """Rebuild a Document from a tree; metadata comes from its yaml node."""
    return parse(stringify_tree(root), mode)
