"""markdown-it plugin for MDX constructs: ESM statements, component tags, mentions

Block rules
    mdx_esm        top-level `import` / `export` statements, one token per statement
    mdx_component  `<Name ...>` flow elements, self-closing or with a matching close tag

Inline rules
    wikilink       `[[Target]]` / `[[Target|text]]`
    mention        `@handle`
    link, image, html_inline
                   wrapped to record their source offset in token.meta["offset"];
                   reference-style links also get token.meta["reference"] / ["label"]
"""

import re

from markdown_it import MarkdownIt
from markdown_it.helpers import parseLinkLabel
from markdown_it.rules_inline import html_inline as html_inline_rule
from markdown_it.rules_inline import image as image_rule
from markdown_it.rules_inline import link as link_rule

from mdxld.core.tree.nodes import Attribute


ESM_START_RE = re.compile(r'(?:import|export)(?=[\s{*\'"]|$)')
TAG_START_RE = re.compile(r'<([A-Za-z][\w.-]*)(?=[\s/>])')
ATTR_NAME_RE = re.compile(r'[A-Za-z_$][\w:.$-]*')
BARE_VALUE_RE = re.compile(r'[^\s/>]*')
WIKI_RE = re.compile(r'\[\[([^\[\]|\n]+)(?:\|([^\[\]\n]+))?\]\]')
MENTION_RE = re.compile(r'@([A-Za-z0-9_][\w-]*(?:/[\w-]+)?)')
MENTION_BLOCKERS = set('_.-/@`')


def _line(state, line: int) -> str:
    """Source text of a line without its indentation."""
    return state.src[state.bMarks[line] + state.tShift[line]:state.eMarks[line]]


def _line_at(state, pos: int, start: int, end: int) -> int:
    """Index of the line in [start, end) containing source offset pos, or -1."""
    for line in range(start, end):
        if state.bMarks[line] <= pos <= state.eMarks[line]:
            return line
    return -1


def scan_tag_end(src: str, pos: int, limit: int) -> int:
    """Offset of the `>` closing the tag that starts before pos, or -1.

    Quoted strings and `{...}` expressions may contain `>`.
    """
    quote = None
    depth = 0
    while pos < limit:
        ch = src[pos]
        if quote:
            if ch == quote:
                quote = None
        elif ch in '"\'' and depth == 0:
            quote = ch
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth = max(depth - 1, 0)
        elif ch == '>' and depth == 0:
            return pos
        pos += 1
    return -1


def _scan_expression(src: str, pos: int) -> int:
    """Offset just past the `}` matching the `{` at pos."""
    depth = 0
    quote = None
    for i in range(pos, len(src)):
        ch = src[i]
        if quote:
            if ch == quote and src[i - 1] != '\\':
                quote = None
        elif ch in '"\'`':
            quote = ch
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return i + 1
    return len(src)


def parse_attributes(src: str) -> list[Attribute]:
    """Parse JSX-style attributes: name="v", name='v', name={expr}, bare name."""
    attrs: list[Attribute] = []
    pos, end = 0, len(src)
    while pos < end:
        ch = src[pos]
        if ch.isspace() or ch == '/':
            pos += 1
            continue
        if ch == '{':
            # spread attribute, e.g. {...props}
            pos = _scan_expression(src, pos)
            continue
        m = ATTR_NAME_RE.match(src, pos)
        if not m:
            pos += 1
            continue
        name = m.group(0)
        pos = m.end()
        while pos < end and src[pos] in ' \t':
            pos += 1
        if pos >= end or src[pos] != '=':
            attrs.append(Attribute(name=name))
            continue
        pos += 1
        while pos < end and src[pos].isspace():
            pos += 1
        if pos < end and src[pos] in '"\'':
            close = src.find(src[pos], pos + 1)
            close = end if close < 0 else close
            attrs.append(Attribute(name=name, value=src[pos + 1:close]))
            pos = close + 1
        elif pos < end and src[pos] == '{':
            stop = _scan_expression(src, pos)
            attrs.append(Attribute(name=name, value=src[pos + 1:stop - 1].strip(), expression=True))
            pos = stop
        else:
            m = BARE_VALUE_RE.match(src, pos)
            attrs.append(Attribute(name=name, value=m.group(0)))
            pos = m.end()
    return attrs


# --- block rules ---

def mdx_esm(state, startLine: int, endLine: int, silent: bool) -> bool:
    """Top-level ESM statements. A statement runs until the next statement or a blank line."""
    if state.parentType != 'root' or state.sCount[startLine] != 0:
        return False
    if not ESM_START_RE.match(_line(state, startLine)):
        return False
    if silent:
        return True

    statements: list[list[int]] = []
    line = startLine
    while line < endLine and not state.isEmpty(line):
        if state.sCount[line] == 0 and ESM_START_RE.match(_line(state, line)):
            statements.append([line, line + 1])
        else:
            statements[-1][1] = line + 1
        line += 1

    for begin, end in statements:
        token = state.push('mdx_esm', '', 0)
        token.map = [begin, end]
        token.content = state.getLines(begin, end, 0, False).rstrip('\n')
    state.line = line
    return True


def _find_close(state, name: str, startLine: int, endLine: int) -> int:
    """Line holding the `</name>` that balances an already-open `<name>`, or -1."""
    open_re = re.compile(r'<' + re.escape(name) + r'(?=[\s/>])')
    self_closing_re = re.compile(r'<' + re.escape(name) + r'(?=[\s/])[^<>]*/>')
    close = f'</{name}>'
    depth = 1
    for line in range(startLine, endLine):
        text = _line(state, line)
        depth += len(open_re.findall(text)) - len(self_closing_re.findall(text))
        depth -= text.count(close)
        if depth <= 0:
            return line
    return -1


def mdx_component(state, startLine: int, endLine: int, silent: bool) -> bool:
    """Component tags on their own lines: `<Video src="a.mp4" />` or `<Note>...</Note>`."""
    if state.sCount[startLine] - state.blkIndent >= 4:
        return False
    pos = state.bMarks[startLine] + state.tShift[startLine]
    m = TAG_START_RE.match(state.src, pos)
    if not m:
        return False

    name = m.group(1)
    tag_end = scan_tag_end(state.src, m.end(), state.eMarks[endLine - 1])
    if tag_end < 0:
        return False
    tag_line = _line_at(state, tag_end, startLine, endLine)
    if tag_line < 0:
        return False

    self_closing = state.src[tag_end - 1] == '/'
    attrs_src = state.src[m.end():tag_end - 1 if self_closing else tag_end]
    rest = state.src[tag_end + 1:state.eMarks[tag_line]]

    if self_closing:
        if rest.strip():
            return False
        if silent:
            return True
        token = state.push('mdx_component', '', 0)
        token.map = [startLine, tag_line + 1]
        token.content = state.src[pos:tag_end + 1]
        token.meta = {'name': name, 'attributes': parse_attributes(attrs_src)}
        state.line = tag_line + 1
        return True

    close = f'</{name}>'
    if rest.strip():
        # <Note>inline content</Note> on a single line
        inner, found, after = rest.partition(close)
        if not found or after.strip() or close in inner:
            return False
        if silent:
            return True
        _push_open(state, name, attrs_src, [startLine, tag_line + 1], pos, tag_end)
        token = state.push('inline', '', 0)
        token.map = [tag_line, tag_line + 1]
        token.content = inner.strip()
        token.children = []
        state.push('mdx_component_close', '', -1)
        state.line = tag_line + 1
        return True

    close_line = _find_close(state, name, tag_line + 1, endLine)
    if close_line < 0 or not _line(state, close_line).startswith(close):
        return False
    if _line(state, close_line)[len(close):].strip():
        return False
    if silent:
        return True

    _push_open(state, name, attrs_src, [startLine, close_line + 1], pos, tag_end)
    old_parent, old_line_max = state.parentType, state.lineMax
    state.parentType = 'mdx'
    state.lineMax = close_line
    state.md.block.tokenize(state, tag_line + 1, close_line)
    state.parentType, state.lineMax = old_parent, old_line_max
    state.push('mdx_component_close', '', -1)
    state.line = close_line + 1
    return True


def _push_open(state, name: str, attrs_src: str, line_map: list[int], start: int, end: int):
    token = state.push('mdx_component_open', '', 1)
    token.map = line_map
    token.content = state.src[start:end + 1]
    token.meta = {'name': name, 'attributes': parse_attributes(attrs_src)}
    return token


# --- inline rules ---

def wikilink(state, silent: bool) -> bool:
    if not state.src.startswith('[[', state.pos):
        return False
    m = WIKI_RE.match(state.src, state.pos, state.posMax)
    if not m:
        return False
    if not silent:
        token = state.push('mention', '', 0)
        token.content = m.group(0)
        token.meta = {
            'kind': 'wiki',
            'value': m.group(1).strip(),
            'text': (m.group(2) or m.group(1)).strip(),
            'offset': state.pos,
        }
    state.pos = m.end()
    return True


def mention(state, silent: bool) -> bool:
    pos = state.pos
    if state.src[pos] != '@':
        return False
    if pos > 0 and (state.src[pos - 1].isalnum() or state.src[pos - 1] in MENTION_BLOCKERS):
        return False
    m = MENTION_RE.match(state.src, pos, state.posMax)
    if not m:
        return False
    if not silent:
        token = state.push('mention', '', 0)
        token.content = m.group(0)
        token.meta = {'kind': 'user', 'value': m.group(0), 'text': m.group(0), 'offset': pos}
    state.pos = m.end()
    return True


def _reference_label(state, start: int, label_end: int) -> str:
    """Raw label of a reference link: the second bracket pair when non-empty, else the text."""
    pos = label_end + 1
    if pos < state.posMax and state.src[pos] == '[':
        end = parseLinkLabel(state, pos)
        if end > pos + 1:
            return state.src[pos + 1:end]
    return state.src[start + 1:label_end]


def _with_offset(rule, token_type: str, detect_reference: bool = False):
    """Wrap an inline rule so the token it produces remembers where it started."""

    def wrapped(state, silent: bool) -> bool:
        start = state.pos
        count = len(state.tokens)
        label_end = -1
        if detect_reference and state.src[start] == '[':
            label_end = parseLinkLabel(state, start, True)
        if not rule(state, silent):
            return False
        if silent:
            return True
        token = next((t for t in state.tokens[count:] if t.type == token_type), None)
        if token is not None:
            token.meta['offset'] = start
            if label_end >= 0:
                nxt = label_end + 1
                if nxt >= len(state.src) or state.src[nxt] != '(':
                    token.meta['reference'] = True
                    token.meta['label'] = _reference_label(state, start, label_end)
        return True

    return wrapped


def mdx_plugin(md: MarkdownIt) -> None:
    """Register the MDX block and inline rules on md."""
    md.block.ruler.before('table', 'mdx_esm', mdx_esm)
    md.block.ruler.before(
        'html_block', 'mdx_component', mdx_component,
        {'alt': ['paragraph', 'reference', 'blockquote']},
    )
    md.inline.ruler.before('link', 'wikilink', wikilink)
    md.inline.ruler.push('mention', mention)
    md.inline.ruler.at('link', _with_offset(link_rule, 'link_open', detect_reference=True))
    md.inline.ruler.at('image', _with_offset(image_rule, 'image'))
    md.inline.ruler.at('html_inline', _with_offset(html_inline_rule, 'html_inline'))
