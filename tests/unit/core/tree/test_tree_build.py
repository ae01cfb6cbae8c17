"""Unit tests for core/tree/build.py"""

import pytest

from mdxld.core.parse import parse
from mdxld.core.tree.build import make_parser, to_tree
from mdxld.core.tree.nodes import (
    Blockquote, Code, Emphasis, Heading, Html, Image, InlineCode, Link,
    LinkReference, List, ListItem, MdxComponent, MdxImportExport, Mention,
    Paragraph, Root, Strong, Table, TableRow, Text, ThematicBreak, Yaml, walk,
)


def _first(root, cls):
    return next(n for n in walk(root) if isinstance(n, cls))


def _all(root, cls):
    return [n for n in walk(root) if isinstance(n, cls)]


def test_make_parser_registers_mdx_rules():
    md = make_parser()
    assert "mdx_esm" in md.block.ruler.get_all_rules()
    assert "mdx_component" in md.block.ruler.get_all_rules()
    assert "mention" in md.inline.ruler.get_all_rules()
    assert "wikilink" in md.inline.ruler.get_all_rules()


def test_to_tree_headings_and_inline_marks():
    root = to_tree("# Title\n\nSome *em* and **strong** and `code`.")
    heading, para = root.children
    assert isinstance(heading, Heading) and heading.depth == 1
    assert heading.children == [Text(value="Title")]
    assert isinstance(para, Paragraph)
    assert [type(c) for c in para.children] == [Text, Emphasis, Text, Strong, Text, InlineCode, Text]
    assert para.children[5].value == "code"


def test_to_tree_block_positions():
    """Block nodes carry 1-based body-relative line/column."""
    root = to_tree("# Title\n\n  Indented para\n")
    assert root.children[0].position.line == 1
    assert root.children[0].position.column == 1
    assert root.children[1].position.line == 3
    assert root.children[1].position.column == 3


def test_to_tree_fenced_code():
    code = to_tree("```python title=x\nprint(1)\n```").children[0]
    assert isinstance(code, Code)
    assert code.lang == "python"
    assert code.meta == "title=x"
    assert code.value == "print(1)"


def test_to_tree_lists():
    root = to_tree("- a\n- b\n\n3. c\n")
    bullet, ordered = root.children
    assert isinstance(bullet, List) and not bullet.ordered
    assert len(bullet.children) == 2
    assert all(isinstance(i, ListItem) for i in bullet.children)
    assert isinstance(bullet.children[0].children[0], Paragraph)
    assert ordered.ordered and ordered.start == 3


def test_to_tree_table():
    table = to_tree("| a | b |\n|:--|--:|\n| 1 | 2 |\n").children[0]
    assert isinstance(table, Table)
    header, row = table.children
    assert isinstance(header, TableRow)
    assert [c.header for c in header.children] == [True, True]
    assert [c.align for c in header.children] == ["left", "right"]
    assert [c.children[0].value for c in row.children] == ["1", "2"]


def test_to_tree_blockquote_link_position():
    quote = to_tree("> quoted [link](./x)").children[0]
    assert isinstance(quote, Blockquote)
    link = _first(quote, Link)
    assert link.url == "./x"
    assert (link.position.line, link.position.column) == (1, 10)


def test_to_tree_thematic_break_and_html():
    root = to_tree("***\n\n<!-- note -->\n")
    assert isinstance(root.children[0], ThematicBreak)
    assert isinstance(root.children[1], Html)
    assert root.children[1].value == "<!-- note -->"


def test_to_tree_esm_statements():
    """Top-level import/export lines become one node per statement."""
    body = "import A from './a.mdx'\nexport const meta = {\n  x: 1\n}\n\n# After\n"
    root = to_tree(body)
    first, second, heading = root.children
    assert isinstance(first, MdxImportExport)
    assert first.value == "import A from './a.mdx'"
    assert second.value == "export const meta = {\n  x: 1\n}"
    assert (first.position.line, second.position.line) == (1, 2)
    assert isinstance(heading, Heading)


def test_to_tree_import_word_in_prose_is_paragraph():
    root = to_tree("important things\n\nimports are great")
    assert all(isinstance(n, Paragraph) for n in root.children)


def test_to_tree_self_closing_component():
    node = to_tree('<Video src="v.mp4" autoplay title={"x"} />\n').children[0]
    assert isinstance(node, MdxComponent)
    assert node.name == "Video"
    assert not node.inline
    assert node.children == []
    src, autoplay, title = node.attributes
    assert (src.name, src.value, src.expression) == ("src", "v.mp4", False)
    assert (autoplay.name, autoplay.value) == ("autoplay", None)
    assert (title.value, title.expression) == ('"x"', True)


def test_to_tree_multiline_attributes():
    body = '<Embed\n  url="https://x.test/e"\n  height={300}\n/>\n\nafter\n'
    root = to_tree(body)
    node = root.children[0]
    assert isinstance(node, MdxComponent)
    assert node.attribute("url").value == "https://x.test/e"
    assert isinstance(root.children[1], Paragraph)
    assert root.children[1].position.line == 6


def test_to_tree_container_component_parses_markdown():
    body = '<Callout type="warning">\nSome **text** with [a link](./l).\n</Callout>\n'
    node = to_tree(body).children[0]
    assert node.name == "Callout"
    assert isinstance(node.children[0], Paragraph)
    link = _first(node, Link)
    assert (link.position.line, link.position.column) == (2, 20)


def test_to_tree_nested_same_name_components():
    root = to_tree("<Box>\n<Box>\ninner\n</Box>\n</Box>\n")
    outer = root.children[0]
    assert len(root.children) == 1
    inner = outer.children[0]
    assert isinstance(inner, MdxComponent) and inner.name == "Box"
    assert isinstance(inner.children[0], Paragraph)


def test_to_tree_single_line_container():
    node = to_tree("<Note>Hello **world**</Note>\n").children[0]
    assert node.name == "Note"
    assert [type(c) for c in node.children] == [Text, Strong]


def test_to_tree_inline_component():
    para = to_tree('Click <Badge href="./b">here</Badge> now').children[0]
    badge = para.children[1]
    assert isinstance(badge, MdxComponent)
    assert badge.inline
    assert badge.attribute("href").value == "./b"
    assert badge.children == [Text(value="here")]
    assert para.children[2] == Text(value=" now")
    assert badge.position.column == 7


def test_to_tree_void_inline_tag_does_not_nest():
    para = to_tree("one<br>two").children[0]
    br = para.children[1]
    assert isinstance(br, MdxComponent) and br.children == []
    assert para.children[2] == Text(value="two")


def test_to_tree_mentions():
    text = "Hi @alice and @bob/team, mail a@b.com. See [[Home]] and [[Some Page|that page]]."
    mentions = _all(to_tree(text), Mention)
    assert [(m.kind, m.value, m.text) for m in mentions] == [
        ("user", "@alice", "@alice"),
        ("user", "@bob/team", "@bob/team"),
        ("wiki", "Home", "Home"),
        ("wiki", "Some Page", "that page"),
    ]
    assert mentions[0].position.column == text.index("@alice") + 1
    assert mentions[3].position.column == text.index("[[Some") + 1


def test_to_tree_reference_links():
    body = '[one][ref], [two][] and [ref].\n\n[ref]: https://x.test/r "T"\n[two]: ./two\n'
    refs = _all(to_tree(body), LinkReference)
    assert [(r.label, r.url) for r in refs] == [
        ("ref", "https://x.test/r"),
        ("two", "./two"),
        ("ref", "https://x.test/r"),
    ]
    assert refs[0].title == "T"
    assert not _all(to_tree(body), Link)


def test_to_tree_image():
    image = _first(to_tree('![alt text](./i.png "Title")'), Image)
    assert (image.url, image.alt, image.title) == ("./i.png", "alt text", "Title")
    assert image.position.line == 1


def test_to_tree_softbreak_positions():
    body = "[first](./a)\n![second](./b.png)"
    root = to_tree(body)
    link, image = _first(root, Link), _first(root, Image)
    assert (link.position.line, link.position.column) == (1, 1)
    assert (image.position.line, image.position.column) == (2, 1)


def test_to_tree_crlf_body():
    link = _first(to_tree("# A\r\n\r\n[l](./x)\r\n"), Link)
    assert link.position.line == 3


def test_to_tree_document_gets_yaml_node():
    doc = parse("---\n$id: a\ntitle: A\n---\nbody")
    root = to_tree(doc)
    assert isinstance(root, Root)
    assert root.children[0] == Yaml(value="$id: a\ntitle: A")
    assert isinstance(root.children[1], Paragraph)
    assert root.children[1].position.line == 1


def test_to_tree_plain_body_has_no_yaml():
    assert not _all(to_tree("just text"), Yaml)


def test_to_tree_restartable():
    doc = parse("# a\n\n[x](./y)")
    first, second = to_tree(doc), to_tree(doc)
    assert first == second
    assert first is not second
    assert list(walk(first)) == list(walk(first))


def test_to_tree_rejects_other_types():
    with pytest.raises(TypeError):
        to_tree(42)


@pytest.mark.parametrize("body", ["Hello **world**", "Hello *world*", "~~gone~~"])
def test_to_tree_no_empty_text_nodes(body):
    nodes = list(walk(to_tree(body)))
    assert all(n.value for n in nodes if isinstance(n, Text))
