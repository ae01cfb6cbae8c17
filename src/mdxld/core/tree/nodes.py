"""Syntax tree node types: a closed union discriminated on `type`"""

from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field


class Position(BaseModel):
    """1-based line/column of a node's first character, relative to the document body."""
    line:   int
    column: int


class _Node(BaseModel):
    position: Optional[Position] = None


class _Parent(_Node):
    children: list["Node"] = Field(default_factory=list)


class Attribute(BaseModel):
    """A component attribute. Expression values (`name={...}`) keep their source text."""
    name:       str
    value:      Optional[str] = None
    expression: bool = False


class Root(_Parent):
    type: Literal["root"] = "root"


class Yaml(_Node):
    type:  Literal["yaml"] = "yaml"
    value: str


class Heading(_Parent):
    type:  Literal["heading"] = "heading"
    depth: int


class Paragraph(_Parent):
    type: Literal["paragraph"] = "paragraph"


class Text(_Node):
    type:  Literal["text"] = "text"
    value: str


class Emphasis(_Parent):
    type: Literal["emphasis"] = "emphasis"


class Strong(_Parent):
    type: Literal["strong"] = "strong"


class Delete(_Parent):
    type: Literal["delete"] = "delete"


class InlineCode(_Node):
    type:  Literal["inlineCode"] = "inlineCode"
    value: str


class Break(_Node):
    type: Literal["break"] = "break"


class Code(_Node):
    type:  Literal["code"] = "code"
    lang:  Optional[str] = None
    meta:  Optional[str] = None
    value: str


class Blockquote(_Parent):
    type: Literal["blockquote"] = "blockquote"


class List(_Parent):
    type:    Literal["list"] = "list"
    ordered: bool = False
    start:   Optional[int] = None


class ListItem(_Parent):
    type: Literal["listItem"] = "listItem"


class ThematicBreak(_Node):
    type: Literal["thematicBreak"] = "thematicBreak"


class Html(_Node):
    type:  Literal["html"] = "html"
    value: str


class Table(_Parent):
    type: Literal["table"] = "table"


class TableRow(_Parent):
    type: Literal["tableRow"] = "tableRow"


class TableCell(_Parent):
    type:   Literal["tableCell"] = "tableCell"
    header: bool = False
    align:  Optional[str] = None


class Link(_Parent):
    type:  Literal["link"] = "link"
    url:   str
    title: Optional[str] = None


class LinkReference(_Parent):
    """A reference-style link; `url` is the resolved definition target."""
    type:  Literal["linkReference"] = "linkReference"
    url:   str
    label: Optional[str] = None
    title: Optional[str] = None


class Image(_Node):
    type:  Literal["image"] = "image"
    url:   str
    alt:   str = ""
    title: Optional[str] = None


class Mention(_Node):
    """`@handle` (kind "user") or `[[Target|text]]` (kind "wiki")."""
    type:  Literal["mention"] = "mention"
    kind:  Literal["user", "wiki"]
    value: str
    text:  Optional[str] = None


class MdxImportExport(_Node):
    type:  Literal["mdxImportExport"] = "mdxImportExport"
    value: str


class MdxComponent(_Parent):
    type:       Literal["mdxComponent"] = "mdxComponent"
    name:       str
    attributes: list[Attribute] = Field(default_factory=list)
    inline:     bool = False

    def attribute(self, name: str) -> Optional[Attribute]:
        return next((a for a in self.attributes if a.name == name), None)


Node = Annotated[
    Union[
        Root, Yaml, Heading, Paragraph, Text, Emphasis, Strong, Delete, InlineCode,
        Break, Code, Blockquote, List, ListItem, ThematicBreak, Html, Table,
        TableRow, TableCell, Link, LinkReference, Image, Mention,
        MdxImportExport, MdxComponent,
    ],
    Field(discriminator="type"),
]

for _model in (
    _Parent, Root, Heading, Paragraph, Emphasis, Strong, Delete, Blockquote,
    List, ListItem, Table, TableRow, TableCell, Link, LinkReference, MdxComponent,
):
    _model.model_rebuild()


def walk(node) -> Iterator:
    """Yield node and all of its descendants depth-first, in document order."""
    yield node
    for child in getattr(node, "children", None) or ():
        yield from walk(child)


def text_content(node) -> str:
    """Concatenate the text values below node."""
    if isinstance(node, (Text, InlineCode)):
        return node.value
    if isinstance(node, Image):
        return node.alt
    if isinstance(node, Mention):
        return node.text or node.value
    return "".join(text_content(c) for c in getattr(node, "children", None) or ())
