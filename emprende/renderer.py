# emprende/renderer.py
"""Markdown subset used by blog articles.

Supported: `#`, `##`, `###` headings, `- ` list items, `**bold**`,
`*italic*` and blank-line separated paragraphs. List items are emitted as
bare `<li>` elements without an enclosing list. Text is always escaped, so
raw HTML in an article shows up literally.
"""
import html
import re
from dataclasses import dataclass, field
from typing import List, Union

_HEADING = re.compile(r"^(#{1,3}) (.*)$")
_LIST_ITEM = re.compile(r"^- (.*)$")
_EMPHASIS = re.compile(r"\*\*(.+?)\*\*|\*(.+?)\*")


@dataclass
class Text:
    value: str


@dataclass
class Bold:
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Italic:
    children: List["Inline"] = field(default_factory=list)


Inline = Union[Text, Bold, Italic]


@dataclass
class Heading:
    level: int
    children: List[Inline] = field(default_factory=list)


@dataclass
class ListItem:
    children: List[Inline] = field(default_factory=list)


@dataclass
class Paragraph:
    children: List[Inline] = field(default_factory=list)


Block = Union[Heading, ListItem, Paragraph]


@dataclass
class Document:
    blocks: List[Block] = field(default_factory=list)


def parse_inlines(text: str) -> List[Inline]:
    nodes: List[Inline] = []
    pos = 0
    for m in _EMPHASIS.finditer(text):
        if m.start() > pos:
            nodes.append(Text(text[pos:m.start()]))
        if m.group(1) is not None:
            nodes.append(Bold(parse_inlines(m.group(1))))
        else:
            nodes.append(Italic(parse_inlines(m.group(2))))
        pos = m.end()
    if pos < len(text):
        nodes.append(Text(text[pos:]))
    return nodes


def parse(text: str) -> Document:
    doc = Document()
    paragraph: List[str] = []

    def flush():
        if paragraph:
            doc.blocks.append(Paragraph(parse_inlines("\n".join(paragraph))))
            paragraph.clear()

    for raw in (text or "").replace("\r\n", "\n").split("\n"):
        line = raw.rstrip()
        if not line.strip():
            flush()
            continue
        heading = _HEADING.match(line)
        if heading:
            flush()
            doc.blocks.append(Heading(len(heading.group(1)), parse_inlines(heading.group(2))))
            continue
        item = _LIST_ITEM.match(line)
        if item:
            flush()
            doc.blocks.append(ListItem(parse_inlines(item.group(1))))
            continue
        paragraph.append(line)
    flush()
    return doc


def _render_inlines(nodes: List[Inline]) -> str:
    out = []
    for node in nodes:
        if isinstance(node, Bold):
            out.append(f"<strong>{_render_inlines(node.children)}</strong>")
        elif isinstance(node, Italic):
            out.append(f"<em>{_render_inlines(node.children)}</em>")
        else:
            out.append(html.escape(node.value))
    return "".join(out)


def render_html(doc: Document) -> str:
    parts = []
    for block in doc.blocks:
        inner = _render_inlines(block.children)
        if isinstance(block, Heading):
            parts.append(f"<h{block.level}>{inner}</h{block.level}>")
        elif isinstance(block, ListItem):
            parts.append(f"<li>{inner}</li>")
        else:
            parts.append(f"<p>{inner}</p>")
    return "".join(parts)


def render_markdown(text: str) -> str:
    return render_html(parse(text))
