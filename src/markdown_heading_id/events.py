"""
Event vocabulary for streaming Markdown documents.

A document is a flat sequence of events: containers are bracketed by `Start(tag)`
and `End(tag)`, and leaf content (text, code, raw HTML, breaks) appears between
them. All events are frozen dataclasses and compare by value, so
`Start(Heading(2)) == Start(Heading(2))`.

`Html` is the raw markup event: a consumer must write its content verbatim,
without escaping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# === Tags ===


@dataclass(frozen=True)
class Paragraph:
    pass


@dataclass(frozen=True)
class Heading:
    level: int


@dataclass(frozen=True)
class BlockQuote:
    alert: str | None = None
    """GFM alert type (NOTE, TIP, WARNING, ...) or `None` for a plain quote."""


@dataclass(frozen=True)
class CodeBlock:
    lang: str = ""


@dataclass(frozen=True)
class List:
    start: int | None = None
    """First number of an ordered list, or `None` for a bullet list."""


@dataclass(frozen=True)
class Item:
    pass


@dataclass(frozen=True)
class Emphasis:
    pass


@dataclass(frozen=True)
class Strong:
    pass


@dataclass(frozen=True)
class Strikethrough:
    pass


@dataclass(frozen=True)
class Link:
    dest: str
    title: str = ""


@dataclass(frozen=True)
class Image:
    dest: str
    title: str = ""


@dataclass(frozen=True)
class Table:
    pass


@dataclass(frozen=True)
class TableHead:
    pass


@dataclass(frozen=True)
class TableRow:
    pass


@dataclass(frozen=True)
class TableCell:
    header: bool = False
    align: str | None = None


Tag = Union[
    Paragraph,
    Heading,
    BlockQuote,
    CodeBlock,
    List,
    Item,
    Emphasis,
    Strong,
    Strikethrough,
    Link,
    Image,
    Table,
    TableHead,
    TableRow,
    TableCell,
]

# === Events ===


@dataclass(frozen=True)
class Start:
    tag: Tag


@dataclass(frozen=True)
class End:
    tag: Tag


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Code:
    """An inline code span."""

    content: str


@dataclass(frozen=True)
class Html:
    """Raw markup, written verbatim by consumers."""

    content: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class TaskListMarker:
    checked: bool


Event = Union[Start, End, Text, Code, Html, SoftBreak, HardBreak, Rule, TaskListMarker]


def is_heading_start(event: Event) -> bool:
    return isinstance(event, Start) and isinstance(event.tag, Heading)


def is_heading_end(event: Event, level: int) -> bool:
    """True if `event` closes a heading of exactly this level."""
    return isinstance(event, End) and isinstance(event.tag, Heading) and event.tag.level == level
