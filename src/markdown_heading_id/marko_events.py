"""
Event streams from Marko documents.

Marko parses Markdown into an element tree. `MarkoEvents` walks that tree
lazily, depth first, and yields the flat event vocabulary of
`markdown_heading_id.events`, so that stream filters (like `HeadingId`) can sit
between the parser and a writer.
"""

from __future__ import annotations

import copy
import html
import logging
import re
from collections.abc import Iterable, Iterator

from marko import Markdown, block, inline
from marko.block import Document
from marko.element import Element
from marko.ext.gfm import elements as gfm_elements

from markdown_heading_id import events as ev
from markdown_heading_id.events import Event

log = logging.getLogger(__name__)

# Same pattern Marko installs as `html._charref` while rendering, so only
# `;`-terminated references are decoded.
_ENTITY_PATTERN = re.compile(
    r"&(#[0-9]{1,7};|#[xX][0-9a-fA-F]{1,6};|[^\t\n\f <&#;]{1,32};)"
)


def decode_entities(text: str) -> str:
    """Decode HTML character references left in place by the Marko parser."""
    if "&" not in text:
        return text
    return _ENTITY_PATTERN.sub(lambda m: html.unescape(m.group(0)), text)


class MarkoEvents(Iterable[Event]):
    """
    Iterable of events for a parsed Marko document.

    Each iteration walks the tree again, yielding events one at a time.
    Elements with no event mapping (for example from other Marko extensions)
    are rendered with `markdown`'s own renderer and emitted as a single `Html`
    event.
    """

    def __init__(self, document: Document, markdown: Markdown | None = None) -> None:
        self.document = document
        self.markdown = markdown or Markdown()

    def __iter__(self) -> Iterator[Event]:
        return self._walk(self.document)

    def _walk_children(self, element: Element) -> Iterator[Event]:
        children = element.children  # pyright: ignore[reportAttributeAccessIssue]
        if isinstance(children, list):
            for child in children:
                yield from self._walk(child)

    def _container(self, tag: ev.Tag, element: Element) -> Iterator[Event]:
        yield ev.Start(tag)
        yield from self._walk_children(element)
        yield ev.End(tag)

    def _walk(self, element: Element) -> Iterator[Event]:
        # Blocks
        if isinstance(element, Document):
            yield from self._walk_children(element)
            if getattr(element, "footnotes", None):
                yield from self._footnotes(element)
        elif isinstance(element, (block.BlankLine, block.LinkRefDef)):
            return
        elif isinstance(element, (block.Heading, block.SetextHeading)):
            yield from self._container(ev.Heading(element.level), element)
        elif isinstance(element, block.Paragraph):
            yield from self._paragraph(element)
        elif isinstance(element, gfm_elements.Alert):
            yield from self._container(ev.BlockQuote(alert=element.alert_type), element)
        elif isinstance(element, block.Quote):
            yield from self._container(ev.BlockQuote(), element)
        elif isinstance(element, (block.FencedCode, block.CodeBlock)):
            tag = ev.CodeBlock(lang=decode_entities(element.lang))
            yield ev.Start(tag)
            code = element.children[0].children  # pyright: ignore
            if code:
                yield ev.Text(code)
            yield ev.End(tag)
        elif isinstance(element, block.HTMLBlock):
            yield ev.Html(element.body)
        elif isinstance(element, block.ThematicBreak):
            yield ev.Rule()
        elif isinstance(element, block.List):
            start = element.start if element.ordered else None
            yield from self._container(ev.List(start=start), element)
        elif isinstance(element, block.ListItem):
            yield from self._container(ev.Item(), element)
        elif isinstance(element, gfm_elements.Table):
            yield from self._table(element)

        # Inlines
        elif isinstance(element, inline.RawText):
            text = decode_entities(element.children) if element.escape else element.children
            if text:
                yield ev.Text(text)
        elif isinstance(element, inline.Literal):
            yield ev.Text(element.children)  # pyright: ignore[reportArgumentType]
        elif isinstance(element, inline.LineBreak):
            yield ev.SoftBreak() if element.soft else ev.HardBreak()
        elif isinstance(element, inline.InlineHTML):
            yield ev.Html(element.children)  # pyright: ignore[reportArgumentType]
        elif isinstance(element, inline.CodeSpan):
            yield ev.Code(element.children)  # pyright: ignore[reportArgumentType]
        elif isinstance(element, inline.Emphasis):
            yield from self._container(ev.Emphasis(), element)
        elif isinstance(element, inline.StrongEmphasis):
            yield from self._container(ev.Strong(), element)
        elif isinstance(element, gfm_elements.Strikethrough):
            yield from self._container(ev.Strikethrough(), element)
        elif isinstance(element, (inline.Link, inline.AutoLink)):
            link = ev.Link(dest=element.dest, title=decode_entities(element.title or ""))
            yield from self._container(link, element)
        elif isinstance(element, inline.Image):
            image = ev.Image(dest=element.dest, title=decode_entities(element.title or ""))
            yield from self._container(image, element)
        else:
            yield self._fallback(element)

    def _paragraph(self, element: block.Paragraph) -> Iterator[Event]:
        # Paragraphs in tight lists contribute only their inline content.
        tight = element._tight  # pyright: ignore[reportPrivateUsage]
        if not tight:
            yield ev.Start(ev.Paragraph())
        checked = getattr(element, "checked", None)
        if checked is not None:
            yield ev.TaskListMarker(checked)
        yield from self._walk_children(element)
        if not tight:
            yield ev.End(ev.Paragraph())

    def _table(self, element: Element) -> Iterator[Event]:
        yield ev.Start(ev.Table())
        rows = element.children  # pyright: ignore[reportAttributeAccessIssue]
        for i, row in enumerate(rows):
            row_tag: ev.Tag = ev.TableHead() if i == 0 else ev.TableRow()
            yield ev.Start(row_tag)
            for cell in row.children:
                yield from self._container(
                    ev.TableCell(header=i == 0, align=cell.align or None), cell
                )
            yield ev.End(row_tag)
        yield ev.End(ev.Table())

    def _footnotes(self, document: Document) -> Iterator[Event]:
        # The renderer records footnote refs as they are rendered. A document
        # with no children renders as just the section for those refs.
        section = copy.copy(document)
        section.children = []
        rendered = self.markdown.render(section)
        if rendered:
            yield ev.Html(rendered)

    def _fallback(self, element: Element) -> Event:
        log.debug("No event mapping for %s; rendering it as raw HTML", type(element).__name__)
        return ev.Html(self.markdown.render(element))  # pyright: ignore[reportArgumentType]


def parse_events(text: str, *, extensions: Iterable[str] = ()) -> Iterator[Event]:
    """
    Parse Markdown text with Marko and return an iterator over its events.

    `extensions` are Marko extension names, such as `"gfm"`.
    """
    markdown = Markdown(extensions=list(extensions))
    document = markdown.parse(text)
    return iter(MarkoEvents(document, markdown))
