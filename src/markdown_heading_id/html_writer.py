"""
HTML output for event streams.

Produces the same HTML as Marko's `HTMLRenderer` for common documents, but
consumes events one at a time instead of rendering a tree, so any stream filter
can run in between. `Html` events are written verbatim.
"""

from __future__ import annotations

import html
import io
import re
from collections.abc import Iterable
from typing import TextIO

from marko.html_renderer import HTMLRenderer

from markdown_heading_id import events as ev
from markdown_heading_id.events import Event

# Block-level tags always start on a fresh line.
_BLOCK_TAGS = (
    ev.Paragraph,
    ev.Heading,
    ev.BlockQuote,
    ev.CodeBlock,
    ev.List,
    ev.Item,
    ev.Table,
)

# Raw heading tags are laid out like the heading events they stand in for.
_RAW_HEADING_START = re.compile(r"<h[1-6][\s>]")
_RAW_HEADING_END = re.compile(r"</h[1-6]>\Z")


def escape_html(text: str) -> str:
    """Escape text content the way Marko does (apostrophes are left alone)."""
    return html.escape(text).replace("&#x27;", "'")


def escape_url(url: str) -> str:
    return HTMLRenderer.escape_url(url)


class HtmlWriter:
    """
    Writes events as HTML to a text stream.

    State is kept to what a streaming writer needs: whether the output ends in a
    newline (block tags start on a fresh line), whether we are in a code block,
    and image nesting (image content becomes the plain-text `alt` attribute).
    After a raw `</hN>` the line break is held back until more output follows,
    so a document ending in a heading has no trailing newline.
    """

    def __init__(self, out: TextIO) -> None:
        self.out = out
        self._end_newline = True
        self._image_depth = 0
        self._table_body_open = False
        self._in_code_block = False
        self._line_pending = False

    def write(self, text: str) -> None:
        if text:
            if self._line_pending:
                self._line_pending = False
                if not text.startswith("\n"):
                    text = "\n" + text
            self.out.write(text)
            self._end_newline = text.endswith("\n")

    def fresh_line(self) -> None:
        if not self._end_newline:
            self.write("\n")

    def run(self, events: Iterable[Event]) -> None:
        for event in events:
            self.write_event(event)

    def write_event(self, event: Event) -> None:
        if self._image_depth:
            self._write_alt(event)
        elif isinstance(event, ev.Start):
            self._start(event.tag)
        elif isinstance(event, ev.End):
            self._end(event.tag)
        elif isinstance(event, ev.Text):
            if self._in_code_block:
                self.write(html.escape(event.content))
            else:
                self.write(escape_html(event.content))
        elif isinstance(event, ev.Code):
            self.write(f"<code>{html.escape(event.content)}</code>")
        elif isinstance(event, ev.Html):
            if _RAW_HEADING_START.match(event.content):
                self.fresh_line()
            self.write(event.content)
            if _RAW_HEADING_END.search(event.content):
                self._line_pending = True
        elif isinstance(event, ev.SoftBreak):
            self.write("\n")
        elif isinstance(event, ev.HardBreak):
            self.write("<br />\n")
        elif isinstance(event, ev.Rule):
            self.fresh_line()
            self.write("<hr />\n")
        elif isinstance(event, ev.TaskListMarker):
            checked = ' checked=""' if event.checked else ""
            self.write(f'<input{checked} disabled="" type="checkbox">')
        else:
            raise ValueError(f"Unknown event: {event!r}")

    def _start(self, tag: ev.Tag) -> None:
        if isinstance(tag, _BLOCK_TAGS):
            self.fresh_line()

        if isinstance(tag, ev.Paragraph):
            self.write("<p>")
        elif isinstance(tag, ev.Heading):
            self.write(f"<h{tag.level}>")
        elif isinstance(tag, ev.BlockQuote):
            if tag.alert:
                self.write(f'<blockquote class="alert alert-{tag.alert.lower()}">\n')
                self.write(f"<p>{escape_html(tag.alert).title()}</p>\n")
            else:
                self.write("<blockquote>\n")
        elif isinstance(tag, ev.CodeBlock):
            self._in_code_block = True
            if tag.lang:
                self.write(f'<pre><code class="language-{escape_html(tag.lang)}">')
            else:
                self.write("<pre><code>")
        elif isinstance(tag, ev.List):
            if tag.start is None:
                self.write("<ul>\n")
            elif tag.start == 1:
                self.write("<ol>\n")
            else:
                self.write(f'<ol start="{tag.start}">\n')
        elif isinstance(tag, ev.Item):
            self.write("<li>")
        elif isinstance(tag, ev.Emphasis):
            self.write("<em>")
        elif isinstance(tag, ev.Strong):
            self.write("<strong>")
        elif isinstance(tag, ev.Strikethrough):
            self.write("<del>")
        elif isinstance(tag, ev.Link):
            title = f' title="{escape_html(tag.title)}"' if tag.title else ""
            self.write(f'<a href="{escape_url(tag.dest)}"{title}>')
        elif isinstance(tag, ev.Image):
            self.write(f'<img src="{escape_url(tag.dest)}" alt="')
            self._image_depth = 1
        elif isinstance(tag, ev.Table):
            self.write("<table>\n")
            self._table_body_open = False
        elif isinstance(tag, ev.TableHead):
            self.write("<thead>\n<tr>\n")
        elif isinstance(tag, ev.TableRow):
            if not self._table_body_open:
                self.write("\n<tbody>\n")
                self._table_body_open = True
            self.write("<tr>\n")
        elif isinstance(tag, ev.TableCell):
            cell = "th" if tag.header else "td"
            align = f' align="{tag.align}"' if tag.align else ""
            self.write(f"<{cell}{align}>")

    def _end(self, tag: ev.Tag) -> None:
        if isinstance(tag, ev.Paragraph):
            self.write("</p>\n")
        elif isinstance(tag, ev.Heading):
            self.write(f"</h{tag.level}>\n")
        elif isinstance(tag, ev.BlockQuote):
            self.fresh_line()
            self.write("</blockquote>\n")
        elif isinstance(tag, ev.CodeBlock):
            self._in_code_block = False
            self.write("</code></pre>\n")
        elif isinstance(tag, ev.List):
            self.fresh_line()
            self.write("</ul>\n" if tag.start is None else "</ol>\n")
        elif isinstance(tag, ev.Item):
            self.write("</li>\n")
        elif isinstance(tag, ev.Emphasis):
            self.write("</em>")
        elif isinstance(tag, ev.Strong):
            self.write("</strong>")
        elif isinstance(tag, ev.Strikethrough):
            self.write("</del>")
        elif isinstance(tag, ev.Link):
            self.write("</a>")
        elif isinstance(tag, ev.Table):
            if self._table_body_open:
                self.write("</tbody>")
            self.write("</table>")
        elif isinstance(tag, ev.TableHead):
            self.write("</tr>\n</thead>")
        elif isinstance(tag, ev.TableRow):
            self.write("</tr>\n")
        elif isinstance(tag, ev.TableCell):
            self.write(f"</{'th' if tag.header else 'td'}>\n")

    def _write_alt(self, event: Event) -> None:
        # Inside an image only the text survives, as the alt attribute.
        if isinstance(event, ev.Start) and isinstance(event.tag, ev.Image):
            self._image_depth += 1
        elif isinstance(event, ev.End) and isinstance(event.tag, ev.Image):
            self._image_depth -= 1
            if self._image_depth == 0:
                title = f' title="{escape_html(event.tag.title)}"' if event.tag.title else ""
                self.write(f'"{title} />')
        elif isinstance(event, (ev.Text, ev.Code, ev.Html)):
            self.write(escape_html(event.content))
        elif isinstance(event, (ev.SoftBreak, ev.HardBreak)):
            self.write("\n")


def write_html(out: TextIO, events: Iterable[Event]) -> None:
    """Write events as HTML to `out`."""
    HtmlWriter(out).run(events)


def render_html(events: Iterable[Event]) -> str:
    """Render events as an HTML string."""
    buf = io.StringIO()
    write_html(buf, events)
    return buf.getvalue()
