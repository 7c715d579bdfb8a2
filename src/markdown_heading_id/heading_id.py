"""
Explicit heading IDs for Markdown event streams.

Supports the extended Markdown syntax for heading IDs:

    ## Heading {#heading-id}

which renders as:

    <h2 id="heading-id">Heading</h2>

The heading event vocabulary has no attribute slot, so a heading whose last text
run ends in a `{#identifier}` marker is re-emitted with raw `Html` events for its
opening and closing tags, and the marker is stripped from the text. All other
events pass through unchanged.

Key rules:
- Only the last `Text` event of a heading is examined, so a marker split across
  inline elements is never recognized
- The identifier is one or more letters, digits, hyphens or underscores
- Only a trailing marker counts: in `{#a}{#b}`, `{#a}` stays as literal text
- Anything malformed is left verbatim (no errors are raised for content)

Usage:
    from markdown_heading_id.heading_id import HeadingId
    from markdown_heading_id.html_writer import render_html
    from markdown_heading_id.marko_events import parse_events

    html = render_html(HeadingId(parse_events("## Heading {#heading-id}")))
"""

from __future__ import annotations

import html
import logging
import re
from collections import deque
from collections.abc import Iterable, Iterator

from markdown_heading_id.events import (
    End,
    Event,
    Heading,
    Html,
    Start,
    Text,
    is_heading_end,
    is_heading_start,
)

log = logging.getLogger(__name__)

# `{#id}` at the very end of a text run, optionally followed by whitespace.
# Any whitespace before the marker is stripped separately.
HEADING_ID_PATTERN = re.compile(r"\{#(?P<id>[\w-]+)\}\s*\Z")


def split_heading_id(text: str) -> tuple[str, str | None]:
    """
    Split a trailing `{#identifier}` marker off a heading's text.

    Returns `(remainder, identifier)`, where `remainder` is the text before the
    marker with trailing whitespace removed. If there is no valid trailing
    marker, returns `(text, None)` with the text unchanged.
    """
    match = HEADING_ID_PATTERN.search(text)
    if match is None:
        return text, None
    return text[: match.start()].rstrip(), match.group("id")


def escape_attribute(value: str) -> str:
    """Escape a string for use inside a double-quoted HTML attribute."""
    return html.escape(value, quote=True)


def rewrite_heading(start: Start, buffer: list[Event], end: End) -> list[Event]:
    """
    Produce the output events for one closed heading.

    `buffer` holds the events between `start` and `end` (exclusive). If its last
    event is a `Text` ending in an ID marker, the heading is wrapped in raw
    `<h{level} id="...">` / `</h{level}>` markup and the marker is removed.
    Otherwise the original events are returned unchanged.
    """
    assert isinstance(start.tag, Heading)
    level = start.tag.level

    if not buffer or not isinstance(buffer[-1], Text):
        return [start, *buffer, end]

    remainder, identifier = split_heading_id(buffer[-1].content)
    if identifier is None:
        return [start, *buffer, end]

    content = buffer[:-1]
    if remainder:
        content.append(Text(remainder))

    log.debug("Heading level %d gets id %r", level, identifier)
    return [
        Html(f'<h{level} id="{escape_attribute(identifier)}">'),
        *content,
        Html(f"</h{level}>"),
    ]


class HeadingId(Iterator[Event]):
    """
    Filter over an event stream that converts headings with an ID marker.

    Wraps any iterable of events and is itself an iterator of events. Events
    outside headings are returned as they are pulled. On a heading start, the
    filter pulls and buffers the whole heading (the ID is at its tail), then
    returns the rewritten or original events one per call.

    Headings never nest, so one buffer is enough. Construct a new filter for
    each document.
    """

    def __init__(self, events: Iterable[Event]) -> None:
        self._events = iter(events)
        self._pending: deque[Event] = deque()

    def __iter__(self) -> HeadingId:
        return self

    def __next__(self) -> Event:
        if self._pending:
            return self._pending.popleft()

        event = next(self._events)
        if not is_heading_start(event):
            return event

        assert isinstance(event, Start)
        self._pending.extend(self._convert_heading(event))
        return self._pending.popleft()

    def _convert_heading(self, start: Start) -> list[Event]:
        assert isinstance(start.tag, Heading)
        level = start.tag.level

        # Read events until the end of the heading comes.
        buffer: list[Event] = []
        for event in self._events:
            if is_heading_end(event, level):
                assert isinstance(event, End)
                return rewrite_heading(start, buffer, event)
            buffer.append(event)

        # Source ended inside a heading. Keep everything that was read.
        log.debug(
            "Event stream ended inside a level %d heading; passing %d events through",
            level,
            len(buffer),
        )
        return [start, *buffer]
