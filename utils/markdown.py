"""Minimal markdown-subset formatter for assistant replies.

Supported syntax:

* ``## `` and ``### `` line prefixes become level 2/3 headings,
* ``- `` or ``* `` line prefixes become bullet items (prefix stripped),
* ``1. `` style lines become numbered items (text kept verbatim),
* blank lines become paragraph breaks,
* ``**text**`` becomes a bold span wherever it appears inside a line.

Everything else is a plain paragraph. Only complete ``**`` pairs are bolded;
a dangling ``**`` is kept as literal text.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "Block",
    "BlockKind",
    "Span",
    "classify_line",
    "format_message",
    "parse_inline",
    "render_html",
]

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_NUMBERED = re.compile(r"^\d+\.\s")
_BULLET = re.compile(r"^[*\-]\s")


class BlockKind(str, Enum):
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    BULLET = "bullet"
    NUMBERED = "numbered"
    BLANK = "blank"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class Span:
    text: str
    bold: bool = False


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    spans: tuple[Span, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


def classify_line(line: str) -> tuple[BlockKind, str]:
    """Return the block kind of a single line and the text left after its prefix."""
    trimmed = line.strip()
    if trimmed.startswith("## "):
        return BlockKind.HEADING2, trimmed[3:]
    if trimmed.startswith("### "):
        return BlockKind.HEADING3, trimmed[4:]
    if _BULLET.match(trimmed):
        return BlockKind.BULLET, trimmed[2:]
    if _NUMBERED.match(trimmed):
        return BlockKind.NUMBERED, trimmed
    if not trimmed:
        return BlockKind.BLANK, ""
    # paragraphs keep the line untrimmed
    return BlockKind.PARAGRAPH, line


def parse_inline(text: str) -> tuple[Span, ...]:
    """Split text into plain and bold spans. Empty plain spans are dropped."""
    spans: list[Span] = []
    cursor = 0
    for match in _BOLD.finditer(text):
        if match.start() > cursor:
            spans.append(Span(text[cursor : match.start()]))
        spans.append(Span(match.group(1), bold=True))
        cursor = match.end()
    if cursor < len(text):
        spans.append(Span(text[cursor:]))
    return tuple(spans)


def format_message(text: str) -> list[Block]:
    """Format a reply into one block per input line."""
    blocks = []
    for line in text.split("\n"):
        kind, body = classify_line(line)
        spans = () if kind is BlockKind.BLANK else parse_inline(body)
        blocks.append(Block(kind, spans))
    return blocks


_TAGS = {
    BlockKind.HEADING2: "h4",
    BlockKind.HEADING3: "h5",
    BlockKind.BULLET: "li",
    BlockKind.NUMBERED: "div",
    BlockKind.PARAGRAPH: "p",
}


def render_html(blocks: list[Block]) -> str:
    """Render formatted blocks as escaped HTML fragments, one per line."""
    out = []
    for block in blocks:
        if block.kind is BlockKind.BLANK:
            out.append("<br/>")
            continue
        inner = "".join(
            f"<strong>{html.escape(s.text)}</strong>" if s.bold else html.escape(s.text) for s in block.spans
        )
        tag = _TAGS[block.kind]
        out.append(f"<{tag}>{inner}</{tag}>")
    return "\n".join(out)
