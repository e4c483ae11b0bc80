"""Line-oriented markdown subset rendered into typed display blocks.

Supports ``#``/``##``/``###`` headings, ``-``/``*`` bullets, ``1.`` numbered
items, blank-line spacers and ``**bold**`` spans. Anything else is a paragraph.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

BlockKind = Literal["heading", "unordered_item", "ordered_item", "paragraph", "spacer"]

_BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
_ORDERED_PREFIX = re.compile(r"^[0-9]+\.\s")
_HEADING_PREFIXES: tuple[tuple[str, int], ...] = (("### ", 3), ("## ", 2), ("# ", 1))
_BULLET_PREFIXES = ("- ", "* ")
# Block level 1 renders as <h2>.
_HEADING_TAGS = {1: "h2", 2: "h3", 3: "h4"}


@dataclass(frozen=True, slots=True)
class Span:
    text: str
    emphasized: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "emphasized": self.emphasized}


@dataclass(frozen=True, slots=True)
class Block:
    """One rendered line."""

    kind: BlockKind
    text: str = ""
    level: int | None = None
    spans: tuple[Span, ...] = field(default_factory=tuple)

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.spans)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "text": self.text,
            "level": self.level,
            "spans": [span.to_dict() for span in self.spans],
        }


def split_inline(text: str) -> list[Span]:
    """Split `text` on paired ``**`` markers; odd split positions are emphasized."""
    if not text:
        return []
    parts = _BOLD_PATTERN.split(text)
    if len(parts) == 1:
        return [Span(text)]
    return [Span(part, emphasized=idx % 2 == 1) for idx, part in enumerate(parts) if part]


def _block(kind: BlockKind, text: str, level: int | None = None) -> Block:
    return Block(kind=kind, text=text, level=level, spans=tuple(split_inline(text)))


def classify_line(line: str) -> Block:
    """Turn one source line into a block. First matching rule wins."""
    line = line.removesuffix("\r")
    for prefix, level in _HEADING_PREFIXES:
        if line.startswith(prefix):
            return _block("heading", line[len(prefix) :], level)
    if line.startswith(_BULLET_PREFIXES):
        return _block("unordered_item", line[2:])
    match = _ORDERED_PREFIX.match(line)
    if match:
        return _block("ordered_item", line[match.end() :])
    if not line.strip():
        return Block(kind="spacer")
    return _block("paragraph", line)


class RenderedBlocks:
    """Lazy, restartable block sequence for one text value."""

    __slots__ = ("_text",)

    def __init__(self, text: str | None) -> None:
        self._text = text if isinstance(text, str) else ""

    def __iter__(self) -> Iterator[Block]:
        if not self._text:
            return
        for line in self._text.split("\n"):
            yield classify_line(line)

    def __len__(self) -> int:
        if not self._text:
            return 0
        return self._text.count("\n") + 1

    def __bool__(self) -> bool:
        return bool(self._text)

    def __repr__(self) -> str:
        return f"RenderedBlocks(lines={len(self)})"

    def to_list(self) -> list[Block]:
        return list(self)

    def to_dicts(self) -> list[dict[str, Any]]:
        return [block.to_dict() for block in self]


def render_markdown(text: str | None) -> RenderedBlocks:
    return RenderedBlocks(text)


def _spans_to_html(spans: Iterable[Span]) -> str:
    out: list[str] = []
    for span in spans:
        escaped = html.escape(span.text)
        out.append(f"<strong>{escaped}</strong>" if span.emphasized else escaped)
    return "".join(out)


def blocks_to_html(blocks: Iterable[Block]) -> str:
    """Render blocks as an HTML fragment; empty input gives an empty string."""
    parts: list[str] = []
    for block in blocks:
        inner = _spans_to_html(block.spans)
        if block.kind == "heading":
            tag = _HEADING_TAGS.get(block.level or 1, "h2")
            parts.append(f"<{tag}>{inner}</{tag}>")
        elif block.kind == "unordered_item":
            parts.append(f'<li class="list-disc">{inner}</li>')
        elif block.kind == "ordered_item":
            parts.append(f'<li class="list-decimal">{inner}</li>')
        elif block.kind == "spacer":
            parts.append('<div class="spacer"></div>')
        else:
            parts.append(f"<p>{inner}</p>")
    if not parts:
        return ""
    return '<div class="md">' + "".join(parts) + "</div>"
