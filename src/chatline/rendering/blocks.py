"""Renderable block model.

Hides the internal representation of classified message content: what a
renderer receives after markdown parsing, independent of the output
surface (terminal, TUI widget).
"""

from dataclasses import dataclass, field

LINK_TARGET = "_blank"
LINK_REL = "noopener noreferrer"


@dataclass(frozen=True)
class TextSpan:
    text: str
    bold: bool = False
    italic: bool = False
    strike: bool = False


@dataclass(frozen=True)
class InlineCode:
    """Code rendered inline, distinct from block code."""

    code: str


@dataclass(frozen=True)
class LinkSpan:
    """Hyperlink; always opens in a new browsing context without referrer."""

    href: str
    text: str
    target: str = LINK_TARGET
    rel: str = LINK_REL

    @property
    def attributes(self) -> dict[str, str]:
        return {"href": self.href, "target": self.target, "rel": self.rel}


@dataclass(frozen=True)
class ImageSpan:
    src: str
    alt: str = ""


Span = TextSpan | InlineCode | LinkSpan | ImageSpan


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code with a language tag, kept for syntax highlighting."""

    code: str
    language: str


@dataclass(frozen=True)
class TableBlock:
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()
    alignments: tuple[str | None, ...] = ()


@dataclass(frozen=True)
class HeadingBlock:
    level: int
    spans: tuple[Span, ...]


@dataclass(frozen=True)
class ParagraphBlock:
    """A paragraph; children are spans, or blocks nested by raw markup."""

    children: tuple["Span | Block", ...]


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[tuple["Block", ...], ...]
    start: int = 1


@dataclass(frozen=True)
class QuoteBlock:
    children: tuple["Block", ...]


@dataclass(frozen=True)
class RuleBlock:
    pass


@dataclass(frozen=True)
class ImageBlock:
    """Generated image with its caption blocks."""

    url: str
    caption: tuple["Block", ...] = field(default_factory=tuple)


Block = ParagraphBlock | HeadingBlock | CodeBlock | TableBlock | ListBlock | QuoteBlock | RuleBlock | ImageBlock
