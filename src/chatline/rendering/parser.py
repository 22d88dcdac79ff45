"""Classification of normalized markdown into blocks.

Hidden design decisions:
- Using markdown-it-py (CommonMark plus GFM tables and strikethrough)
- Raw HTML is shown as text, never interpreted
- A fence without a language tag is treated as inline code
- Paragraphs whose only child is a table are unwrapped
"""

from collections.abc import Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .blocks import (
    Block,
    CodeBlock,
    HeadingBlock,
    ImageSpan,
    InlineCode,
    LinkSpan,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    RuleBlock,
    Span,
    TableBlock,
    TextSpan,
)

_md = MarkdownIt("commonmark", {"html": False}).enable("table").enable("strikethrough")


def classify(content: str) -> list[Block]:
    """Parse markdown content into renderable blocks."""
    blocks, _ = _parse_blocks(_md.parse(content), 0, None)
    return unwrap_table_paragraphs(blocks)


def unwrap_table_paragraphs(blocks: Sequence[Block]) -> list[Block]:
    """Replace paragraphs whose sole child is a table with the table itself.

    markdown-it closes a paragraph before a table starts, so parsed output
    never holds one; this covers block lists assembled by callers.
    MessageRenderer.render_block applies the same rule to a single block.
    """
    unwrapped: list[Block] = []
    for block in blocks:
        if isinstance(block, ParagraphBlock) and len(block.children) == 1 \
                and isinstance(block.children[0], TableBlock):
            unwrapped.append(block.children[0])
        elif isinstance(block, QuoteBlock):
            unwrapped.append(QuoteBlock(tuple(unwrap_table_paragraphs(block.children))))
        elif isinstance(block, ListBlock):
            items = tuple(tuple(unwrap_table_paragraphs(item)) for item in block.items)
            unwrapped.append(ListBlock(block.ordered, items, block.start))
        else:
            unwrapped.append(block)
    return unwrapped


def _parse_blocks(tokens: list[Token], i: int, stop: str | None) -> tuple[list[Block], int]:
    blocks: list[Block] = []
    while i < len(tokens):
        token = tokens[i]
        kind = token.type

        if kind == stop:
            return blocks, i + 1

        if kind == "paragraph_open":
            blocks.append(ParagraphBlock(_parse_inline(tokens[i + 1].children)))
            i += 3
        elif kind == "heading_open":
            level = int(token.tag[1:])
            blocks.append(HeadingBlock(level, _parse_inline(tokens[i + 1].children)))
            i += 3
        elif kind == "fence":
            language = token.info.strip().split()[0] if token.info.strip() else ""
            if language:
                blocks.append(CodeBlock(token.content, language))
            else:
                blocks.append(ParagraphBlock((InlineCode(token.content.rstrip("\n")),)))
            i += 1
        elif kind == "code_block":
            blocks.append(ParagraphBlock((InlineCode(token.content.rstrip("\n")),)))
            i += 1
        elif kind == "table_open":
            table, i = _parse_table(tokens, i + 1)
            blocks.append(table)
        elif kind in ("bullet_list_open", "ordered_list_open"):
            ordered = kind == "ordered_list_open"
            start = int(token.attrGet("start") or 1) if ordered else 1
            items, i = _parse_list_items(tokens, i + 1, kind.replace("_open", "_close"))
            blocks.append(ListBlock(ordered, items, start))
        elif kind == "blockquote_open":
            children, i = _parse_blocks(tokens, i + 1, "blockquote_close")
            blocks.append(QuoteBlock(tuple(children)))
        elif kind == "hr":
            blocks.append(RuleBlock())
            i += 1
        elif kind == "html_block":
            blocks.append(ParagraphBlock((TextSpan(token.content.rstrip("\n")),)))
            i += 1
        else:
            i += 1
    return blocks, i


def _parse_list_items(
    tokens: list[Token], i: int, stop: str
) -> tuple[tuple[tuple[Block, ...], ...], int]:
    items: list[tuple[Block, ...]] = []
    while i < len(tokens) and tokens[i].type != stop:
        if tokens[i].type == "list_item_open":
            children, i = _parse_blocks(tokens, i + 1, "list_item_close")
            items.append(tuple(children))
        else:
            i += 1
    return tuple(items), i + 1


def _parse_table(tokens: list[Token], i: int) -> tuple[TableBlock, int]:
    header: list[str] = []
    rows: list[tuple[str, ...]] = []
    alignments: list[str | None] = []
    row: list[str] = []
    in_head = False

    while i < len(tokens) and tokens[i].type != "table_close":
        token = tokens[i]
        if token.type == "thead_open":
            in_head = True
        elif token.type == "thead_close":
            in_head = False
        elif token.type == "tr_open":
            row = []
        elif token.type == "tr_close":
            if in_head:
                header = row
            else:
                rows.append(tuple(row))
        elif token.type == "th_open":
            style = str(token.attrGet("style") or "")
            alignments.append(style.removeprefix("text-align:") or None)
        elif token.type == "inline":
            row.append(token.content.strip())
        i += 1

    return TableBlock(tuple(header), tuple(rows), tuple(alignments)), i + 1


def _parse_inline(children: list[Token] | None) -> tuple[Span, ...]:
    spans: list[Span] = []
    bold = italic = strike = 0
    link_href: str | None = None
    link_text: list[str] = []

    for token in children or []:
        kind = token.type
        if kind == "strong_open":
            bold += 1
        elif kind == "strong_close":
            bold -= 1
        elif kind == "em_open":
            italic += 1
        elif kind == "em_close":
            italic -= 1
        elif kind == "s_open":
            strike += 1
        elif kind == "s_close":
            strike -= 1
        elif kind == "link_open":
            link_href = str(token.attrGet("href") or "")
            link_text = []
        elif kind == "link_close":
            spans.append(LinkSpan(href=link_href or "", text="".join(link_text)))
            link_href = None
        elif kind in ("text", "html_inline", "code_inline") and link_href is not None:
            link_text.append(token.content)
        elif kind == "code_inline":
            spans.append(InlineCode(token.content))
        elif kind in ("text", "html_inline"):
            if token.content:
                spans.append(TextSpan(token.content, bold > 0, italic > 0, strike > 0))
        elif kind in ("softbreak", "hardbreak"):
            spans.append(TextSpan("\n"))
        elif kind == "image":
            spans.append(ImageSpan(src=str(token.attrGet("src") or ""), alt=token.content))
    return tuple(spans)
