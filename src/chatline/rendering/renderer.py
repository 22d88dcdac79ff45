"""Rich rendering of classified message content.

Hides how blocks become terminal renderables:
- Code blocks keep their language tag for highlighting and never wrap
- Tables sit in a container that re-measures on every render and reports
  whether the available width forces horizontal scrolling
- Links carry a hyperlink style that opens outside the client
- Image-generation messages render the image reference plus a caption
  that goes through the same normalize-and-render pipeline
"""

from collections.abc import Iterable

from rich import box
from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.measure import Measurement
from rich.padding import Padding
from rich.panel import Panel
from rich.rule import Rule
from rich.style import Style
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from ..timeline.models import Message, Role, TempMessage
from .blocks import (
    Block,
    CodeBlock,
    HeadingBlock,
    ImageBlock,
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
from .normalizer import normalize
from .parser import classify

INLINE_CODE_STYLE = Style(color="bright_magenta", bgcolor="grey15")
LINK_STYLE = Style(color="bright_blue", underline=True)
HEADING_STYLES = {1: "bold underline", 2: "bold", 3: "bold italic"}

# Unconstrained width used to find a table's natural size
_NATURAL_WIDTH = 10_000


class ScrollableTable:
    """Horizontally scrollable table container.

    The table is laid out at its natural width with unwrapped cells. Each
    render compares that width with the space offered, so resizing the
    console or changing the content re-evaluates ``scrollable``.
    """

    def __init__(self, block: TableBlock) -> None:
        self.block = block
        self.scrollable = False

    def build_table(self) -> Table:
        table = Table(box=box.SIMPLE_HEAD, show_edge=False, expand=False)
        for index, title in enumerate(self.block.header):
            align = self.block.alignments[index] if index < len(self.block.alignments) else None
            table.add_column(title, justify=align or "left", no_wrap=True, overflow="ignore")
        width = len(self.block.header)
        for row in self.block.rows:
            cells = list(row[:width]) + [""] * (width - len(row))
            table.add_row(*cells)
        return table

    def natural_width(self, console: Console, options: ConsoleOptions) -> int:
        wide = options.update(width=_NATURAL_WIDTH)
        return Measurement.get(console, wide, self.build_table()).maximum

    def __rich_measure__(self, console: Console, options: ConsoleOptions) -> Measurement:
        width = self.natural_width(console, options)
        return Measurement(width, width)

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = self.natural_width(console, options)
        self.scrollable = width > options.max_width
        yield from console.render(self.build_table(), options.update(width=max(width, 1)))


class MessageRenderer:
    """Turns message content into rich renderables."""

    def __init__(self, code_theme: str = "monokai") -> None:
        self._code_theme = code_theme

    def classify(self, content: str) -> list[Block]:
        """Normalize then classify content into blocks."""
        return classify(normalize(content))

    def render(self, content: str) -> Group:
        """Render assistant content through normalization and classification."""
        return Group(*self._render_blocks(self.classify(content)))

    def image_block(self, message: Message) -> ImageBlock:
        return ImageBlock(url=message.image_url or "", caption=tuple(self.classify(message.content)))

    def render_message(self, message: Message | TempMessage) -> RenderableType:
        """Render one message; image generation and text are exclusive paths."""
        if message.role == Role.USER:
            return Text(message.content)
        if isinstance(message, Message) and message.is_image_generation and message.image_url:
            return self.render_image(self.image_block(message))
        return self.render(message.content)

    def render_image(self, block: ImageBlock) -> Group:
        reference = Text("🖼  ", end="")
        reference.append(block.url, style=LINK_STYLE + Style(link=block.url))
        frame = Panel(reference, title="Generated image", subtitle="select to enlarge", box=box.ROUNDED)
        return Group(frame, *self._render_blocks(block.caption))

    def _render_blocks(self, blocks: Iterable[Block]) -> list[RenderableType]:
        return [self.render_block(block) for block in blocks]

    def render_block(self, block: Block) -> RenderableType:
        if isinstance(block, ParagraphBlock):
            spans = [child for child in block.children if not _is_block(child)]
            nested = [child for child in block.children if _is_block(child)]
            if not spans and len(nested) == 1 and isinstance(nested[0], TableBlock):
                return ScrollableTable(nested[0])
            if not nested:
                return render_spans(spans)
            return Group(render_spans(spans), *self._render_blocks(nested))
        if isinstance(block, HeadingBlock):
            return render_spans(block.spans, style=HEADING_STYLES.get(block.level, "bold"))
        if isinstance(block, CodeBlock):
            return Syntax(
                block.code.rstrip("\n"),
                block.language,
                theme=self._code_theme,
                word_wrap=False,
                padding=(0, 1),
            )
        if isinstance(block, TableBlock):
            return ScrollableTable(block)
        if isinstance(block, ListBlock):
            return self._render_list(block)
        if isinstance(block, QuoteBlock):
            return Padding(Group(*self._render_blocks(block.children)), (0, 0, 0, 2), style="dim")
        if isinstance(block, RuleBlock):
            return Rule(style="dim")
        if isinstance(block, ImageBlock):
            return self.render_image(block)
        return Text(str(block))

    def _render_list(self, block: ListBlock) -> Group:
        rendered: list[RenderableType] = []
        for offset, item in enumerate(block.items):
            marker = f"{block.start + offset}." if block.ordered else "•"
            table = Table.grid(padding=(0, 1))
            table.add_column(no_wrap=True)
            table.add_column()
            table.add_row(Text(marker, style="bold"), Group(*self._render_blocks(item)))
            rendered.append(table)
        return Group(*rendered)


def _is_block(child: object) -> bool:
    return not isinstance(child, (TextSpan, InlineCode, LinkSpan, ImageSpan))


def render_spans(spans: Iterable[Span], style: str = "") -> Text:
    """Render inline spans into a single Text."""
    text = Text(style=style)
    for span in spans:
        if isinstance(span, TextSpan):
            text.append(span.text, style=Style(bold=span.bold or None, italic=span.italic or None,
                                               strike=span.strike or None))
        elif isinstance(span, InlineCode):
            text.append(span.code, style=INLINE_CODE_STYLE)
        elif isinstance(span, LinkSpan):
            text.append(span.text or span.href, style=LINK_STYLE + Style(link=span.href))
        elif isinstance(span, ImageSpan):
            text.append(f"[image: {span.alt or span.src}]", style=LINK_STYLE + Style(link=span.src))
    return text
