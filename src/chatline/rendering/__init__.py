"""Message rendering module for chatline.

Module structure (each module hides a design decision):
- normalizer.py: Repair passes for malformed model markdown
- blocks.py: Renderer-independent block model
- parser.py: Markdown classification into blocks
- renderer.py: Rich renderables for blocks and messages
- formatting.py: Response metadata and model name display
"""

from .blocks import (
    Block,
    CodeBlock,
    ImageBlock,
    InlineCode,
    LinkSpan,
    ParagraphBlock,
    TableBlock,
)
from .formatting import format_model_name, format_response_meta
from .normalizer import normalize
from .parser import classify, unwrap_table_paragraphs
from .renderer import MessageRenderer, ScrollableTable

__all__ = [
    "Block",
    "CodeBlock",
    "ImageBlock",
    "InlineCode",
    "LinkSpan",
    "MessageRenderer",
    "ParagraphBlock",
    "ScrollableTable",
    "TableBlock",
    "classify",
    "format_model_name",
    "format_response_meta",
    "normalize",
    "unwrap_table_paragraphs",
]
