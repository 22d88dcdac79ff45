"""Best-effort repair of model-generated markdown.

Hides the fixed, ordered pipeline of adjacency repairs applied to
assistant content before it is parsed. Each pass is an independent
pattern rewrite over the previous pass's output; this is not a markdown
parser and input malformed in other ways passes through untouched.
"""

import re
from collections.abc import Callable

# A table row is a line whose first non-blank character is "|"
_BLANK_RUN = re.compile(r"\n(?:[^\S\n]*\n)+")
_HEADING_BEFORE_TABLE = re.compile(r"^(#{1,6}(?!#)[^\n]*)\n(?:[^\S\n]*\n)+(?=[ \t]*\|)", re.MULTILINE)
_GAP_BETWEEN_ROWS = re.compile(r"^([ \t]*\|[^\n]*)\n(?:[^\S\n]*\n)+(?=[ \t]*\|)", re.MULTILINE)
_TABLE_THEN_TEXT = re.compile(r"^([ \t]*\|[^\n]*)\n(?=[ \t]*[^|\s])", re.MULTILINE)


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of two or more line breaks into a single one."""
    return _BLANK_RUN.sub("\n", text)


def attach_heading_to_table(text: str) -> str:
    """Remove blank lines between a heading and the table row below it."""
    return _HEADING_BEFORE_TABLE.sub(r"\1\n", text)


def join_table_rows(text: str) -> str:
    """Remove blank lines separating two table rows."""
    return _GAP_BETWEEN_ROWS.sub(r"\1\n", text)


def terminate_tables(text: str) -> str:
    """Insert a blank line between a table's last row and following text."""
    return _TABLE_THEN_TEXT.sub(r"\1\n\n", text)


PASSES: tuple[Callable[[str], str], ...] = (
    collapse_blank_lines,
    attach_heading_to_table,
    join_table_rows,
    terminate_tables,
)


def normalize(raw: str) -> str:
    """Apply every repair pass in order. Never raises."""
    text = raw
    for repair in PASSES:
        text = repair(text)
    return text
