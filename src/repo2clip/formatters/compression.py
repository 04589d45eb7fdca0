"""
Whitespace compression for file contents.

Runs of spaces and tabs outside quoted strings collapse to one space, each
line keeps its leading indentation, and three or more consecutive blank
lines collapse to exactly one. Whether the text ends with a newline is
left as it was.
"""

import re
from typing import List

_INDENT = re.compile(r'^[ \t]*')
_QUOTES = ('"', "'", '`')
_BLANK_RUN = 3


def _collapse_line(body: str) -> str:
    """Collapse horizontal whitespace outside string literals.

    Quote state does not carry over to the next line.
    """
    out: List[str] = []
    quote = None
    escaped = False
    in_space = False

    for char in body:
        if quote is not None:
            out.append(char)
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == quote:
                quote = None
            continue

        if char in ' \t':
            if not in_space:
                out.append(' ')
                in_space = True
            continue

        in_space = False
        if char in _QUOTES:
            quote = char
        out.append(char)

    return ''.join(out)


def compress_text(text: str) -> str:
    """Apply whitespace compression to ``text``. Idempotent."""
    if not text:
        return text

    ends_with_newline = text.endswith('\n')
    lines = text.split('\n')
    if ends_with_newline:
        lines.pop()

    result: List[str] = []
    blank_run: List[str] = []

    def flush_blanks() -> None:
        if len(blank_run) >= _BLANK_RUN:
            result.append('')
        else:
            result.extend(blank_run)
        blank_run.clear()

    for line in lines:
        if not line.strip():
            blank_run.append(line)
            continue
        flush_blanks()
        indent = _INDENT.match(line).group(0)
        result.append(indent + _collapse_line(line[len(indent):]))
    flush_blanks()

    compressed = '\n'.join(result)
    if ends_with_newline:
        compressed += '\n'
    return compressed
