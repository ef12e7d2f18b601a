"""
Turns raw MIB text into a stream of logical lines.

Comment lines and blank lines are dropped, trailing `--` comments are cut,
and quoted values or brace groups that span several source lines are
folded into one line with single spaces where the line breaks were. A
clause keyword standing alone on its line (`DESCRIPTION`, `SYNTAX`) is joined
with the value on the line after it.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

from mibkit.errors import UnterminatedQuotedString

COMMENT_MARKER = "--"
_BARE_KEYWORD_RE = re.compile(r"^[A-Z][A-Z-]*$")
# Clause keywords whose value may start on the next line in any form
CLAUSE_KEYWORDS = frozenset({
    "SYNTAX",
    "MAX-ACCESS",
    "ACCESS",
    "STATUS",
    "DESCRIPTION",
    "UNITS",
    "DISPLAY-HINT",
    "INDEX",
})


@dataclass(frozen=True)
class LogicalLine:
    number: int
    text: str


def strip_inline_comment(line: str) -> str:
    """Cut a trailing `-- comment` that is not inside a quoted value."""
    in_quote = False
    for i, ch in enumerate(line):
        if ch == '"':
            in_quote = not in_quote
        elif not in_quote and line.startswith(COMMENT_MARKER, i):
            return line[:i].rstrip()
    return line


def _open_quote(line: str) -> bool:
    return line.count('"') % 2 == 1


def _brace_depth(line: str) -> int:
    depth = 0
    in_quote = False
    for ch in line:
        if ch == '"':
            in_quote = not in_quote
        elif in_quote:
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
    return depth


class _SourceLines:
    """Cursor over the trimmed physical lines of the input."""

    def __init__(self, text: str) -> None:
        self._lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        self.pos = 0

    def __bool__(self) -> bool:
        return self.pos < len(self._lines)

    def next(self) -> str:
        line = self._lines[self.pos].strip()
        self.pos += 1
        return line


def _read_quoted(first: str, number: int, keyword: str, source: _SourceLines) -> str:
    fragments: List[str] = [first]
    while source:
        continuation = source.next()
        if not continuation:
            continue
        fragments.append(continuation)
        if '"' in continuation:
            return " ".join(fragments)
    raise UnterminatedQuotedString(keyword, number)


def _read_braced(line: str, source: _SourceLines) -> str:
    depth = _brace_depth(line)
    while depth > 0 and source:
        continuation = source.next()
        if not continuation or continuation.startswith(COMMENT_MARKER):
            continue
        continuation = strip_inline_comment(continuation)
        line = f"{line} {continuation}"
        depth += _brace_depth(continuation)
    return line


def logical_lines(text: str) -> Iterator[LogicalLine]:
    """Yield the logical lines of a MIB module.

    Raises:
        UnterminatedQuotedString: if a quoted value is still open at the end
            of the input.
    """
    source = _SourceLines(text)
    pending: Optional[LogicalLine] = None

    while source:
        number = source.pos + 1
        line = source.next()
        if not line or line.startswith(COMMENT_MARKER):
            continue

        line = strip_inline_comment(line)
        if not line:
            continue
        if _open_quote(line):
            keyword = pending.text if pending is not None and line.startswith('"') else line.split(" ", 1)[0]
            line = strip_inline_comment(_read_quoted(line, number, keyword, source))
        line = _read_braced(line, source)

        if pending is not None:
            if pending.text in CLAUSE_KEYWORDS or line.startswith('"'):
                yield LogicalLine(pending.number, f"{pending.text} {line}")
                pending = None
                continue
            yield pending
            pending = None

        if _BARE_KEYWORD_RE.match(line) and line not in ("BEGIN", "END", "IMPORTS", "EXPORTS"):
            pending = LogicalLine(number, line)
            continue

        yield LogicalLine(number, line)

    if pending is not None:
        yield pending
