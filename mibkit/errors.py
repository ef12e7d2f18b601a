"""Fatal parse errors. Per-definition problems are reported as diagnostics instead."""
from typing import Optional


class MibParseError(Exception):
    """Raised when a MIB module cannot be parsed at all."""
    def __init__(self, message: str, line: Optional[int] = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class MissingModuleHeader(MibParseError):
    """No `DEFINITIONS ::= BEGIN` or MODULE-IDENTITY header precedes the definitions."""


class UnterminatedQuotedString(MibParseError):
    """A quoted clause (DESCRIPTION, UNITS, ...) is still open at end of input."""
    def __init__(self, keyword: str, line: int) -> None:
        super().__init__(f"quoted {keyword or 'value'} opened here is never closed", line)
        self.keyword = keyword
