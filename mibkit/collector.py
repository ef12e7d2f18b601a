"""
Definition collector.

A line-oriented state machine over the preprocessor's logical lines. It
records direct OID assignments straight into the symbol table and collects
everything else as unresolved `Definition` records for the resolver.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from mibkit.app_logger import AppLogger
from mibkit.oid import OidPath
from mibkit.preprocessor import LogicalLine
from mibkit.scanner import ModuleScanner
from mibkit.types import (
    Attributes,
    BLOCK_KINDS,
    Definition,
    DefinitionKind,
    Diagnostic,
    DiagnosticKind,
)

logger = AppLogger.get(__name__)

RESERVED_NAMES = {
    "ACCESS",
    "AUGMENTS",
    "BEGIN",
    "CONTACT-INFO",
    "DEFINITIONS",
    "DEFVAL",
    "DESCRIPTION",
    "DISPLAY-HINT",
    "END",
    "ENTERPRISE",
    "EXPORTS",
    "FROM",
    "IDENTIFIER",
    "IMPORTS",
    "INDEX",
    "LAST-UPDATED",
    "MAX-ACCESS",
    "MIN-ACCESS",
    "MODULE-IDENTITY",
    "NOTIFICATIONS",
    "OBJECTS",
    "ORGANIZATION",
    "REFERENCE",
    "REVISION",
    "STATUS",
    "SYNTAX",
    "TEXTUAL-CONVENTION",
    "TRAP-TYPE",
    "UNITS",
    "VARIABLES",
    "WRITE-SYNTAX",
}

OID_ASSIGNMENT_RE = re.compile(r"^([A-Za-z][\w-]*)\s+OBJECT\s+IDENTIFIER\s*::=\s*(.*)$")
OID_DECLARATION_RE = re.compile(r"^([A-Za-z][\w-]*)\s+OBJECT\s+IDENTIFIER$")
BLOCK_OPEN_RE = re.compile(
    r"^([A-Za-z][\w-]*)\s+(" + "|".join(re.escape(k.value) for k in BLOCK_KINDS) + r")$"
)

NUMERIC_RE = re.compile(r"^\.?\d+(\.\d+)*$")
SUFFIXED_RE = re.compile(r"^([A-Za-z][\w-]*)((?:\.\d+)+)$")
NAME_RE = re.compile(r"^[A-Za-z][\w-]*$")
BRACE_TOKEN_RE = re.compile(r"[A-Za-z][\w-]*\s*\(\s*\d+\s*\)|[A-Za-z][\w-]*|\d+|\S")
NAMED_NUMBER_RE = re.compile(r"^[A-Za-z][\w-]*\s*\(\s*(\d+)\s*\)$")

# Clause keyword -> Attributes field
CLAUSES = {
    "SYNTAX": "syntax",
    "MAX-ACCESS": "access",
    "ACCESS": "access",
    "STATUS": "status",
    "DESCRIPTION": "description",
    "UNITS": "units",
    "DISPLAY-HINT": "display_hint",
    "INDEX": "index",
}
QUOTED_CLAUSES = {"DESCRIPTION", "UNITS", "DISPLAY-HINT"}
# Macros other than OBJECT-TYPE reuse SYNTAX/ACCESS keywords inside
# sub-clauses (MODULE-COMPLIANCE refinements), so only these are kept.
GENERIC_CLAUSES = {"STATUS", "DESCRIPTION"}


class CollectorState(Enum):
    NEUTRAL = "neutral"
    IN_IMPORTS = "in-imports"
    IN_ATTRIBUTE_BLOCK = "in-attribute-block"


class AssignmentShape(Enum):
    NUMERIC = "numeric"
    SUFFIXED = "suffixed"
    ALIAS = "alias"
    BRACE = "brace"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Assignment:
    """A classified `::=` right-hand side."""
    shape: AssignmentShape
    base: Optional[str] = None
    components: Tuple[int, ...] = ()


def _number(token: str) -> Optional[int]:
    if token.isdigit():
        return int(token)
    m = NAMED_NUMBER_RE.match(token)
    return int(m.group(1)) if m else None


def classify_assignment(rhs: str) -> Assignment:
    """Classify the value of an OID assignment.

    Examples:
        >>> classify_assignment("1.3.6.1.4.1.55108").shape
        <AssignmentShape.NUMERIC: 'numeric'>
        >>> classify_assignment("{ enterprises 55108 }")
        Assignment(shape=<AssignmentShape.BRACE: 'brace'>, base='enterprises', components=(55108,))
    """
    value = rhs.strip()
    if value.startswith("{"):
        if not value.endswith("}"):
            return Assignment(AssignmentShape.MALFORMED)
        tokens = BRACE_TOKEN_RE.findall(value[1:-1])
        if not tokens:
            return Assignment(AssignmentShape.MALFORMED)
        numbers = [_number(t) for t in tokens]
        if all(n is not None for n in numbers):
            return Assignment(AssignmentShape.NUMERIC, components=tuple(n for n in numbers if n is not None))
        head, rest = tokens[0], numbers[1:]
        if not NAME_RE.match(head) or any(n is None for n in rest):
            return Assignment(AssignmentShape.MALFORMED)
        if not rest:
            return Assignment(AssignmentShape.ALIAS, base=head)
        return Assignment(AssignmentShape.BRACE, base=head, components=tuple(n for n in rest if n is not None))
    if NUMERIC_RE.match(value):
        return Assignment(AssignmentShape.NUMERIC, components=tuple(OidPath.parse(value)))
    m = SUFFIXED_RE.match(value)
    if m:
        return Assignment(AssignmentShape.SUFFIXED, base=m.group(1), components=tuple(OidPath.parse(m.group(2))))
    if NAME_RE.match(value):
        return Assignment(AssignmentShape.ALIAS, base=value)
    return Assignment(AssignmentShape.MALFORMED)


def clause_value(text: str, keyword: str) -> str:
    """Value of a clause line, unquoted for quoted clauses."""
    value = text[len(keyword):].strip()
    if keyword in QUOTED_CLAUSES:
        start, end = value.find('"'), value.rfind('"')
        if start == -1:
            return value
        if end <= start:
            return value[start + 1:]
        return value[start + 1:end]
    return value.rstrip(" \t,")


def _clause_keyword(text: str) -> Optional[str]:
    for keyword in CLAUSES:
        if text == keyword or text.startswith(keyword + " "):
            return keyword
    return None


class DefinitionCollector:
    def __init__(self, symbols: Dict[str, OidPath], scanner: ModuleScanner) -> None:
        self.symbols = symbols
        self.scanner = scanner
        self.definitions: Dict[str, Definition] = {}
        self.diagnostics: List[Diagnostic] = []
        self.state = CollectorState.NEUTRAL
        self._open: Optional[Definition] = None
        self._awaiting: Optional[Definition] = None

    def collect(self, lines: Iterable[LogicalLine]) -> Dict[str, Definition]:
        for line in lines:
            self.feed(line)
        self.finish()
        return self.definitions

    def feed(self, line: LogicalLine) -> None:
        text = line.text

        if self.state is CollectorState.IN_IMPORTS:
            if self.scanner.feed_imports(text):
                self.state = CollectorState.NEUTRAL
            return

        if self._awaiting is not None:
            target, self._awaiting = self._awaiting, None
            self._assign(target, text, line.number)
            return

        if self.scanner.match_header(text):
            return

        if text == "IMPORTS" or text.startswith("IMPORTS "):
            if not self.scanner.begin_imports(text):
                self.state = CollectorState.IN_IMPORTS
            return

        if text == "END":
            self._flush()
            return

        m = OID_ASSIGNMENT_RE.match(text)
        if m and m.group(1) not in RESERVED_NAMES:
            self.scanner.require_header(line.number)
            definition = Definition(m.group(1), DefinitionKind.OBJECT_IDENTIFIER, line.number)
            self._assign(definition, m.group(2), line.number)
            return

        m = BLOCK_OPEN_RE.match(text) or OID_DECLARATION_RE.match(text)
        if m and m.group(1) not in RESERVED_NAMES:
            name = m.group(1)
            kind = DefinitionKind(m.group(2)) if m.lastindex == 2 else DefinitionKind.OBJECT_IDENTIFIER
            if kind is DefinitionKind.MODULE_IDENTITY:
                self.scanner.match_identity(text)
            self.scanner.require_header(line.number)
            self._flush()
            self._open = Definition(name, kind, line.number)
            self.state = CollectorState.IN_ATTRIBUTE_BLOCK
            return

        if self.state is CollectorState.IN_ATTRIBUTE_BLOCK and self._open is not None:
            if text.startswith("::="):
                definition, self._open = self._open, None
                self.state = CollectorState.NEUTRAL
                self._assign(definition, text[3:], line.number)
                return
            self._collect_clause(self._open, text)

    def finish(self) -> None:
        if self._awaiting is not None:
            self._store(self._awaiting)
            self._awaiting = None
        self._flush()

    def _flush(self) -> None:
        if self._open is not None:
            logger.debug(f"{self._open.name}: block ended without an OID assignment")
            self._store(self._open)
            self._open = None
        if self.state is CollectorState.IN_ATTRIBUTE_BLOCK:
            self.state = CollectorState.NEUTRAL

    def _collect_clause(self, definition: Definition, text: str) -> None:
        keyword = _clause_keyword(text)
        if keyword is None:
            return
        if definition.kind is not DefinitionKind.OBJECT_TYPE and keyword not in GENERIC_CLAUSES:
            return
        field_name = CLAUSES[keyword]
        # First occurrence wins: later DESCRIPTIONs belong to REVISION sub-clauses
        if getattr(definition.attributes, field_name) is None:
            setattr(definition.attributes, field_name, clause_value(text, keyword))

    def _assign(self, definition: Definition, rhs: str, line: int) -> None:
        if not rhs.strip():
            self._awaiting = definition
            return

        if definition.kind is DefinitionKind.MODULE_IDENTITY:
            self.scanner.register_identity(definition.name, rhs)

        assignment = classify_assignment(rhs)
        name = definition.name
        if assignment.shape is AssignmentShape.NUMERIC:
            self.symbols.setdefault(name, OidPath(assignment.components))
        elif assignment.shape in (AssignmentShape.SUFFIXED, AssignmentShape.ALIAS):
            base = assignment.base or ""
            if base in self.symbols:
                self.symbols.setdefault(name, self.symbols[base].child(*assignment.components))
            else:
                definition.parent = base
                definition.index = assignment.components
        elif assignment.shape is AssignmentShape.BRACE:
            definition.parent = assignment.base
            definition.index = assignment.components
        else:
            self.diagnostics.append(
                Diagnostic(name, DiagnosticKind.MALFORMED, f"cannot parse OID value {rhs.strip()!r}", line)
            )
        self._store(definition)

    def _store(self, definition: Definition) -> None:
        if definition.name in self.definitions:
            first = self.definitions[definition.name]
            self.diagnostics.append(
                Diagnostic(
                    definition.name,
                    DiagnosticKind.DUPLICATE,
                    f"already declared on line {first.line}; later declaration ignored",
                    definition.line,
                )
            )
            return
        self.definitions[definition.name] = definition
