"""
MibParser: turns SMI module text into resolved variables.

One call runs the full pipeline on fresh per-parse state:

    text -> preprocessor -> scanner/collector -> resolver -> builder

and returns a ParseResult holding a single resolved symbol table with two
read-only projections, the sorted variable list and the node tree.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple, Union

from mibkit.app_logger import AppLogger
from mibkit.builder import build_tree, build_variables
from mibkit.collector import CollectorState, DefinitionCollector
from mibkit.errors import MissingModuleHeader
from mibkit.oid import OidPath
from mibkit.preprocessor import logical_lines
from mibkit.scanner import ModuleScanner
from mibkit.resolver import OidResolver
from mibkit.types import (
    Diagnostic,
    DiagnosticKind,
    ImportClause,
    MibModule,
    MibVariable,
    ResolutionStatus,
)
from mibkit.well_known import seed_table

if TYPE_CHECKING:
    from mibkit.app_config import AppConfig

logger = AppLogger.get(__name__)


@dataclass(frozen=True)
class ParseResult:
    module_name: str
    identity: Optional[str]
    imports: Tuple[ImportClause, ...]
    variables: Tuple[MibVariable, ...]
    symbols: Mapping[str, OidPath]
    diagnostics: Tuple[Diagnostic, ...]

    def resolve(self, name: str) -> Optional[OidPath]:
        return self.symbols.get(name)

    def variable(self, name: str) -> Optional[MibVariable]:
        return next((v for v in self.variables if v.name == name), None)

    def tree(self) -> MibModule:
        return build_tree(self.module_name, self.imports, self.variables, self.symbols)

    @property
    def exported_symbols(self) -> Dict[str, OidPath]:
        """Names this module declares, for seeding modules that import them."""
        return {v.name: v.full_oid for v in self.variables}


class MibParser:
    """Parses one MIB module per call.

    The instance keeps only configuration; every call builds its own symbol
    table and definition table, so a shared parser is safe across threads.

    Args:
        imported: symbols exported by already loaded modules. A name listed
            in this module's IMPORTS is seeded from here when present.
        seed_well_known: seed all well-known roots up front (default). When
            False, roots other than ``iso`` only arrive through IMPORTS.
    """

    def __init__(
        self,
        imported: Optional[Mapping[str, OidPath]] = None,
        seed_well_known: bool = True,
    ) -> None:
        self.imported: Mapping[str, OidPath] = dict(imported or {})
        self.seed_well_known = seed_well_known

    @classmethod
    def from_config(cls, app_config: "AppConfig", imported: Optional[Mapping[str, OidPath]] = None) -> "MibParser":
        parser_cfg = app_config.get("parser", {}) or {}
        return cls(imported=imported, seed_well_known=bool(parser_cfg.get("seed_well_known", True)))

    def parse(self, text: str) -> ParseResult:
        """Parse a complete module.

        Raises:
            MissingModuleHeader: no module header precedes the definitions.
            UnterminatedQuotedString: a quoted value never closes.
        """
        symbols = seed_table(self.seed_well_known)
        scanner = ModuleScanner(symbols, self.imported)
        collector = DefinitionCollector(symbols, scanner)
        definitions = collector.collect(logical_lines(text))

        if not scanner.has_header:
            raise MissingModuleHeader("no DEFINITIONS ::= BEGIN or MODULE-IDENTITY header found")
        if collector.state is CollectorState.IN_IMPORTS:
            logger.warning(f"{scanner.module_name}: IMPORTS block is not terminated by ';'")

        diagnostics: List[Diagnostic] = list(collector.diagnostics)
        malformed = {d.name for d in diagnostics if d.kind is DiagnosticKind.MALFORMED}

        resolver = OidResolver(symbols, definitions)
        for definition, resolution in resolver.resolve_all():
            if resolution.resolved or definition.name in malformed:
                continue
            diagnostics.append(_diagnostic_for(definition.name, definition.line, resolution.status,
                                               resolution.missing, resolution.chain))

        module_name = scanner.module_name or scanner.identity or ""
        for diagnostic in diagnostics:
            logger.warning(f"{module_name}: {diagnostic}")

        variables = build_variables(definitions.values(), symbols)
        logger.info(
            f"Parsed {module_name}: {len(variables)} of {len(definitions)} definitions resolved"
        )
        return ParseResult(
            module_name=module_name,
            identity=scanner.identity,
            imports=tuple(scanner.imports),
            variables=tuple(variables),
            symbols=MappingProxyType(dict(symbols)),
            diagnostics=tuple(diagnostics),
        )

    def parse_string(self, text: str) -> List[MibVariable]:
        """Flat output: resolved variables sorted by OID."""
        return list(self.parse(text).variables)

    def parse_tree(self, text: str) -> Dict[str, MibModule]:
        """Tree output: module name -> MibModule."""
        result = self.parse(text)
        return {result.module_name: result.tree()}

    def parse_file(self, path: Union[str, Path]) -> ParseResult:
        logger.debug(f"Reading MIB source {path}")
        return self.parse(Path(path).read_text(encoding="utf-8", errors="replace"))

    @staticmethod
    def read_imports(text: str) -> Tuple[ImportClause, ...]:
        """Imports of a module, without resolving any of its definitions."""
        scanner = ModuleScanner({})
        in_imports = False
        for line in logical_lines(text):
            if in_imports:
                if scanner.feed_imports(line.text):
                    break
            elif line.text == "IMPORTS" or line.text.startswith("IMPORTS "):
                if scanner.begin_imports(line.text):
                    break
                in_imports = True
        return tuple(scanner.imports)


def _diagnostic_for(
    name: str,
    line: int,
    status: ResolutionStatus,
    missing: Optional[str],
    chain: Tuple[str, ...],
) -> Diagnostic:
    if status is ResolutionStatus.CYCLE_DETECTED:
        return Diagnostic(name, DiagnosticKind.CYCLE_DETECTED, " -> ".join(chain), line)
    if missing is not None:
        return Diagnostic(name, DiagnosticKind.UNRESOLVED, f"unknown parent symbol {missing!r}", line)
    return Diagnostic(name, DiagnosticKind.UNRESOLVED, "no OID assignment", line)
