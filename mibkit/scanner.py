"""
Module header, IMPORTS and MODULE-IDENTITY handling.

The scanner owns everything the collector learns about the module itself:
its name, the ordered import list and the identity node. Imported names that
are well-known roots (or symbols exported by an already loaded module) are
copied into the working symbol table as soon as they are seen.
"""
from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional, Set

from mibkit.app_logger import AppLogger
from mibkit.errors import MissingModuleHeader
from mibkit.oid import OidPath
from mibkit.types import ImportClause
from mibkit.well_known import WELL_KNOWN_OIDS

logger = AppLogger.get(__name__)

HEADER_RE = re.compile(r"^([A-Za-z][\w-]*)\s+DEFINITIONS\b")
IDENTITY_RE = re.compile(r"^([A-Za-z][\w-]*)\s+MODULE-IDENTITY$")
FROM_RE = re.compile(r"(.*?)\bFROM\s+([A-Za-z][\w-]*)", re.DOTALL)
ENTERPRISE_ASSIGNMENT_RE = re.compile(r"^\{\s*enterprises\s+(\d+)\s*\}$")


class ModuleScanner:
    def __init__(
        self,
        symbols: Dict[str, OidPath],
        imported: Optional[Mapping[str, OidPath]] = None,
    ) -> None:
        self.symbols = symbols
        self.imported = imported or {}
        self.module_name: Optional[str] = None
        self.identity: Optional[str] = None
        self.imports: List[ImportClause] = []
        self.imported_names: Set[str] = set()
        self._buffer: List[str] = []

    @property
    def has_header(self) -> bool:
        return self.module_name is not None or self.identity is not None

    def require_header(self, line: int) -> None:
        if not self.has_header:
            raise MissingModuleHeader("definition found before the module header", line)

    def match_header(self, text: str) -> bool:
        m = HEADER_RE.match(text)
        if not m:
            return False
        if self.module_name is None:
            self.module_name = m.group(1)
            logger.debug(f"Module header: {self.module_name}")
        return True

    def match_identity(self, text: str) -> Optional[str]:
        m = IDENTITY_RE.match(text)
        if not m:
            return None
        if self.identity is None:
            self.identity = m.group(1)
        return m.group(1)

    def begin_imports(self, text: str) -> bool:
        """Start an IMPORTS block. Returns True if it already ended on this line."""
        self._buffer = [text[len("IMPORTS"):]]
        return self._maybe_finish()

    def feed_imports(self, text: str) -> bool:
        """Add one line of the IMPORTS block. Returns True once the block has ended."""
        self._buffer.append(text)
        return self._maybe_finish()

    def _maybe_finish(self) -> bool:
        text = " ".join(self._buffer)
        if ";" not in text:
            return False
        self._parse_imports(text.split(";", 1)[0])
        self._buffer = []
        return True

    def _parse_imports(self, text: str) -> None:
        for m in FROM_RE.finditer(text):
            names = tuple(n.strip() for n in m.group(1).split(",") if n.strip())
            self.imports.append(ImportClause(m.group(2), names))
            for name in names:
                self._import_symbol(name)
        logger.debug(f"Imports: {', '.join(c.module for c in self.imports) or 'none'}")

    def _import_symbol(self, name: str) -> None:
        self.imported_names.add(name)
        if name in WELL_KNOWN_OIDS:
            self.symbols.setdefault(name, WELL_KNOWN_OIDS[name])
        elif name in self.imported:
            self.symbols.setdefault(name, self.imported[name])

    def register_identity(self, name: str, rhs: str) -> bool:
        """Register the module identity under enterprises when it is assigned there.

        Only applies when `enterprises` was imported, matching how vendor MIBs
        declare their enterprise subtree.
        """
        if name != self.identity or "enterprises" not in self.imported_names:
            return False
        m = ENTERPRISE_ASSIGNMENT_RE.match(rhs.strip())
        if not m:
            return False
        path = self.symbols["enterprises"].child(int(m.group(1)))
        self.symbols.setdefault(name, path)
        logger.debug(f"Module identity {name} registered at {path}")
        return True
