"""
MibRegistry: the lookup surface used by protocol clients.

Holds every parsed module and answers the two questions a client asks while
exchanging values with an agent:

- given a symbolic name, which OID does it stand for (`resolve`);
- given an OID received on the wire, what object is it and how should its
  value be shown (`describe`, `label_for`).

Modules can be added already parsed, from text, from a file, or by module
name; named modules are located with pysmi readers over the configured MIB
directories, and the modules they import are loaded first.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from pysmi.error import PySmiReaderFileNotFoundError
from pysmi.reader.localfile import FileReader

from mibkit.app_logger import AppLogger
from mibkit.errors import MibParseError
from mibkit.oid import OidLike, OidPath
from mibkit.parser import MibParser, ParseResult
from mibkit.types import MibModule, MibVariable
from mibkit.well_known import BASE_SMI_MODULES, WELL_KNOWN_OIDS

if TYPE_CHECKING:
    from mibkit.app_config import AppConfig

logger = AppLogger.get(__name__)

QUALIFIED_NAME_RE = re.compile(r"^(?:([A-Za-z][\w-]*)::)?([A-Za-z][\w-]*)((?:\.\d+)*)$")


@dataclass(frozen=True)
class OidDescription:
    """The object an OID belongs to, plus the instance part beyond it."""
    module: str
    variable: MibVariable
    instance: OidPath

    @property
    def name(self) -> str:
        if not self.instance:
            return self.variable.name
        return f"{self.variable.name}.{self.instance.dotted}"

    @property
    def qualified_name(self) -> str:
        return f"{self.module}::{self.name}"

    @property
    def is_scalar_instance(self) -> bool:
        return self.instance == (0,)

    def label_for(self, value: int) -> Optional[str]:
        return self.variable.enum_label(value)


class MibRegistry:
    def __init__(self, mib_dirs: Optional[Sequence[str]] = None, seed_well_known: bool = True) -> None:
        self.mib_dirs = [str(d) for d in (mib_dirs or [])]
        self.seed_well_known = seed_well_known
        self.modules: Dict[str, ParseResult] = {}
        self._by_name: Dict[str, Tuple[str, MibVariable]] = {}
        self._by_oid: Dict[OidPath, Tuple[str, MibVariable]] = {}
        self._readers: List[Any] = [FileReader(d) for d in self.mib_dirs]
        self._loading: Set[str] = set()

    @classmethod
    def from_config(cls, app_config: "AppConfig") -> "MibRegistry":
        parser_cfg = app_config.get("parser", {}) or {}
        return cls(
            mib_dirs=app_config.mib_dirs(),
            seed_well_known=bool(parser_cfg.get("seed_well_known", True)),
        )

    # Loading

    def add(self, result: ParseResult) -> None:
        """Register a parsed module. Names and OIDs already registered keep their first owner."""
        if result.module_name in self.modules:
            logger.warning(f"Module {result.module_name} already loaded; keeping the first copy")
            return
        self.modules[result.module_name] = result
        for variable in result.variables:
            entry = (result.module_name, variable)
            self._by_name.setdefault(variable.name, entry)
            self._by_oid.setdefault(variable.full_oid, entry)
        logger.info(f"Registered {result.module_name} with {len(result.variables)} objects")

    def load_text(self, text: str) -> ParseResult:
        """Parse and register a module, loading the modules it imports first.

        Raises:
            MibParseError: if the module itself cannot be parsed.
        """
        imports = MibParser.read_imports(text)
        for clause in imports:
            if clause.module not in self.modules:
                self.load_module(clause.module)

        imported: Dict[str, OidPath] = {}
        for clause in imports:
            source = self.modules.get(clause.module)
            if source is not None:
                imported.update(source.exported_symbols)

        result = MibParser(imported=imported, seed_well_known=self.seed_well_known).parse(text)
        self.add(result)
        return self.modules[result.module_name]

    def load_file(self, path: Union[str, Path]) -> ParseResult:
        logger.info(f"Loading MIB file {path}")
        return self.load_text(Path(path).read_text(encoding="utf-8", errors="replace"))

    def load_module(self, module_name: str) -> Optional[ParseResult]:
        """Locate a module by name in the MIB directories and load it.

        Base SMI modules are covered by the well-known table and are not
        read. Missing or unparseable sources are logged and yield None.
        """
        if module_name in self.modules:
            return self.modules[module_name]
        if module_name in BASE_SMI_MODULES:
            return None
        if module_name in self._loading:
            logger.warning(f"Circular IMPORTS involving {module_name}; loading it without its dependencies")
            return None

        text = self._read_source(module_name)
        if text is None:
            logger.warning(f"MIB source for {module_name} not found in {self.mib_dirs or 'no directories'}")
            return None

        self._loading.add(module_name)
        try:
            return self.load_text(text)
        except MibParseError as e:
            logger.error(f"Failed to parse {module_name}: {e}")
            return None
        finally:
            self._loading.discard(module_name)

    def _read_source(self, module_name: str) -> Optional[str]:
        for reader in self._readers:
            try:
                _mib_info, data = reader.get_data(module_name)
            except PySmiReaderFileNotFoundError:
                continue
            if isinstance(data, bytes):
                data = data.decode("utf-8", errors="replace")
            return str(data)
        return None

    # Queries

    def resolve(self, name: str) -> Optional[OidPath]:
        """Resolve `sysDescr`, `sysDescr.0`, `SNMPv2-MIB::sysDescr` or dotted numbers."""
        name = name.strip()
        if re.match(r"^\.?\d+(\.\d+)*$", name):
            return OidPath.parse(name)
        m = QUALIFIED_NAME_RE.match(name)
        if not m:
            return None
        module, symbol, suffix = m.groups()
        base: Optional[OidPath]
        if module:
            result = self.modules.get(module)
            base = result.resolve(symbol) if result is not None else None
        else:
            entry = self._by_name.get(symbol)
            base = entry[1].full_oid if entry is not None else WELL_KNOWN_OIDS.get(symbol)
        if base is None:
            return None
        return base.child(*OidPath.parse(suffix)) if suffix else base

    def describe(self, oid: OidLike) -> Optional[OidDescription]:
        """The registered object owning `oid` (longest prefix match)."""
        path = OidPath.coerce(oid)
        for length in range(len(path), 0, -1):
            entry = self._by_oid.get(OidPath(path[:length]))
            if entry is not None:
                module, variable = entry
                return OidDescription(module, variable, OidPath(path[length:]))
        return None

    def label_for(self, oid: OidLike, value: int) -> Optional[str]:
        description = self.describe(oid)
        return description.label_for(value) if description is not None else None

    def name_for(self, oid: OidLike) -> str:
        """Symbolic rendering of an OID, falling back to dotted numbers."""
        path = OidPath.coerce(oid)
        description = self.describe(path)
        return description.name if description is not None else path.dotted

    def variables(self) -> Iterator[MibVariable]:
        for _, variable in sorted(self._by_oid.values(), key=lambda e: e[1].full_oid):
            yield variable

    def tree(self, module_name: str) -> Optional[MibModule]:
        result = self.modules.get(module_name)
        return result.tree() if result is not None else None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._by_oid)
