"""
OID resolver.

Completes each collected Definition's `{ parent index }` chain into a full
OID. Results are memoized in the per-parse symbol table; an entry, once set,
is never overwritten. Parent chains may be forward references or may loop;
loops are detected with an explicit visited set and reported, never raised.
"""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterator, Mapping, Tuple

from mibkit.app_logger import AppLogger
from mibkit.oid import OidPath
from mibkit.types import Definition, Resolution, ResolutionStatus

logger = AppLogger.get(__name__)


class OidResolver:
    def __init__(self, symbols: Dict[str, OidPath], definitions: Mapping[str, Definition]) -> None:
        self.symbols = symbols
        self.definitions = definitions
        self._failures: Dict[str, Resolution] = {}

    def resolve(self, name: str) -> Resolution:
        """Resolve one name to its full OID.

        Returns:
            A RESOLVED resolution carrying the path, UNRESOLVED naming the
            first symbol that could not be found, or CYCLE_DETECTED carrying
            the chain of names that loops.
        """
        return self._resolve(name, (), frozenset())

    def _resolve(self, name: str, chain: Tuple[str, ...], visited: FrozenSet[str]) -> Resolution:
        known = self.symbols.get(name)
        if known is not None:
            return Resolution.of(known)

        if name in self._failures:
            return self._failures[name]

        definition = self.definitions.get(name)
        if definition is None:
            return Resolution(ResolutionStatus.UNRESOLVED, missing=name)

        chain = chain + (name,)
        parent = definition.parent
        if parent is None:
            return self._fail(name, Resolution(ResolutionStatus.UNRESOLVED, chain=chain))

        parent_path = self.symbols.get(parent)
        if parent_path is None:
            if parent in visited or parent == name:
                logger.debug(f"Cycle while resolving {name}: {' -> '.join(chain + (parent,))}")
                return Resolution(ResolutionStatus.CYCLE_DETECTED, chain=chain + (parent,))
            if parent not in self.definitions:
                return self._fail(name, Resolution(ResolutionStatus.UNRESOLVED, missing=parent, chain=chain))
            parent_result = self._resolve(parent, chain, visited | {name})
            parent_path = parent_result.path
            if parent_path is None:
                return parent_result

        path = parent_path.child(*definition.index)
        # First successful resolution wins
        self.symbols.setdefault(name, path)
        return Resolution.of(self.symbols[name])

    def _fail(self, name: str, result: Resolution) -> Resolution:
        self._failures[name] = result
        return result

    def resolve_all(self) -> Iterator[Tuple[Definition, Resolution]]:
        """Resolve every definition in declaration order."""
        for name, definition in self.definitions.items():
            yield definition, self.resolve(name)
