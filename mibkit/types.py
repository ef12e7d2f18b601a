"""
Records shared by the parsing stages and returned to callers.
"""
from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from mibkit.oid import OidLike, OidPath

UNKNOWN_TYPE = "Unknown"


class DefinitionKind(str, Enum):
    OBJECT_IDENTIFIER = "OBJECT IDENTIFIER"
    OBJECT_TYPE = "OBJECT-TYPE"
    MODULE_IDENTITY = "MODULE-IDENTITY"
    OBJECT_IDENTITY = "OBJECT-IDENTITY"
    NOTIFICATION_TYPE = "NOTIFICATION-TYPE"
    OBJECT_GROUP = "OBJECT-GROUP"
    NOTIFICATION_GROUP = "NOTIFICATION-GROUP"
    MODULE_COMPLIANCE = "MODULE-COMPLIANCE"


# Macros whose invocation opens a multi-line clause block ending in `::=`
BLOCK_KINDS = tuple(k for k in DefinitionKind if k is not DefinitionKind.OBJECT_IDENTIFIER)


@dataclass
class Attributes:
    """Clauses of one declaration. None means the clause was absent."""
    syntax: Optional[str] = None
    access: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    units: Optional[str] = None
    display_hint: Optional[str] = None
    index: Optional[str] = None


@dataclass
class Definition:
    """An unresolved declaration as collected from the source text."""
    name: str
    kind: DefinitionKind
    line: int
    parent: Optional[str] = None
    index: Tuple[int, ...] = ()
    attributes: Attributes = field(default_factory=Attributes)


@dataclass(frozen=True)
class ImportClause:
    module: str
    symbols: Tuple[str, ...]


class DiagnosticKind(str, Enum):
    UNRESOLVED = "unresolved"
    CYCLE_DETECTED = "cycle-detected"
    MALFORMED = "malformed"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class Diagnostic:
    name: str
    kind: DiagnosticKind
    detail: str
    line: Optional[int] = None

    def __str__(self) -> str:
        where = f" (line {self.line})" if self.line is not None else ""
        return f"{self.name}{where}: {self.kind.value}: {self.detail}"


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    CYCLE_DETECTED = "cycle-detected"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one name.

    ``missing`` names the first symbol that could not be found for an
    UNRESOLVED result; ``chain`` lists the names walked for a cycle.
    """
    status: ResolutionStatus
    path: Optional[OidPath] = None
    missing: Optional[str] = None
    chain: Tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    @classmethod
    def of(cls, path: OidPath) -> "Resolution":
        return cls(ResolutionStatus.RESOLVED, path=path)


@dataclass(frozen=True)
class MibVariable:
    name: str
    full_oid: OidPath
    type: str = UNKNOWN_TYPE
    kind: DefinitionKind = DefinitionKind.OBJECT_TYPE
    access: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    units: Optional[str] = None
    display_hint: Optional[str] = None
    index: Optional[str] = None
    enum_values: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))

    def enum_label(self, value: int) -> Optional[str]:
        return self.enum_values.get(value)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "oid": self.full_oid.dotted,
            "type": self.type,
            "kind": self.kind.value,
            "access": self.access,
            "status": self.status,
            "description": self.description,
            "units": self.units,
            "display_hint": self.display_hint,
            "index": self.index,
            "enum_values": {str(k): v for k, v in self.enum_values.items()},
        }

    def __str__(self) -> str:
        result = f"{self.name} {self.full_oid.absolute} {self.type}"
        if self.enum_values:
            pairs = ", ".join(f"{label}({value})" for value, label in self.enum_values.items())
            result += f" {{{pairs}}}"
        if self.description:
            result += f"\nDescription: {self.description}"
        if self.units:
            result += f"\nUnits: {self.units}"
        if self.display_hint:
            result += f"\nDisplayHint: {self.display_hint}"
        return result


class MibNode:
    """One node of the OID tree.

    The parent link is a weak reference used for lookups only; children are
    owned by their parent through the ``children`` mapping.
    """

    def __init__(
        self,
        name: str,
        fragment: int,
        full_oid: OidPath,
        variable: Optional[MibVariable] = None,
        parent: Optional["MibNode"] = None,
    ) -> None:
        self.name = name
        self.fragment = fragment
        self.full_oid = full_oid
        self.variable = variable
        self._parent = weakref.ref(parent) if parent is not None else None
        self._children: Dict[str, MibNode] = {}

    @property
    def is_placeholder(self) -> bool:
        return self.variable is None

    @property
    def parent(self) -> Optional["MibNode"]:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> Mapping[str, "MibNode"]:
        return MappingProxyType(self._children)

    def _add_child(self, node: "MibNode") -> "MibNode":
        return self._children.setdefault(node.name, node)

    def walk(self) -> Iterator["MibNode"]:
        yield self
        for child in sorted(self._children.values(), key=lambda n: n.fragment):
            yield from child.walk()

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"name": self.name, "oid": self.full_oid.dotted}
        if self.variable is not None:
            data.update({k: v for k, v in self.variable.to_dict().items() if k not in data})
        data["children"] = [
            child.to_dict() for child in sorted(self._children.values(), key=lambda n: n.fragment)
        ]
        return data

    def __repr__(self) -> str:
        return f"MibNode({self.name!r}, {self.full_oid.dotted})"


@dataclass(frozen=True)
class MibModule:
    name: str
    imports: Tuple[ImportClause, ...]
    roots: Mapping[str, MibNode]

    def walk(self) -> Iterator[MibNode]:
        for root in sorted(self.roots.values(), key=lambda n: n.fragment):
            yield from root.walk()

    def find(self, name: str) -> Optional[MibNode]:
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def node_at(self, oid: OidLike) -> Optional[MibNode]:
        path = OidPath.coerce(oid)
        nodes = self.roots
        node: Optional[MibNode] = None
        for depth in range(len(path)):
            node = next((n for n in nodes.values() if n.fragment == path[depth]), None)
            if node is None:
                return None
            nodes = node.children
        return node

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "imports": {clause.module: list(clause.symbols) for clause in self.imports},
            "nodes": [root.to_dict() for root in sorted(self.roots.values(), key=lambda n: n.fragment)],
        }
