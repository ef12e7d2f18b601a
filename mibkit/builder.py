"""
Builds the caller-facing projections of one resolved symbol table: the
sorted flat list of MibVariable records and the MibModule node tree.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from mibkit.app_logger import AppLogger
from mibkit.oid import OidPath
from mibkit.types import (
    UNKNOWN_TYPE,
    Definition,
    ImportClause,
    MibModule,
    MibNode,
    MibVariable,
)

logger = AppLogger.get(__name__)

ENUM_PAIR_RE = re.compile(r"^([A-Za-z][\w-]*)\s*\(\s*(-?\d+)\s*\)$")


def decode_enumeration(syntax: Optional[str]) -> Dict[int, str]:
    """Extract `label(value)` pairs from a brace-delimited SYNTAX clause.

    Malformed pairs are skipped. When a value repeats, the first label wins.

    Examples:
        >>> decode_enumeration("INTEGER { up(1), down(2) }")
        {1: 'up', 2: 'down'}
    """
    if not syntax:
        return {}
    start, end = syntax.find("{"), syntax.rfind("}")
    if start == -1 or end <= start:
        return {}
    values: Dict[int, str] = {}
    for pair in syntax[start + 1:end].split(","):
        m = ENUM_PAIR_RE.match(pair.strip())
        if not m:
            if pair.strip():
                logger.debug(f"Skipping malformed enumeration item {pair.strip()!r}")
            continue
        value = int(m.group(2))
        if value in values:
            logger.debug(f"Duplicate enumeration value {value} ({m.group(1)}) ignored")
            continue
        values[value] = m.group(1)
    return values


def build_variable(definition: Definition, path: OidPath) -> MibVariable:
    attrs = definition.attributes
    return MibVariable(
        name=definition.name,
        full_oid=path,
        type=attrs.syntax if attrs.syntax is not None else UNKNOWN_TYPE,
        kind=definition.kind,
        access=attrs.access,
        status=attrs.status,
        description=attrs.description,
        units=attrs.units,
        display_hint=attrs.display_hint,
        index=attrs.index,
        enum_values=MappingProxyType(decode_enumeration(attrs.syntax)),
    )


def build_variables(definitions: Iterable[Definition], symbols: Mapping[str, OidPath]) -> List[MibVariable]:
    """One MibVariable per resolved definition, ascending by OID then name."""
    variables = [
        build_variable(definition, symbols[definition.name])
        for definition in definitions
        if definition.name in symbols
    ]
    variables.sort(key=lambda v: (v.full_oid, v.name))
    return variables


def _names_by_path(symbols: Mapping[str, OidPath]) -> Dict[OidPath, str]:
    names: Dict[OidPath, str] = {}
    for name, path in symbols.items():
        names.setdefault(path, name)
    return names


def build_tree(
    module_name: str,
    imports: Sequence[ImportClause],
    variables: Sequence[MibVariable],
    symbols: Mapping[str, OidPath],
) -> MibModule:
    """Link variables into a tree rooted at the first OID component.

    Intermediate nodes that no variable defines become attribute-less
    placeholders, named after a symbol at that OID when one is known and
    after the numeric component otherwise.
    """
    names = _names_by_path(symbols)
    roots: Dict[str, MibNode] = {}
    nodes: Dict[OidPath, MibNode] = {}

    def attach(node: MibNode, parent: Optional[MibNode]) -> MibNode:
        attached = roots.setdefault(node.name, node) if parent is None else parent._add_child(node)
        nodes[node.full_oid] = attached
        return attached

    for variable in sorted(variables, key=lambda v: (v.full_oid, v.name)):
        path = variable.full_oid
        if not path:
            continue
        if path in nodes:
            logger.debug(f"{variable.name} shares {path} with {nodes[path].name}; not added to tree")
            continue
        parent: Optional[MibNode] = None
        for depth in range(1, len(path)):
            prefix = OidPath(path[:depth])
            node = nodes.get(prefix)
            if node is None:
                name = names.get(prefix, str(prefix[-1]))
                node = attach(MibNode(name, prefix[-1], prefix, parent=parent), parent)
            parent = node
        attach(MibNode(variable.name, path[-1], path, variable, parent), parent)

    return MibModule(module_name, tuple(imports), MappingProxyType(roots))
