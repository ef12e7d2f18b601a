"""
Rendering of values received from an agent, using MIB metadata.

Protocol clients hand over pysnmp/pyasn1 objects (or plain Python values);
nothing here talks to the network.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from pyasn1.type import univ
from pysnmp.proto import rfc1902

from mibkit.oid import OidLike, OidPath
from mibkit.registry import MibRegistry, OidDescription


def object_name(registry: MibRegistry, name: str) -> rfc1902.ObjectName:
    """Turn `ifDescr.3` (or any form `MibRegistry.resolve` accepts) into a pysnmp ObjectName.

    Raises:
        KeyError: if the name is not known to the registry.
    """
    path = registry.resolve(name)
    if path is None:
        raise KeyError(f"Unknown MIB object {name!r}")
    return rfc1902.ObjectName(tuple(path))


def format_value(registry: MibRegistry, description: Optional[OidDescription], value: Any) -> str:
    if isinstance(value, univ.ObjectIdentifier):
        return registry.name_for(OidPath.coerce(value))

    if isinstance(value, (univ.Integer, int)) and not isinstance(value, bool):
        number = int(value)
        if description is not None:
            label = description.label_for(number)
            if label is not None:
                return f"{label}({number})"
        text = str(number)
    elif hasattr(value, "prettyPrint"):
        text = value.prettyPrint()
    else:
        text = str(value)

    if description is not None and description.variable.units:
        text = f"{text} {description.variable.units}"
    return text


def format_varbind(registry: MibRegistry, name: OidLike, value: Any) -> str:
    """Render one `(name, value)` pair as `ifOperStatus.3 = up(1)`."""
    path = OidPath.coerce(name)
    description = registry.describe(path)
    label = description.name if description is not None else path.dotted
    return f"{label} = {format_value(registry, description, value)}"


def format_varbinds(registry: MibRegistry, var_binds: Iterable[Tuple[OidLike, Any]]) -> List[str]:
    return [format_varbind(registry, name, value) for name, value in var_binds]
