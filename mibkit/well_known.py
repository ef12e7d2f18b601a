"""
Well-known SMI roots.

Canonical top-level names defined by RFC 1155 / RFC 2578 and the OIDs they
stand for. Every parse starts from a private copy of this table.
"""
from types import MappingProxyType
from typing import Dict, Mapping

from mibkit.oid import OidPath

_ROOTS: Dict[str, str] = {
    "ccitt": "0",
    "iso": "1",
    "joint-iso-ccitt": "2",
    "org": "1.3",
    "dod": "1.3.6",
    "internet": "1.3.6.1",
    "directory": "1.3.6.1.1",
    "mgmt": "1.3.6.1.2",
    "mib-2": "1.3.6.1.2.1",
    "transmission": "1.3.6.1.2.1.10",
    "experimental": "1.3.6.1.3",
    "private": "1.3.6.1.4",
    "enterprises": "1.3.6.1.4.1",
    "security": "1.3.6.1.5",
    "snmpV2": "1.3.6.1.6",
    "snmpDomains": "1.3.6.1.6.1",
    "snmpProxys": "1.3.6.1.6.2",
    "snmpModules": "1.3.6.1.6.3",
}

WELL_KNOWN_OIDS: Mapping[str, OidPath] = MappingProxyType(
    {name: OidPath.parse(oid) for name, oid in _ROOTS.items()}
)

# Modules whose content is only macros and the roots above; loading their
# text adds nothing the seed table does not already provide.
BASE_SMI_MODULES = frozenset({
    "RFC1155-SMI",
    "RFC-1212",
    "RFC-1215",
    "SNMPv2-SMI",
    "SNMPv2-TC",
    "SNMPv2-CONF",
})


def is_well_known(name: str) -> bool:
    return name in WELL_KNOWN_OIDS


def seed_table(include_all: bool = True) -> Dict[str, OidPath]:
    """Return a fresh mutable symbol table for one parse.

    Args:
        include_all: seed every well-known root up front. When False only
            ``iso`` is seeded and other roots arrive through IMPORTS.
    """
    if include_all:
        return dict(WELL_KNOWN_OIDS)
    return {"iso": WELL_KNOWN_OIDS["iso"]}
