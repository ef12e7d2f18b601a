"""MIB text parser and OID resolution engine."""

from mibkit.errors import MibParseError, MissingModuleHeader, UnterminatedQuotedString
from mibkit.oid import OidPath
from mibkit.parser import MibParser, ParseResult
from mibkit.registry import MibRegistry, OidDescription
from mibkit.types import Diagnostic, DiagnosticKind, MibModule, MibNode, MibVariable
from mibkit.well_known import WELL_KNOWN_OIDS

__all__ = [
    'MibParser', 'ParseResult', 'MibRegistry', 'OidDescription', 'OidPath',
    'MibVariable', 'MibNode', 'MibModule', 'Diagnostic', 'DiagnosticKind',
    'MibParseError', 'MissingModuleHeader', 'UnterminatedQuotedString', 'WELL_KNOWN_OIDS',
]
