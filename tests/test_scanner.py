import pytest

from mibkit.errors import MissingModuleHeader
from mibkit.oid import OidPath
from mibkit.scanner import ModuleScanner
from mibkit.well_known import seed_table


def test_header_sets_module_name_once() -> None:
    scanner = ModuleScanner({})
    assert scanner.match_header("IF-MIB DEFINITIONS ::= BEGIN")
    assert scanner.match_header("OTHER-MIB DEFINITIONS ::= BEGIN")
    assert scanner.module_name == "IF-MIB"
    assert not scanner.match_header("ifTable OBJECT-TYPE")


def test_require_header_raises_before_header() -> None:
    scanner = ModuleScanner({})
    with pytest.raises(MissingModuleHeader) as excinfo:
        scanner.require_header(7)
    assert excinfo.value.line == 7


def test_identity_counts_as_header() -> None:
    scanner = ModuleScanner({})
    assert scanner.match_identity("acmeMIB MODULE-IDENTITY") == "acmeMIB"
    assert scanner.has_header
    scanner.require_header(1)


def test_imports_on_one_line() -> None:
    symbols: dict[str, OidPath] = {}
    scanner = ModuleScanner(symbols)
    assert scanner.begin_imports("IMPORTS enterprises, OBJECT-TYPE FROM SNMPv2-SMI;")
    assert [(c.module, c.symbols) for c in scanner.imports] == [
        ("SNMPv2-SMI", ("enterprises", "OBJECT-TYPE")),
    ]
    assert symbols == {"enterprises": OidPath.parse("1.3.6.1.4.1")}


def test_imports_across_lines_keep_order() -> None:
    scanner = ModuleScanner({})
    assert not scanner.begin_imports("IMPORTS")
    assert not scanner.feed_imports("MODULE-IDENTITY, mib-2 FROM SNMPv2-SMI")
    assert not scanner.feed_imports("DisplayString")
    assert scanner.feed_imports("FROM SNMPv2-TC;")
    assert [c.module for c in scanner.imports] == ["SNMPv2-SMI", "SNMPv2-TC"]
    assert scanner.imports[1].symbols == ("DisplayString",)
    assert "mib-2" in scanner.imported_names


def test_imported_symbols_seeded_from_loaded_modules() -> None:
    symbols: dict[str, OidPath] = {}
    scanner = ModuleScanner(symbols, imported={"ifIndex": OidPath.parse("1.3.6.1.2.1.2.2.1.1")})
    scanner.begin_imports("IMPORTS ifIndex, ifDescr FROM IF-MIB;")
    assert symbols == {"ifIndex": OidPath.parse("1.3.6.1.2.1.2.2.1.1")}


def test_register_identity_needs_imported_enterprises() -> None:
    symbols = seed_table()
    scanner = ModuleScanner(symbols)
    scanner.match_identity("acmeMIB MODULE-IDENTITY")
    assert not scanner.register_identity("acmeMIB", "{ enterprises 55108 }")

    scanner.begin_imports("IMPORTS enterprises FROM SNMPv2-SMI;")
    assert scanner.register_identity("acmeMIB", "{ enterprises 55108 }")
    assert symbols["acmeMIB"].dotted == "1.3.6.1.4.1.55108"


def test_register_identity_ignores_other_names_and_parents() -> None:
    scanner = ModuleScanner(seed_table())
    scanner.match_identity("acmeMIB MODULE-IDENTITY")
    scanner.begin_imports("IMPORTS enterprises FROM SNMPv2-SMI;")
    assert not scanner.register_identity("other", "{ enterprises 1 }")
    assert not scanner.register_identity("acmeMIB", "{ mib-2 1 }")
