#!/usr/bin/env python3
"""
Explain OID Resolution

Takes OIDs (numeric or symbolic) and explains, from the loaded MIB text:
- The object the OID belongs to
- The index/instance portion
- Whether it's fully resolved or has numeric gaps
"""
from __future__ import annotations

import argparse
import sys

from mibkit.app_config import DEFAULT_CONFIG_FILE, AppConfig
from mibkit.app_logger import AppLogger
from mibkit.errors import MibParseError
from mibkit.registry import MibRegistry

logger = AppLogger.get(__name__)


def analyse_oid(registry: MibRegistry, oid: str) -> bool:
    """Analyse a single OID and explain its structure. Returns False if it could not be resolved."""
    print(f"\n{'='*70}")
    print(f"INPUT: {oid}")
    print("=" * 70)

    numeric = registry.resolve(oid)
    if numeric is None:
        print("  ✗ Could not translate to numeric form")
        return False

    print(f"  Numeric: {numeric.absolute}")

    description = registry.describe(numeric)
    if description is None:
        print()
        print("  ✗ No MIB object found in path")
        print("  → This OID cannot be resolved (missing MIB)")
        return False

    variable = description.variable
    print(f"  Symbolic: {description.qualified_name}")
    print()
    print(f"  {variable.kind.value} found: {variable.full_oid.absolute}")
    print(f"  Leaf name: {variable.name}")
    print(f"  Type: {variable.type}")
    if variable.access:
        print(f"  Access: {variable.access}")
    if variable.status:
        print(f"  Status: {variable.status}")
    if variable.units:
        print(f"  Units: {variable.units}")
    if variable.enum_values:
        values = ", ".join(f"{label}({value})" for value, label in variable.enum_values.items())
        print(f"  Values: {values}")

    if description.instance:
        arcs = list(description.instance)
        print()
        print(f"  Index portion: {description.instance.absolute}")
        print(f"  Index length: {len(arcs)} arc(s)")
        print(f"  Index values: {arcs}")
        if description.is_scalar_instance:
            print("  → This is a SCALAR (instance .0)")
        else:
            print("  → This is a TABLE ENTRY (row index)")
            if variable.index:
                print(f"  Row index columns: {variable.index}")
    else:
        print()
        print("  No index portion (this is the object itself)")

    if variable.description:
        print()
        print("  MIB Description (excerpt):")
        excerpt = variable.description
        print(f"    {excerpt[:300]}{'...' if len(excerpt) > 300 else ''}")
    return True


def build_registry(args: argparse.Namespace) -> MibRegistry:
    mib_dirs = list(args.mib_dir or [])
    seed_well_known = True
    if args.config:
        app_config = AppConfig(args.config)
        AppLogger.configure(app_config)
        mib_dirs.extend(app_config.mib_dirs())
        seed_well_known = bool((app_config.get("parser", {}) or {}).get("seed_well_known", True))

    registry = MibRegistry(mib_dirs=mib_dirs, seed_well_known=seed_well_known)
    for mib_file in args.mib or []:
        try:
            registry.load_file(mib_file)
        except (OSError, MibParseError) as e:
            logger.error(f"Could not load {mib_file}: {e}")
    for module in args.module or []:
        registry.load_module(module)
    return registry


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Explain numeric or symbolic OIDs using MIB text files.")
    parser.add_argument("oids", nargs="*", help="OIDs to explain; read from stdin when omitted")
    parser.add_argument("--mib", action="append", help="MIB text file to load (repeatable)")
    parser.add_argument("--module", action="append", help="MIB module to load by name from the MIB directories")
    parser.add_argument("--mib-dir", action="append", help="Directory searched for imported modules (repeatable)")
    parser.add_argument("--config", nargs="?", const=DEFAULT_CONFIG_FILE, help="Read settings from a YAML config file")
    args = parser.parse_args(argv)

    registry = build_registry(args)

    lines = args.oids
    if not lines:
        print("Reading OIDs from stdin (paste lines, then Ctrl+D)...")
        lines = sys.stdin.read().strip().split("\n")

    failures = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        # Extract OID from line (handle "OID = value" format)
        oid = line.split("=")[0].strip() if "=" in line else line
        if oid and not analyse_oid(registry, oid):
            failures += 1

    print()
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
