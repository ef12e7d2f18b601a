#!/usr/bin/env python3
"""
Parse a MIB text file and write its resolved objects as JSON.

The default output is the flat list of objects sorted by OID; `--tree`
writes the module's node tree instead.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict

from mibkit.app_config import DEFAULT_CONFIG_FILE, AppConfig
from mibkit.app_logger import AppLogger
from mibkit.errors import MibParseError
from mibkit.parser import MibParser, ParseResult
from mibkit.registry import MibRegistry
from mibkit.well_known import BASE_SMI_MODULES

logger = AppLogger.get(__name__)


def check_imported_mibs(result: ParseResult, registry: MibRegistry) -> None:
    """Warn about imported modules whose source could not be loaded."""
    for clause in result.imports:
        if clause.module in BASE_SMI_MODULES or clause.module in registry.modules:
            continue
        if registry.load_module(clause.module) is None:
            print(f"WARNING: {result.module_name} imports {clause.module}, which is not loaded. "
                  f"Symbols from it ({', '.join(clause.symbols)}) may stay unresolved.")


def extract_mib_info(result: ParseResult, tree: bool = False) -> Dict[str, Any]:
    if tree:
        return result.tree().to_dict()
    return {
        "module": result.module_name,
        "imports": {clause.module: list(clause.symbols) for clause in result.imports},
        "objects": [variable.to_dict() for variable in result.variables],
        "diagnostics": [str(d) for d in result.diagnostics],
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convert a MIB text file to JSON.")
    parser.add_argument("mib_txt_path", help="MIB source file")
    parser.add_argument("--tree", action="store_true", help="Write the node tree instead of the flat list")
    parser.add_argument("--output", help="Output path (default: mib-json/<MODULE>.json)")
    parser.add_argument("--mib-dir", action="append", help="Directory searched for imported modules (repeatable)")
    parser.add_argument("--config", nargs="?", const=DEFAULT_CONFIG_FILE, help="Read settings from a YAML config file")
    args = parser.parse_args(argv)

    mib_dirs = list(args.mib_dir or [])
    mib_parser = MibParser()
    if args.config:
        app_config = AppConfig(args.config)
        AppLogger.configure(app_config)
        mib_dirs.extend(app_config.mib_dirs())
        mib_parser = MibParser.from_config(app_config)

    if not os.path.exists(args.mib_txt_path):
        print(f"ERROR: MIB source file {args.mib_txt_path} not found.")
        return 1

    try:
        if mib_dirs:
            registry = MibRegistry(mib_dirs=mib_dirs, seed_well_known=mib_parser.seed_well_known)
            result = registry.load_file(args.mib_txt_path)
            check_imported_mibs(result, registry)
        else:
            result = mib_parser.parse_file(args.mib_txt_path)
    except MibParseError as e:
        logger.error(f"Failed to parse {args.mib_txt_path}: {e}")
        print(f"ERROR: {e}")
        return 1

    info = extract_mib_info(result, tree=args.tree)

    json_path = args.output or os.path.join("mib-json", f"{result.module_name}.json")
    os.makedirs(os.path.dirname(os.path.abspath(json_path)), exist_ok=True)
    with open(json_path, "w") as f:
        json.dump(info, f, indent=2)
    print(f"{len(result.variables)} objects from {result.module_name} written to {json_path}")
    if result.diagnostics:
        print(f"WARNING: {len(result.diagnostics)} definitions could not be resolved:")
        for diagnostic in result.diagnostics:
            print(f"  - {diagnostic}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
