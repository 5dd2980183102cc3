#!/usr/bin/env python3
"""
CLI for wktshapes.

Usage:
    python -m wktshapes check FILE
    python -m wktshapes tree FILE
    python -m wktshapes shapes FILE [--json]

FILE may be '-' to read from standard input.

Examples:
    # Report syntax errors with a caret under the offending token
    python -m wktshapes check parcels.wkt

    # Show the parsed geometry outline
    echo 'GEOMETRYCOLLECTION (POINT (1 2), LINESTRING (0 0, 1 1))' | python -m wktshapes tree -

    # Dump materialized shapes, styled from a settings file
    python -m wktshapes --config wktshapes.yaml shapes parcels.wkt --json
"""

import argparse
import json
import sys
from pathlib import Path

from .utils.logging import LOG_LEVELS, configure_logging


def read_source(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def cmd_check(args):
    """Parse a WKT file and report the first error, if any."""
    from . import parse_wkt, WktError

    try:
        geometries = parse_wkt(read_source(args.file), args.file)
    except WktError as e:
        print(e, file=sys.stderr)
        return 1

    print(f"OK: {len(geometries)} geometr{'y' if len(geometries) == 1 else 'ies'}")
    return 0


def cmd_tree(args):
    """Print the geometry outline of a WKT file."""
    from . import parse_wkt, format_geometry, WktError

    try:
        geometries = parse_wkt(read_source(args.file), args.file)
    except WktError as e:
        print(e, file=sys.stderr)
        return 1

    for geometry in geometries:
        print(format_geometry(geometry))
    return 0


def cmd_shapes(args):
    """Materialize a WKT file and print its shapes."""
    from . import WktLoader, WktError

    loader = WktLoader(read_source(args.file), args.settings, args.file)
    try:
        loader.load()
    except WktError as e:
        print(e, file=sys.stderr)
        return 1

    docs = [shape.to_json() for shape in loader.shapes]
    if args.json:
        print(json.dumps(docs, indent=2))
        return 0

    for doc in docs:
        coords = doc.get("position") or doc.get("positions") or doc.get("boundary")
        extra = f", {len(doc['holes'])} hole(s)" if doc.get("holes") else ""
        print(f"{doc['type']} {doc['dimensionality']} from {doc['source']}: {coords}{extra}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="wktshapes",
        description="Parse Well-Known-Text geometry and materialize shapes",
    )
    parser.add_argument('--config', metavar='FILE',
                        help='YAML settings file (default shape attributes, log level)')
    parser.add_argument('--log-level', default=None, type=str.upper, choices=LOG_LEVELS,
                        help='Logging level (overrides the settings file)')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    check_parser = subparsers.add_parser('check', help='Check WKT file for errors')
    check_parser.add_argument('file', help="WKT file, or '-' for stdin")

    tree_parser = subparsers.add_parser('tree', help='Print the geometry outline')
    tree_parser.add_argument('file', help="WKT file, or '-' for stdin")

    shapes_parser = subparsers.add_parser('shapes', help='Print materialized shapes')
    shapes_parser.add_argument('file', help="WKT file, or '-' for stdin")
    shapes_parser.add_argument('--json', action='store_true', help='Emit JSON')

    args = parser.parse_args(argv)

    import yaml
    from .config import WktSettings, load_settings

    try:
        args.settings = load_settings(args.config) if args.config else WktSettings()
        configure_logging(args.log_level or args.settings.log_level)
    except FileNotFoundError:
        print(f"Error: Settings file not found: {args.config}", file=sys.stderr)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: Invalid settings: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == 'check':
            return cmd_check(args)
        elif args.command == 'tree':
            return cmd_tree(args)
        elif args.command == 'shapes':
            return cmd_shapes(args)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
