"""
cli.py — Command-line entry point.

  archive-manifest                  scan ./Files and write ./manifest.json
  archive-manifest --strict         abort on leaves with several PDFs
  archive-manifest --interactive    confirm each MP3 rename
  archive-manifest --outline        print the existing manifest as an outline

Exit status: 0 ok, 1 fatal error (missing root, strict conflict),
2 usage error, 130 quit at a rename prompt.
"""

import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from archive_manifest.builder import build_manifest
from archive_manifest.config import ScanSettings
from archive_manifest.errors import ArchiveManifestError, ScanAborted
from archive_manifest.outline import render_outline
from archive_manifest.validator import auto_confirm, prompt_rename
from archive_manifest.writer import load_manifest

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_QUIT = 130


def build_parser() -> argparse.ArgumentParser:
    defaults = ScanSettings()
    parser = argparse.ArgumentParser(
        prog="archive-manifest",
        description="Scan the document archive and write manifest.json for the browser.",
    )
    parser.add_argument("--root", default=defaults.root,
                        help=f"Content root to scan (default: {defaults.root})")
    parser.add_argument("--output", default=defaults.manifest_path,
                        help=f"Manifest path (default: {defaults.manifest_path})")
    parser.add_argument("--max-depth", type=int, default=defaults.max_depth,
                        help=f"Traversal depth cap (default: {defaults.max_depth})")

    conflict = parser.add_mutually_exclusive_group()
    conflict.add_argument("--strict", dest="strict", action="store_true",
                          default=defaults.strict,
                          help="Abort when a leaf has more than one primary document")
    conflict.add_argument("--lenient", dest="strict", action="store_false",
                          help="Use the first primary document and warn (default)")

    rename = parser.add_mutually_exclusive_group()
    rename.add_argument("--interactive", dest="interactive", action="store_true",
                        default=defaults.interactive,
                        help="Ask before renaming each secondary file")
    rename.add_argument("--auto", dest="interactive", action="store_false",
                        help="Rename secondary files without asking (default)")

    parser.add_argument("--outline", action="store_true",
                        help="Print the existing manifest as an outline and exit")
    return parser


def _print_outline(args) -> int:
    try:
        tree = load_manifest(args.output)
    except (OSError, ValueError) as e:
        print(f"❌ Cannot read manifest {args.output}: {e}", file=sys.stderr)
        return EXIT_ERROR
    for line in render_outline(tree, content_root=args.root):
        print(line)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.outline:
        return _print_outline(args)

    try:
        settings = ScanSettings(
            root=args.root,
            manifest_path=args.output,
            strict=args.strict,
            interactive=args.interactive,
            max_depth=args.max_depth,
        )
    except ValidationError as e:
        parser.error(str(e))

    if settings.interactive and not sys.stdin.isatty():
        parser.error("--interactive needs a terminal on stdin; use --auto for unattended runs")

    confirm = prompt_rename() if settings.interactive else auto_confirm

    try:
        stats = build_manifest(settings, confirm)
    except ScanAborted as e:
        print(f"\n🛑 {e}. No manifest written.", file=sys.stderr)
        return EXIT_QUIT
    except ArchiveManifestError as e:
        print(f"\n❌ {e}", file=sys.stderr)
        print("No manifest written.", file=sys.stderr)
        return EXIT_ERROR

    if stats["leaves_with_warnings"]:
        print(f"⚠️  {stats['leaves_with_warnings']} entries with warnings "
              f"({stats['warnings']} total)")
    if stats["renamed"] or stats["rename_declined"] or stats["rename_failed"]:
        print(f"📝 Renamed: {stats['renamed']}  declined: {stats['rename_declined']}  "
              f"failed: {stats['rename_failed']}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
