"""Blockpad - block document editing engine.

Usage:
    blockpad                    Serve an empty document over stdio
    blockpad --seed doc.json    Serve a document loaded from JSON
    blockpad --help             Show this help message

Environment Variables:
    BLOCKPAD_DATA_DIR           Where the log file is written (default: ~/.blockpad)
    BLOCKPAD_LOG_LEVEL          Logging level (default: INFO)
    BLOCKPAD_LOG_TO_FILE        Also log to a rotating file (default: true)
    BLOCKPAD_WELCOME_TEXT       Text of the first paragraph of a new document
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .editor import BlockEditor
from .errors import BlockpadError
from .logging_setup import configure_logging
from .settings import settings
from .ui_rpc_server import StdioServer

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the stdio editor server."""
    parser = argparse.ArgumentParser(
        prog="blockpad",
        description="Block document editing engine, served as JSON-RPC over stdio",
        epilog="""
Examples:
  blockpad                         Start with a single empty paragraph
  blockpad --seed notes.json       Edit an existing document
  blockpad --log-level DEBUG       Log every command
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--seed",
        type=Path,
        help="JSON file with a list of blocks, or {blocks, events}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level.upper(),
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        editor = BlockEditor.from_file(args.seed) if args.seed else BlockEditor()
    except OSError as exc:
        print(f"blockpad: cannot read {args.seed}: {exc.strerror}", file=sys.stderr)
        return 1
    except BlockpadError as exc:
        print(f"blockpad: {exc.message}", file=sys.stderr)
        return 1

    logger.info("Serving document with %d blocks", len(editor.store))
    StdioServer(editor).serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
