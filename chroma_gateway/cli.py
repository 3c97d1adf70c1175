"""
Maintenance commands for the ChromaDB server behind the gateway.

Usage:
    chroma-gateway-delete-collection <collection-name>
    chroma-gateway-reset --yes
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_settings
from .errors import is_not_found
from .main import setup_logging
from .services.chroma import ChromaStore


def delete_collection_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="chroma-gateway-delete-collection",
        description="Delete a named ChromaDB collection",
    )
    parser.add_argument("name", nargs="?", help="collection to delete")
    args = parser.parse_args(argv)

    if not args.name:
        print("✗ Error: Collection name is required", file=sys.stderr)
        print("\nUsage: chroma-gateway-delete-collection <collection-name>", file=sys.stderr)
        return 1

    settings = load_settings()
    setup_logging(settings.log_level)
    store = ChromaStore(settings)

    print(f"Deleting collection '{args.name}'...")
    try:
        store.delete_collection(args.name)
    except Exception as e:
        if is_not_found(e):
            print(f"✗ Collection '{args.name}' not found.", file=sys.stderr)
        else:
            logging.error(f"[CLI] Delete failed: {e}", exc_info=True)
            print(f"✗ Error deleting collection: {e}", file=sys.stderr)
        return 1

    print(f"✓ Collection '{args.name}' deleted successfully.")
    return 0


def reset_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="chroma-gateway-reset",
        description="Delete every collection on the ChromaDB server",
    )
    parser.add_argument("--yes", action="store_true", help="confirm the full reset")
    args = parser.parse_args(argv)

    if not args.yes:
        print("✗ Refusing to reset without --yes", file=sys.stderr)
        return 1

    settings = load_settings()
    setup_logging(settings.log_level)
    if not settings.allow_reset:
        print("✗ Set CHROMA_ALLOW_RESET=true to allow a reset", file=sys.stderr)
        return 1

    store = ChromaStore(settings)
    print("Resetting database...")
    try:
        store.reset()
    except Exception as e:
        logging.error(f"[CLI] Reset failed: {e}", exc_info=True)
        print(f"✗ Error resetting database: {e}", file=sys.stderr)
        return 1

    print("✓ Database reset.")
    return 0


def delete_collection_command() -> None:
    sys.exit(delete_collection_main())


def reset_command() -> None:
    sys.exit(reset_main())
