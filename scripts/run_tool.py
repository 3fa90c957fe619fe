"""
CLI script to invoke a library tool and print its JSON envelope.

Parameters are passed as key=value pairs. The index is built before
the tool runs, so search results reflect the current store.

Usage:
    python scripts/run_tool.py list_pdfs
    python scripts/run_tool.py search_in_pdfs q=fox
    python scripts/run_tool.py get_pdf_metadata file=report.pdf
    python scripts/run_tool.py split_pdf file=report.pdf start_page=2 end_page=5
    python scripts/run_tool.py upload_pdf source=/tmp/new.pdf
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pdf_library.core import get_config, ConfigurationError, PDFLibraryError
from pdf_library.core.config_loader import reload_config
from pdf_library.library import LibraryService, TOOLS, run_tool


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run a PDF library tool and print the JSON result"
    )

    parser.add_argument(
        "tool",
        choices=sorted(TOOLS),
        help="Tool to run"
    )

    parser.add_argument(
        "params",
        nargs="*",
        metavar="KEY=VALUE",
        help="Tool parameters"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
    )

    return parser.parse_args()


def parse_params(pairs):
    """Turn KEY=VALUE strings into a dict."""
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        params[key] = value
    return params


def main():
    """Main entry point for the tool CLI."""
    args = parse_args()

    try:
        params = parse_params(args.params)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(2)

    try:
        config = reload_config(Path(args.config)) if args.config else get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    with LibraryService(config) as service:
        try:
            service.start().result(timeout=config.library.rebuild_timeout_s)
        except PDFLibraryError as e:
            print(f"Warning: initial index build failed: {e.message}", file=sys.stderr)

        envelope = run_tool(service, args.tool, params)

        print(json.dumps(envelope, indent=2, ensure_ascii=False, default=str))

    sys.exit(0 if envelope["ok"] else 1)


if __name__ == "__main__":
    main()
