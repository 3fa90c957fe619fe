"""
Launch the Streamlit interface of the PDF library.

Usage:
    python scripts/run_app.py
    python scripts/run_app.py --port 8502 --no-browser
    python scripts/run_app.py --pdf-dir ~/Documents/PDF
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parent.parent
APP_PATH = PROJECT_ROOT / "pdf_library" / "gui" / "app.py"

sys.path.insert(0, str(PROJECT_ROOT))

from pdf_library.core.config_loader import DATA_DIRECTORY_ENV  # noqa: E402


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Launch the PDF library web interface")

    parser.add_argument("--port", type=int, default=8501, help="Port to listen on (default: 8501)")
    parser.add_argument("--host", default="localhost", help="Address to bind (default: localhost)")
    parser.add_argument("--pdf-dir", help="Document directory, overrides paths.data_directory")
    parser.add_argument("--no-browser", action="store_true", help="Don't open a browser tab")

    return parser.parse_args()


def build_command(args) -> List[str]:
    """Streamlit command line for the parsed arguments."""
    cmd = [
        sys.executable, "-m", "streamlit", "run", str(APP_PATH),
        "--server.port", str(args.port),
        "--server.address", args.host,
    ]
    if args.no_browser:
        cmd += ["--server.headless", "true"]
    return cmd


def build_environment(args) -> Dict[str, str]:
    """Environment of the Streamlit process, with the store override if any."""
    env = dict(os.environ)
    if args.pdf_dir:
        env[DATA_DIRECTORY_ENV] = str(Path(args.pdf_dir).expanduser().resolve())
    return env


def main():
    args = parse_args()

    if not APP_PATH.exists():
        print(f"Error: Application file not found: {APP_PATH}")
        sys.exit(1)

    env = build_environment(args)

    print("=" * 60)
    print("PDF Library - Web Interface")
    print("=" * 60)
    print(f"URL:       http://{args.host}:{args.port}")
    if DATA_DIRECTORY_ENV in env:
        print(f"Documents: {env[DATA_DIRECTORY_ENV]}")
    print("Press Ctrl+C to stop")
    print("=" * 60)

    try:
        subprocess.run(build_command(args), cwd=str(PROJECT_ROOT), env=env)
    except KeyboardInterrupt:
        print("\nShutting down...")
    except FileNotFoundError:
        print("Error: Streamlit not found. Install with: pip install streamlit")
        sys.exit(1)


if __name__ == "__main__":
    main()
