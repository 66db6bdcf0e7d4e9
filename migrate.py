#!/usr/bin/env python3
"""
Run Alembic against the MailFlow schema with migrations/alembic.ini.

    python migrate.py upgrade head
    python migrate.py downgrade -1
    python migrate.py revision -m "Add column"   # --autogenerate is implied
    python migrate.py current | history
"""

import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

CONFIG_PATH = Path(__file__).parent / "migrations" / "alembic.ini"


def build_command(args: list[str]) -> list[str]:
    if args[0] == "revision" and "--autogenerate" not in args:
        args = [args[0], "--autogenerate", *args[1:]]
    return [sys.executable, "-m", "alembic", "-c", str(CONFIG_PATH), *args]


def main(args: list[str]) -> int:
    try:
        return subprocess.run(build_command(args), check=False).returncode
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    sys.exit(main(sys.argv[1:]))
