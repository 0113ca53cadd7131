"""Run script.

Why it exists:
- Runs the CLI with `python -m main` from inside `src/`.
- Keeps a simple entry point next to the installed `parcel-bridge` script.
"""

from __future__ import annotations

import sys

# UnicodeEncodeError on Windows terminals (cp1252 vs utf-8) when printing tables.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
