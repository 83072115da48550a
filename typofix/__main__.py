"""Module entrypoint for running typofix as ``python -m typofix``."""

from __future__ import annotations

from typofix.cli import main


if __name__ == "__main__":
    main()
