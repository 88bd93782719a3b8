"""Punto de entrada del CLI."""

from __future__ import annotations

from glucemia_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
