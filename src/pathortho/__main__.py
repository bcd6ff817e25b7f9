"""Command line entry point for path orthogonalization."""

from __future__ import annotations

from pathortho.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
