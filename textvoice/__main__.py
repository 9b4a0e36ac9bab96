"""Module entrypoint for running textvoice as ``python -m textvoice``."""

from __future__ import annotations

from textvoice.cli import main


if __name__ == "__main__":
    main()
