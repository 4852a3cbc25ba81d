"""Module entrypoint for running aocinput as ``python -m aocinput``."""

from __future__ import annotations

from aocinput.cli import main


if __name__ == "__main__":
    main()
