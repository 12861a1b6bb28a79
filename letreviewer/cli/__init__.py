"""
Command-line front end.

    letreviewer study [SUBJECT] [-n CARDS] [--seed SEED]
    letreviewer subjects

The typer application lives in ``letreviewer.cli.app``.
"""

from letreviewer.cli.app import main

__all__ = ["main"]
