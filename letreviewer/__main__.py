"""
Entry point for running LET Reviewer as a module.

Usage:
    python -m letreviewer study
    python -m letreviewer subjects
    python -m letreviewer --help
"""
from .cli.app import main

if __name__ == "__main__":
    main()
