#!/usr/bin/env python3
"""
LET Reviewer - quick launcher.

Run with:
    python main.py              # Pick a subject and study
    python main.py study Math   # Study one subject
    python main.py --help       # All commands

Equivalent to the installed ``letreviewer`` command or ``python -m letreviewer``.
"""
import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent))

from letreviewer.cli.app import main

if __name__ == "__main__":
    main()
