#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/__main__.py
"""Run the structcompare command line with ``python -m structcompare``."""

import sys

from structcompare.cli import main

if __name__ == "__main__":
    sys.exit(main())
