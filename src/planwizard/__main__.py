"""planwizard - Package entry point.

Enables running the project with:

    python -m planwizard ...
"""

from __future__ import annotations

import sys

from planwizard.cli import main

if __name__ == "__main__":
    sys.exit(main())
