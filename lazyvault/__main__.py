"""Module entrypoint for ``python -m lazyvault``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and runtime setup happen in ``lazyvault.cli``.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
