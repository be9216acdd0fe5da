"""Entry point for `python -m shellpal`."""

import sys

from shellpal.cli import main

if __name__ == "__main__":
    sys.exit(main())
