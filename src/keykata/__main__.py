"""Module entrypoint for `python -m keykata`."""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
