"""Entry point for ``python -m ctfexport``."""

import sys

from ctfexport.cli import main

if __name__ == "__main__":
    sys.exit(main())
