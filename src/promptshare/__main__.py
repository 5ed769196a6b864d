"""Module entrypoint for ``python -m promptshare``."""

import sys

from promptshare.app import main

if __name__ == "__main__":
    sys.exit(main())
