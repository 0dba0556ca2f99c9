"""Run Log Keeper: python -m logkeeper"""

import sys

from logkeeper.cli import main

if __name__ == "__main__":
    sys.exit(main())
