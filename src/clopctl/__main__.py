"""Allow ``python -m clopctl``."""

import sys

from clopctl.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
