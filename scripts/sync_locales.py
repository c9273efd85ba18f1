"""Sync crowd-sourced translations into the locale directory.

Runs from a source checkout without installing the package:

    python scripts/sync_locales.py -d locales --only-new
"""

import os
import sys

# Ensure the project root is in path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from locsync.cli import main

if __name__ == "__main__":
    sys.exit(main())
