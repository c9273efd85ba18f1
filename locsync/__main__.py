import sys

from locsync.cli import main

sys.exit(main())
