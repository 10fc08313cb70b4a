"""Allow ``python -m kilo``."""

import sys

from kilo.cli import main

sys.exit(main())
