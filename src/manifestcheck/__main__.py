"""Allow ``python -m manifestcheck``."""

import sys

from manifestcheck.cli import main

sys.exit(main())
