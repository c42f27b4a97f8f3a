"""Allow ``python -m bmadflow``."""

import sys

from bmadflow.cli import main

sys.exit(main())
