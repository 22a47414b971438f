# SPDX-License-Identifier: MIT
"""Allow ``python -m ninjaconf``."""

import sys

from ninjaconf.cli import main

sys.exit(main())
