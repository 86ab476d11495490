"""Allow ``python -m wayback_trends``."""

from __future__ import annotations

import sys

from wayback_trends.cli import main

sys.exit(main())
