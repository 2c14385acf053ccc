"""Allow ``python -m summon``."""

from __future__ import annotations

import sys

from summon.cli import main


if __name__ == "__main__":
    sys.exit(main())
