"""Allows ``python -m timejournal``."""

import sys

from .cli import main

sys.exit(main())
