"""Allow ``python -m arena_round``."""
import sys

from .cli import main

sys.exit(main())
