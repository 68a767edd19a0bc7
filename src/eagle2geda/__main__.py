"""Allow ``python -m eagle2geda``."""
import sys

from .cli import main

sys.exit(main())
