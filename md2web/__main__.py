"""Allow ``python -m md2web``."""

from .cli import main

raise SystemExit(main())
