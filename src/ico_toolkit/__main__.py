"""Allow ``python -m ico_toolkit``."""

from ico_toolkit.cli import main

raise SystemExit(main())
