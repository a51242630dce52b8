"""Allow ``python -m flagdash_bootstrap.cli``."""

from flagdash_bootstrap.cli import main

raise SystemExit(main())
