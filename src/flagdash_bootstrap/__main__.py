"""Allow ``python -m flagdash_bootstrap``."""

from flagdash_bootstrap.cli import main

raise SystemExit(main())
