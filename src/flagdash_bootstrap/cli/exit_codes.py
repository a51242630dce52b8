"""Exit codes for the flagdash-bootstrap CLI.

- 0: Success
- 1: Binary not installed (status command)
- 3: Invalid usage (bad arguments, bad config)
- 4: Bootstrap failure (any pipeline error)
- 130: Interrupted
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_NOT_INSTALLED = 1
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4
EXIT_INTERRUPTED = 130
