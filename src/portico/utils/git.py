"""Git-related utility functions."""

import subprocess  # nosec B404
from pathlib import Path


def get_current_branch(cwd: Path | None = None) -> str | None:
    """Return the checked-out branch name, or None outside a git checkout.

    A detached HEAD also yields None.
    """
    try:
        result = subprocess.run(  # nosec B603 B607
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=2,
            cwd=cwd,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
        return None
    branch = result.stdout.strip()
    return branch if branch and branch != "HEAD" else None
