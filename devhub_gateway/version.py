"""
Version helpers for the DevHub gateway.

- ``__version__`` is the semantic version for packaging.
- ``git_describe()`` returns ``git describe`` metadata if available.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional

# Bump this when making a release; use semver (MAJOR.MINOR.PATCH)
__version__ = "1.0.0"


def git_describe() -> Optional[str]:
    """
    Return `git describe --tags --always --dirty` output, or None.

    CI images without a checkout may export GIT_DESCRIBE / GIT_COMMIT instead.
    """
    root = Path(__file__).resolve().parent.parent
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "describe", "--tags", "--always", "--dirty"],
            stderr=subprocess.DEVNULL,
            timeout=2.0,
        )
        return out.decode().strip() or None
    except Exception:
        return os.getenv("GIT_DESCRIBE") or os.getenv("GIT_COMMIT") or None


__all__ = ["__version__", "git_describe"]
