"""Environment-first locations and provenance helpers.

Falls back to the nearest git checkout, then the current directory, so the
package still works when installed under site-packages.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path


def _find_git_root(start: Path) -> Path | None:
    for cur in [start, *start.parents][:6]:
        if (cur / ".git").exists():
            return cur
    return None


def repo_root() -> Path:
    """Order: env var TTT_REPO_ROOT -> nearest parent containing .git -> CWD."""
    env = os.getenv("TTT_REPO_ROOT")
    if env:
        return Path(env)
    git_root = _find_git_root(Path.cwd().resolve())
    if git_root is not None:
        return git_root
    return Path.cwd()


def exports_dir() -> Path:
    p = os.getenv("TTT_EXPORT_DIR")
    return Path(p) if p else repo_root() / "exports"


def get_git_commit() -> str | None:
    """Current commit hash of ``repo_root()``, or None outside a checkout."""
    try:
        out = subprocess.check_output(
            ["git", "-C", str(repo_root()), "rev-parse", "HEAD"],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.strip() or None
