"""
statechain.version — release version and source-tree describe string.

Imports nothing from the rest of the package.

    from statechain.version import __version__, git_describe, version_metadata
"""

from __future__ import annotations

import os
import platform
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

__version__ = "0.1.0"

_PACKAGE_DIR = Path(__file__).resolve().parent


def _run_git(*args: str) -> Optional[str]:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=_PACKAGE_DIR,
            capture_output=True,
            text=True,
            timeout=2.0,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    Describe the build this package came from.

    STATECHAIN_GIT_DESCRIBE wins when set (container and CI builds); otherwise
    `git describe --tags --dirty --always` run next to the package sources; a tree
    outside any checkout reports `<version>+local`.
    """
    override = os.getenv("STATECHAIN_GIT_DESCRIBE", "").strip()
    if override:
        return override
    return _run_git("describe", "--tags", "--dirty", "--always") or f"{__version__}+local"


def version_metadata() -> Dict[str, str]:
    """Version facts for the CLI and startup logs."""
    desc = git_describe()
    return {
        "version": __version__,
        "describe": desc,
        "dirty": str(desc.endswith("-dirty")).lower(),
        "python": platform.python_version(),
    }


__all__ = ["__version__", "git_describe", "version_metadata"]
