"""
statechain.cli — command-line entrypoints.

  • statechain.cli.apply_blocks — execute a JSON chain description (or the demo) and
    print per-block outcomes plus the final state

Usage (examples):
    python -m statechain.cli.apply_blocks --help
"""

from __future__ import annotations

from ..version import __version__

__all__ = ["__version__"]
