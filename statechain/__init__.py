"""
statechain — a minimal deterministic state-machine runtime.

Pallets (System, Balances, ProofOfExistence) are composed into one Runtime that
dispatches caller-attributed calls and executes blocks of them in order.

This package exposes only lightweight metadata at import time. Import the runtime
explicitly:

    from statechain.runtime import Runtime, RuntimeCall
    from statechain.types import Block, Extrinsic, Header
"""

from .version import __version__, git_describe

__all__ = ["__version__", "git_describe"]
