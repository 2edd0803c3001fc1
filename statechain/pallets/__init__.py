"""
statechain.pallets — the state modules hosted by the runtime.

- system              : block counter and per-account nonces
- balances            : account balances, Transfer call
- proof_of_existence  : content claims, CreateClaim / RevokeClaim calls

Each pallet module exposes a `Pallet` class configured through the Protocols in
statechain.types.params, its call dataclasses, and a `dispatch(caller, call)`
method routing its own call family.
"""

from __future__ import annotations

from . import balances, proof_of_existence, system

__all__ = ["system", "balances", "proof_of_existence"]
