"""
statechain.types — shared primitives, config contracts and envelope types.

Public surface (re-exported):
    UInt, U32, U64, U128           : bounded unsigned integer types
    SystemConfig, BalancesConfig,
    ProofOfExistenceConfig         : per-pallet config Protocols
    RuntimeParams                  : concrete config used by the Runtime
    Extrinsic, Header, Block       : request envelopes
    ExtrinsicStatus                : Enum — SUCCESS / FAILED
    ExtrinsicOutcome, BlockResult  : execution records
"""

from __future__ import annotations

from .block import Block, Extrinsic, Header
from .params import (BalancesConfig, ProofOfExistenceConfig, RuntimeParams,
                     SystemConfig)
from .primitives import U32, U64, U128, UInt
from .result import BlockResult, ExtrinsicOutcome
from .status import ExtrinsicStatus

__all__ = [
    "UInt",
    "U32",
    "U64",
    "U128",
    "SystemConfig",
    "BalancesConfig",
    "ProofOfExistenceConfig",
    "RuntimeParams",
    "Extrinsic",
    "Header",
    "Block",
    "ExtrinsicStatus",
    "ExtrinsicOutcome",
    "BlockResult",
]
