"""
statechain.pallets.system — block counter and per-account nonces.

The System pallet holds the low-level chain state every other pallet relies on:

- block_number:  number of blocks executed so far (0 before the first block)
- nonces:        AccountId → number of extrinsics that account has submitted

Both mutators are total: there is no failure path. Counter overflow is not checked;
counters are assumed never to reach their type's max within a process lifetime.
"""

from __future__ import annotations

from typing import Any, Dict

from ..types.params import RuntimeParams, SystemConfig


class Pallet:
    """System pallet. Owned by the Runtime; mutated only through its methods."""

    def __init__(self, config: SystemConfig | None = None) -> None:
        self.config: SystemConfig = config if config is not None else RuntimeParams()
        self._block_number: int = self.config.block_number.zero
        self._nonces: Dict[Any, int] = {}

    def block_number(self) -> int:
        """Current block number."""
        return self._block_number

    def inc_block_number(self) -> None:
        """Increase the block number by one."""
        self._block_number += 1

    def nonce(self, who: Any) -> int:
        """Nonce of `who`, zero if the account never submitted anything."""
        return self._nonces.get(who, self.config.nonce.zero)

    def inc_nonce(self, who: Any) -> None:
        """Count one more extrinsic for `who`."""
        self.config.check_account(who)
        self._nonces[who] = self._nonces.get(who, self.config.nonce.zero) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_number": self._block_number,
            "nonces": {str(k): v for k, v in sorted(self._nonces.items())},
        }

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"system.Pallet(block_number={self._block_number}, nonces={len(self._nonces)})"


__all__ = ["Pallet"]
