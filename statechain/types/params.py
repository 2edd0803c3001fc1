"""
statechain.types.params — per-pallet configuration contracts and the concrete runtime params.

Each pallet states what it needs from its host as a Protocol:

    SystemConfig            account_id, block_number, nonce
    BalancesConfig          SystemConfig + balance
    ProofOfExistenceConfig  SystemConfig + content

`RuntimeParams` satisfies all three and is what the Runtime injects into every
pallet it owns. Tests are free to pass any other object with the same attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Type

from .primitives import U32, U128, UInt, uint_for_bits

if TYPE_CHECKING:
    from ..config import StateChainConfig


class SystemConfig(Protocol):
    account_id: Type[Any]
    block_number: UInt
    nonce: UInt

    def check_account(self, who: Any) -> Any: ...


class BalancesConfig(SystemConfig, Protocol):
    balance: UInt


class ProofOfExistenceConfig(SystemConfig, Protocol):
    content: Type[Any]

    def check_content(self, content: Any) -> Any: ...


def _check_type(value: Any, expected: Type[Any], *, name: str) -> Any:
    if not isinstance(value, expected):
        raise TypeError(
            f"{name} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class RuntimeParams:
    """
    Concrete types used by the runtime. Defaults: AccountId=str, Balance=u128,
    BlockNumber=u32, Nonce=u32, Content=str.
    """

    account_id: Type[Any] = str
    balance: UInt = U128
    block_number: UInt = U32
    nonce: UInt = U32
    content: Type[Any] = str

    def check_account(self, who: Any) -> Any:
        return _check_type(who, self.account_id, name="account id")

    def check_content(self, content: Any) -> Any:
        return _check_type(content, self.content, name="content")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id.__name__,
            "balance": self.balance.name,
            "block_number": self.block_number.name,
            "nonce": self.nonce.name,
            "content": self.content.__name__,
        }

    @classmethod
    def from_config(
        cls,
        cfg: Optional["StateChainConfig"] = None,
        *,
        account_id: Type[Any] = str,
        content: Type[Any] = str,
    ) -> "RuntimeParams":
        """Build params from `statechain.config` (widths come from the config)."""
        if cfg is None:
            from ..config import get_config

            cfg = get_config()
        w = cfg.widths
        return cls(
            account_id=account_id,
            balance=uint_for_bits(w.balance_bits),
            block_number=uint_for_bits(w.block_number_bits),
            nonce=uint_for_bits(w.nonce_bits),
            content=content,
        )


def default_params() -> RuntimeParams:
    return RuntimeParams()


__all__ = [
    "SystemConfig",
    "BalancesConfig",
    "ProofOfExistenceConfig",
    "RuntimeParams",
    "default_params",
]
