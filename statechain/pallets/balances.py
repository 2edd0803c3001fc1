"""
statechain.pallets.balances — account balances and overflow-safe transfers.

Storage is a single map AccountId → Balance; absent accounts hold zero.

Semantics of `transfer(caller, to, amount)`
-------------------------------------------
- Read both balances *before* writing anything.
- caller_balance - amount must not underflow → else InsufficientFunds.
- to_balance + amount must fit the configured Balance type → else BalanceOverflow.
- Only when both checks pass are the two new balances written. A failed transfer
  leaves the ledger untouched.
- A self-transfer runs the same checks and leaves the balance as it was.

Calls exposed to extrinsics
---------------------------
    Transfer{to, amount}

`set_balance` is administrative (genesis / tests) and is not a call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Union

from ..errors import BalanceOverflow, InsufficientFunds, UnroutableOperation
from ..types.params import BalancesConfig, RuntimeParams

MODULE = "balances"


# ------------------------------------------------------------------------------
# Calls
# ------------------------------------------------------------------------------


@dataclass(frozen=True)
class Transfer:
    """Move `amount` from the extrinsic's caller to `to`."""

    name: ClassVar[str] = "transfer"

    to: Any
    amount: int

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"amount must be int, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise ValueError("amount must be non-negative")

    def args(self) -> Dict[str, Any]:
        return {"to": self.to, "amount": self.amount}


BalancesCall = Union[Transfer]


def call_from_dict(name: str, args: Mapping[str, Any]) -> BalancesCall:
    """Build a balances call from its name and JSON arguments."""
    if name == Transfer.name:
        try:
            to, amount = args["to"], args["amount"]
        except KeyError as e:
            raise ValueError(f"{MODULE}.{name}: missing argument {e.args[0]!r}") from e
        if not isinstance(to, str):
            raise ValueError(f"{MODULE}.{name}: 'to' must be a string, got {type(to).__name__}")
        # digit strings carry amounts beyond JSON's safe integer range
        if isinstance(amount, str) and amount.isdigit():
            amount = int(amount)
        return Transfer(to=to, amount=amount)
    raise ValueError(f"unknown {MODULE} call: {name!r}")


# ------------------------------------------------------------------------------
# Pallet
# ------------------------------------------------------------------------------


class Pallet:
    """Balances pallet."""

    def __init__(self, config: BalancesConfig | None = None) -> None:
        self.config: BalancesConfig = config if config is not None else RuntimeParams()
        self._balances: Dict[Any, int] = {}

    # ----------------------- storage access ------------------------------- #

    def balance(self, who: Any) -> int:
        """Balance of `who`, zero if absent."""
        return self._balances.get(who, self.config.balance.zero)

    def set_balance(self, who: Any, amount: int) -> None:
        """Overwrite the balance of `who`. Administrative; not dispatchable."""
        self.config.check_account(who)
        self._balances[who] = self.config.balance.validate(amount, what="balance")

    def total_issuance(self) -> int:
        return sum(self._balances.values())

    # ----------------------- calls ---------------------------------------- #

    def transfer(self, caller: Any, to: Any, amount: int) -> None:
        """
        Transfer `amount` from `caller` to `to`.

        Raises:
            InsufficientFunds if `caller` holds less than `amount`.
            BalanceOverflow if `to` would exceed the Balance max.
        """
        self.config.check_account(caller)
        self.config.check_account(to)
        b = self.config.balance

        caller_balance = self.balance(caller)
        to_balance = self.balance(to)

        new_caller_balance = b.checked_sub(caller_balance, amount)
        if new_caller_balance is None:
            raise InsufficientFunds(account=caller, balance=caller_balance, amount=amount)
        new_to_balance = b.checked_add(to_balance, amount)
        if new_to_balance is None:
            raise BalanceOverflow(
                account=to, balance=to_balance, amount=amount, maximum=b.max
            )

        if caller == to:
            return
        self._balances[caller] = new_caller_balance
        self._balances[to] = new_to_balance

    def dispatch(self, caller: Any, call: BalancesCall) -> None:
        if isinstance(call, Transfer):
            self.transfer(caller, call.to, call.amount)
            return
        raise UnroutableOperation(module=MODULE, call=type(call).__name__)

    # ----------------------- snapshot ------------------------------------- #

    def to_dict(self) -> Dict[str, Any]:
        return {
            "balances": {str(k): v for k, v in sorted(self._balances.items())},
            "total_issuance": self.total_issuance(),
        }

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"balances.Pallet(accounts={len(self._balances)})"


__all__ = [
    "MODULE",
    "Transfer",
    "BalancesCall",
    "call_from_dict",
    "Pallet",
]
