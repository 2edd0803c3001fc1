"""
statechain.errors — runtime and pallet exceptions.

Pallets report failures by raising *typed exceptions* that the runtime turns into
per-extrinsic outcomes. Every error carries a human-readable message, a stable
machine code and optional JSON-safe details.

Hierarchy
---------
StateChainError (base)
 ├─ DispatchError            : an extrinsic failed; recovered by the runtime
 │   ├─ InsufficientFunds    : transfer source balance below the requested amount
 │   ├─ BalanceOverflow      : transfer destination would exceed the Balance range
 │   ├─ ClaimAlreadyExists   : create_claim on already-claimed content
 │   ├─ ClaimNotFound        : revoke_claim on unclaimed content
 │   ├─ ClaimOwnerMismatch   : revoke_claim by someone other than the owner
 │   └─ UnroutableOperation  : call tag does not match any hosted pallet
 └─ BlockNumberMismatch      : block header does not carry the expected number

Notes
-----
* A `DispatchError` is a *semantic* failure of one extrinsic. The runtime records
  it and moves on to the next extrinsic; the block still succeeds.
* `BlockNumberMismatch` is the only block-level failure. It propagates to the
  caller of `Runtime.execute_block` and no extrinsic of that block runs.

This module imports nothing from the rest of the package so that pallets and the
runtime can share it without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class StateChainError(Exception):
    """
    Base error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'INSUFFICIENT_FUNDS').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "state chain error"
    code: str = "STATE_CHAIN_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for outcomes/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _json_safe(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return repr(v)


class DispatchError(StateChainError):
    """Base for every failure a pallet can report while executing a call."""

    def __init__(
        self,
        message: str = "dispatch failed",
        *,
        code: str = "DISPATCH_ERROR",
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, data=data)


class InsufficientFunds(DispatchError):
    """
    The caller's balance is below the transfer amount.

    Checked against the balance read *before* any write, so the ledger is unchanged.
    """
    def __init__(self, *, account: Any, balance: int, amount: int):
        super().__init__(
            "not enough funds",
            code="INSUFFICIENT_FUNDS",
            data={
                "account": _json_safe(account),
                "balance": int(balance),
                "amount": int(amount),
            },
        )
        self.account = account
        self.balance = int(balance)
        self.amount = int(amount)


class BalanceOverflow(DispatchError):
    """The recipient's balance plus the amount exceeds the representable maximum."""

    def __init__(self, *, account: Any, balance: int, amount: int, maximum: int):
        super().__init__(
            "maximum amount of funds reached",
            code="BALANCE_OVERFLOW",
            data={
                "account": _json_safe(account),
                "balance": int(balance),
                "amount": int(amount),
                "max": int(maximum),
            },
        )
        self.account = account
        self.balance = int(balance)
        self.amount = int(amount)
        self.maximum = int(maximum)


class ClaimAlreadyExists(DispatchError):
    def __init__(self, *, claim: Any, owner: Any):
        super().__init__(
            "this content has already been claimed",
            code="CLAIM_ALREADY_EXISTS",
            data={"claim": _json_safe(claim), "owner": _json_safe(owner)},
        )
        self.claim = claim
        self.owner = owner


class ClaimNotFound(DispatchError):
    def __init__(self, *, claim: Any):
        super().__init__(
            "claim does not exist",
            code="CLAIM_NOT_FOUND",
            data={"claim": _json_safe(claim)},
        )
        self.claim = claim


class ClaimOwnerMismatch(DispatchError):
    def __init__(self, *, claim: Any, owner: Any, caller: Any):
        super().__init__(
            "claim does not belong to caller",
            code="CLAIM_OWNER_MISMATCH",
            data={
                "claim": _json_safe(claim),
                "owner": _json_safe(owner),
                "caller": _json_safe(caller),
            },
        )
        self.claim = claim
        self.owner = owner
        self.caller = caller


class UnroutableOperation(DispatchError):
    """
    No hosted pallet accepts the call.

    Raised for an unknown module tag, or for a call object that does not belong
    to the family of the tag it was wrapped with.
    """
    def __init__(self, *, module: Any, call: Optional[str] = None):
        d: Dict[str, Any] = {"module": _json_safe(module)}
        if call is not None:
            d["call"] = call
        super().__init__(
            "operation does not match any registered module",
            code="UNROUTABLE_OPERATION",
            data=d,
        )
        self.module = module


class BlockNumberMismatch(StateChainError):
    """Incoming block number differs from the runtime's post-increment counter."""

    def __init__(self, *, expected: int, got: int):
        super().__init__(
            message="incoming block number doesn't match with system block number",
            code="BLOCK_NUMBER_MISMATCH",
            data={"expected": int(expected), "got": int(got)},
        )
        self.expected = int(expected)
        self.got = int(got)


# -------- helper utilities ---------------------------------------------------


def error_to_outcome_fields(err: StateChainError) -> Dict[str, Any]:
    """
    Map an error to canonical outcome-like fields.

    Returns:
        {
          "status": "failed" | "rejected",
          "error":  {code, message, data?}
        }
    """
    status = "failed" if isinstance(err, DispatchError) else "rejected"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "StateChainError",
    "DispatchError",
    "InsufficientFunds",
    "BalanceOverflow",
    "ClaimAlreadyExists",
    "ClaimNotFound",
    "ClaimOwnerMismatch",
    "UnroutableOperation",
    "BlockNumberMismatch",
    "error_to_outcome_fields",
]
