"""
statechain.pallets.proof_of_existence — exclusive claims over content keys.

Storage: Content → AccountId. An account may hold many claims, but each piece of
content has at most one owner at a time. Content is opaque to the pallet; a runtime
may use the data itself or (better) its hash.

Calls exposed to extrinsics
---------------------------
    CreateClaim{claim}   — fails with ClaimAlreadyExists if anyone owns `claim`
    RevokeClaim{claim}   — fails with ClaimNotFound / ClaimOwnerMismatch
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

from ..errors import (ClaimAlreadyExists, ClaimNotFound, ClaimOwnerMismatch,
                      UnroutableOperation)
from ..types.params import ProofOfExistenceConfig, RuntimeParams

MODULE = "proof_of_existence"


@dataclass(frozen=True)
class CreateClaim:
    name: ClassVar[str] = "create_claim"

    claim: Any

    def args(self) -> Dict[str, Any]:
        return {"claim": self.claim}


@dataclass(frozen=True)
class RevokeClaim:
    name: ClassVar[str] = "revoke_claim"

    claim: Any

    def args(self) -> Dict[str, Any]:
        return {"claim": self.claim}


ProofOfExistenceCall = Union[CreateClaim, RevokeClaim]


def call_from_dict(name: str, args: Mapping[str, Any]) -> ProofOfExistenceCall:
    """Build a proof-of-existence call from its name and JSON arguments."""
    for cls in (CreateClaim, RevokeClaim):
        if name == cls.name:
            if "claim" not in args:
                raise ValueError(f"{MODULE}.{name}: missing argument 'claim'")
            claim = args["claim"]
            if not isinstance(claim, str):
                raise ValueError(
                    f"{MODULE}.{name}: 'claim' must be a string, got {type(claim).__name__}"
                )
            return cls(claim=claim)
    raise ValueError(f"unknown {MODULE} call: {name!r}")


class Pallet:
    """Proof-of-existence pallet."""

    def __init__(self, config: ProofOfExistenceConfig | None = None) -> None:
        self.config: ProofOfExistenceConfig = (
            config if config is not None else RuntimeParams()
        )
        self._claims: Dict[Any, Any] = {}

    def get_claim(self, claim: Any) -> Optional[Any]:
        """Owner of `claim`, or None."""
        return self._claims.get(claim)

    def create_claim(self, caller: Any, claim: Any) -> None:
        """Claim `claim` for `caller`; someone else owning it is an error."""
        self.config.check_account(caller)
        self.config.check_content(claim)
        owner = self._claims.get(claim)
        if owner is not None:
            raise ClaimAlreadyExists(claim=claim, owner=owner)
        self._claims[claim] = caller

    def revoke_claim(self, caller: Any, claim: Any) -> None:
        """
        Remove `caller`'s claim on `claim`.

        Only the owner can revoke. Ownership is compared by AccountId equality.
        """
        self.config.check_account(caller)
        self.config.check_content(claim)
        owner = self._claims.get(claim)
        if owner is None:
            raise ClaimNotFound(claim=claim)
        if owner != caller:
            raise ClaimOwnerMismatch(claim=claim, owner=owner, caller=caller)
        del self._claims[claim]

    def dispatch(self, caller: Any, call: ProofOfExistenceCall) -> None:
        if isinstance(call, CreateClaim):
            self.create_claim(caller, call.claim)
        elif isinstance(call, RevokeClaim):
            self.revoke_claim(caller, call.claim)
        else:
            raise UnroutableOperation(module=MODULE, call=type(call).__name__)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claims": {str(k): str(v) for k, v in sorted(self._claims.items())},
        }

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"proof_of_existence.Pallet(claims={len(self._claims)})"


__all__ = [
    "MODULE",
    "CreateClaim",
    "RevokeClaim",
    "ProofOfExistenceCall",
    "call_from_dict",
    "Pallet",
]
