"""
statechain.runtime.dispatcher — the runtime-level call type and its routing.

Every pallet contributes one call family; `RuntimeCall` tags a pallet call with the
module that owns it:

    RuntimeCall.balances(Transfer(to, amount))
    RuntimeCall.proof_of_existence(CreateClaim(claim))
    RuntimeCall.proof_of_existence(RevokeClaim(claim))

`dispatch(pallets, caller, call)` matches on the tag and hands the inner call to the
owning pallet's own `dispatch`, which in turn maps the call to a pallet method.
Failures surface as DispatchError subclasses; an unknown tag or a call that does not
belong to its tag's family raises UnroutableOperation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Protocol, Union

from ..errors import UnroutableOperation
from ..pallets import balances, proof_of_existence

# --------------------------------------------------------------------------------------
# Dispatch contract
# --------------------------------------------------------------------------------------


class Dispatch(Protocol):
    """Anything that can execute a call on behalf of a caller."""

    def dispatch(self, caller: Any, call: Any) -> None:
        """Execute `call` for `caller`; raise DispatchError on failure."""


class ModuleTag(str, Enum):
    BALANCES = balances.MODULE
    PROOF_OF_EXISTENCE = proof_of_existence.MODULE

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


_ALIAS_TAG = {
    "balances": ModuleTag.BALANCES,
    "poe": ModuleTag.PROOF_OF_EXISTENCE,
    "proof_of_existence": ModuleTag.PROOF_OF_EXISTENCE,
    "proofofexistence": ModuleTag.PROOF_OF_EXISTENCE,
}


def resolve_module_tag(module: Any) -> Union[ModuleTag, str]:
    """
    Normalize a module name to a ModuleTag.

    Unknown names are returned as-is (lowercased) so the call can still be carried
    and rejected at dispatch time with UnroutableOperation.
    """
    if isinstance(module, ModuleTag):
        return module
    key = str(module).strip().lower().replace("-", "_")
    return _ALIAS_TAG.get(key, _ALIAS_TAG.get(key.replace("_", ""), key))


_FAMILIES: Dict[ModuleTag, tuple] = {
    ModuleTag.BALANCES: (balances.Transfer,),
    ModuleTag.PROOF_OF_EXISTENCE: (
        proof_of_existence.CreateClaim,
        proof_of_existence.RevokeClaim,
    ),
}


# --------------------------------------------------------------------------------------
# RuntimeCall
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class RuntimeCall:
    """A pallet call tagged with the module that must execute it."""

    module: Union[ModuleTag, str]
    call: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "module", resolve_module_tag(self.module))

    @classmethod
    def balances(cls, call: balances.BalancesCall) -> "RuntimeCall":
        return cls(ModuleTag.BALANCES, call)

    @classmethod
    def proof_of_existence(
        cls, call: proof_of_existence.ProofOfExistenceCall
    ) -> "RuntimeCall":
        return cls(ModuleTag.PROOF_OF_EXISTENCE, call)

    @property
    def call_name(self) -> str:
        return getattr(self.call, "name", type(self.call).__name__)

    def to_dict(self) -> Dict[str, Any]:
        args = self.call.args() if hasattr(self.call, "args") else {}
        return {"module": str(self.module), "call": self.call_name, "args": args}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RuntimeCall":
        """
        Parse `{"module": ..., "call": ..., "args": {...}}`.

        A known module with an unknown call name raises ValueError. An unknown
        module is kept verbatim and fails later with UnroutableOperation.
        """
        if "module" not in d or "call" not in d:
            raise ValueError("call requires 'module' and 'call'")
        tag = resolve_module_tag(d["module"])
        name = str(d["call"])
        args = d.get("args") or {}
        if not isinstance(args, Mapping):
            raise TypeError("call args must be a mapping")
        if tag is ModuleTag.BALANCES:
            return cls(tag, balances.call_from_dict(name, args))
        if tag is ModuleTag.PROOF_OF_EXISTENCE:
            return cls(tag, proof_of_existence.call_from_dict(name, args))
        return cls(tag, _OpaqueCall(name, dict(args)))


@dataclass(frozen=True)
class _OpaqueCall:
    """Placeholder for a call addressed to a module this runtime does not host."""

    name: str
    payload: Dict[str, Any]

    def args(self) -> Dict[str, Any]:
        return dict(self.payload)


# --------------------------------------------------------------------------------------
# Routing
# --------------------------------------------------------------------------------------


def dispatch(pallets: Mapping[ModuleTag, Dispatch], caller: Any, call: RuntimeCall) -> None:
    """
    Route `call` to the pallet registered for its module tag.

    Parameters
    ----------
    pallets : Mapping[ModuleTag, Dispatch]
        Hosted pallets keyed by tag (the Runtime passes its own instances).
    caller : Any
        AccountId on whose behalf the call runs.
    call : RuntimeCall
        Tagged call.

    Raises
    ------
    UnroutableOperation
        Unknown tag, no pallet registered for it, or a call from another family.
    DispatchError
        Whatever the owning pallet raises.
    """
    tag = call.module
    if not isinstance(tag, ModuleTag) or tag not in pallets:
        raise UnroutableOperation(module=str(tag), call=call.call_name)
    if not isinstance(call.call, _FAMILIES[tag]):
        raise UnroutableOperation(module=str(tag), call=call.call_name)
    pallets[tag].dispatch(caller, call.call)


__all__ = [
    "Dispatch",
    "ModuleTag",
    "RuntimeCall",
    "resolve_module_tag",
    "dispatch",
]
