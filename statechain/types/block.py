"""
statechain.types.block — Extrinsic, Header and Block envelopes.

These are immutable request units. An Extrinsic pairs a caller with a RuntimeCall;
a Block is an ordered batch of extrinsics behind a Header declaring the number the
block is expected to have once executed.

JSON form (see `to_dict` / `from_dict`):

    {"header": {"block_number": 1},
     "extrinsics": [{"caller": "alice",
                     "call": {"module": "balances", "call": "transfer",
                              "args": {"to": "bob", "amount": 69}}}]}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Tuple

if TYPE_CHECKING:  # avoid an import cycle with runtime.dispatcher
    from ..runtime.dispatcher import RuntimeCall


@dataclass(frozen=True)
class Extrinsic:
    caller: Any
    call: "RuntimeCall"

    def to_dict(self) -> Dict[str, Any]:
        return {"caller": self.caller, "call": self.call.to_dict()}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Extrinsic":
        from ..runtime.dispatcher import RuntimeCall

        if "caller" not in d or "call" not in d:
            raise ValueError("extrinsic requires 'caller' and 'call'")
        caller = d["caller"]
        if not isinstance(caller, str):
            raise ValueError(f"extrinsic caller must be a string, got {type(caller).__name__}")
        return cls(caller=caller, call=RuntimeCall.from_dict(d["call"]))


@dataclass(frozen=True)
class Header:
    block_number: int

    def __post_init__(self) -> None:
        n = self.block_number
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValueError(f"block_number must be a non-negative int, got {n!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"block_number": self.block_number}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Header":
        if "block_number" not in d:
            raise ValueError("header requires 'block_number'")
        n = d["block_number"]
        if isinstance(n, str) and n.isdigit():
            n = int(n)
        return cls(block_number=n)


@dataclass(frozen=True)
class Block:
    """
    Ordered batch of extrinsics. Order matters: later extrinsics observe the
    effects of earlier ones.
    """

    header: Header
    extrinsics: Tuple[Extrinsic, ...]

    def __init__(self, header: Header, extrinsics: Iterable[Extrinsic] = ()):
        object.__setattr__(self, "header", header)
        object.__setattr__(self, "extrinsics", tuple(extrinsics))

    @classmethod
    def build(cls, block_number: int, extrinsics: Iterable[Extrinsic] = ()) -> "Block":
        return cls(Header(block_number), extrinsics)

    def __len__(self) -> int:
        return len(self.extrinsics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": self.header.to_dict(),
            "extrinsics": [x.to_dict() for x in self.extrinsics],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Block":
        raw = d.get("extrinsics", [])
        if not isinstance(raw, (list, tuple)):
            raise TypeError("extrinsics must be a list/tuple")
        return cls(
            Header.from_dict(d.get("header") or {}),
            (Extrinsic.from_dict(x) for x in raw),
        )


__all__ = ["Extrinsic", "Header", "Block"]
