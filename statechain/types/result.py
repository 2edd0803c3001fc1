"""
statechain.types.result — per-extrinsic outcomes and the block result.

`ExtrinsicOutcome` is the structured diagnostic recorded for every extrinsic the
runtime attempts: where it ran (block number, index), who sent it, which call it
was, and either SUCCESS or the error the pallet reported.

`BlockResult` collects the outcomes of one executed block, in order. A block with
failed extrinsics is still a successfully executed block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .status import ExtrinsicStatus


@dataclass(frozen=True)
class ExtrinsicOutcome:
    block_number: int
    index: int
    caller: Any
    module: str
    call: str
    status: ExtrinsicStatus
    error: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @property
    def error_code(self) -> Optional[str]:
        return None if self.error is None else self.error.get("code")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "blockNumber": self.block_number,
            "index": self.index,
            "caller": self.caller,
            "module": self.module,
            "call": self.call,
            "status": str(self.status),
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class BlockResult:
    block_number: int
    outcomes: Tuple[ExtrinsicOutcome, ...] = ()

    @property
    def succeeded(self) -> List[ExtrinsicOutcome]:
        return [o for o in self.outcomes if o.is_success]

    @property
    def failed(self) -> List[ExtrinsicOutcome]:
        return [o for o in self.outcomes if not o.is_success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blockNumber": self.block_number,
            "extrinsics": len(self.outcomes),
            "failed": len(self.failed),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return (
            f"BlockResult(block_number={self.block_number}, "
            f"extrinsics={len(self.outcomes)}, failed={len(self.failed)})"
        )


__all__ = ["ExtrinsicOutcome", "BlockResult"]
