"""
statechain.runtime.executor — the Runtime: pallet composition and block execution.

The Runtime is the single composition root. It owns exactly one instance of each
pallet, configures all of them from the same RuntimeParams, and is the only thing
that mutates their state.

Block execution
---------------
execute_block(block):
  1) increment the System block counter;
  2) compare it with block.header.block_number; on mismatch raise
     BlockNumberMismatch; no extrinsic runs (the counter stays incremented);
  3) for each extrinsic, in order: bump the caller's nonce, then dispatch the call.
     A DispatchError is recorded in that extrinsic's outcome and logged; execution
     continues with the next extrinsic. There is no rollback;
  4) return a BlockResult with one ExtrinsicOutcome per extrinsic.

There are no retries and no partial blocks beyond the pre-check: once validation
passes every extrinsic is attempted exactly once.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..errors import BlockNumberMismatch, DispatchError
from ..pallets import balances, proof_of_existence, system
from ..types.block import Block
from ..types.params import RuntimeParams
from ..types.result import BlockResult, ExtrinsicOutcome
from ..types.status import ExtrinsicStatus
from .. import metrics
from .dispatcher import Dispatch, ModuleTag, RuntimeCall, dispatch

log = logging.getLogger(__name__)


class Runtime:
    """
    Hosts the System, Balances and ProofOfExistence pallets.

    Attributes are public so genesis/test code can seed state directly, e.g.
    `runtime.balances.set_balance("alice", 100)`; that path bypasses nonces.
    """

    def __init__(
        self,
        params: Optional[RuntimeParams] = None,
        *,
        collect_metrics: Optional[bool] = None,
        log_extrinsic_errors: Optional[bool] = None,
    ) -> None:
        if params is None or collect_metrics is None or log_extrinsic_errors is None:
            from ..config import get_config

            cfg = get_config()
            if params is None:
                params = RuntimeParams.from_config(cfg)
            if collect_metrics is None:
                collect_metrics = cfg.features.metrics
            if log_extrinsic_errors is None:
                log_extrinsic_errors = cfg.features.log_extrinsic_errors

        self.params = params
        self.system = system.Pallet(params)
        self.balances = balances.Pallet(params)
        self.proof_of_existence = proof_of_existence.Pallet(params)
        self._collect_metrics = bool(collect_metrics)
        self._log_extrinsic_errors = bool(log_extrinsic_errors)

    @classmethod
    def new(cls, params: Optional[RuntimeParams] = None, **kwargs: Any) -> "Runtime":
        """Runtime with all pallet state empty."""
        return cls(params, **kwargs)

    # ----------------------------------------------------------------------------------
    # Dispatch
    # ----------------------------------------------------------------------------------

    def _pallets(self) -> Mapping[ModuleTag, Dispatch]:
        return {
            ModuleTag.BALANCES: self.balances,
            ModuleTag.PROOF_OF_EXISTENCE: self.proof_of_existence,
        }

    def dispatch(self, caller: Any, call: RuntimeCall) -> None:
        """
        Execute one call for `caller` without touching nonces or the block counter.

        Raises DispatchError (or a subclass) if the owning pallet rejects the call.
        """
        dispatch(self._pallets(), caller, call)

    # ----------------------------------------------------------------------------------
    # Blocks
    # ----------------------------------------------------------------------------------

    def execute_block(self, block: Block) -> BlockResult:
        """
        Execute `block` against the current state.

        Returns:
            BlockResult with one outcome per extrinsic, in block order.

        Raises:
            BlockNumberMismatch if the header does not carry the next block number.
            TypeError if an extrinsic carries a caller, recipient or claim of the
            wrong type; raised before any state changes.
        """
        for ext in block.extrinsics:
            self._check_types(ext.caller, ext.call)

        timer = metrics.time_block_apply() if self._collect_metrics else None
        try:
            self.system.inc_block_number()
            expected = self.system.block_number()
            got = block.header.block_number
            if got != expected:
                if self._collect_metrics:
                    metrics.observe_block(result="rejected")
                log.error(
                    "block rejected",
                    extra={"height": expected, "got": got, "code": "BLOCK_NUMBER_MISMATCH"},
                )
                raise BlockNumberMismatch(expected=expected, got=got)

            outcomes: List[ExtrinsicOutcome] = []
            for index, ext in enumerate(block.extrinsics):
                outcomes.append(self._apply_extrinsic(expected, index, ext.caller, ext.call))

            result = BlockResult(block_number=expected, outcomes=tuple(outcomes))
            if self._collect_metrics:
                metrics.observe_block(result="executed")
            log.debug(
                "block executed",
                extra={
                    "height": expected,
                    "extrinsics": len(outcomes),
                    "failed": len(result.failed),
                },
            )
            return result
        finally:
            if timer is not None:
                timer.stop()

    def _check_types(self, caller: Any, call: RuntimeCall) -> None:
        self.params.check_account(caller)
        inner = call.call
        if isinstance(inner, balances.Transfer):
            self.params.check_account(inner.to)
        elif isinstance(inner, (proof_of_existence.CreateClaim, proof_of_existence.RevokeClaim)):
            self.params.check_content(inner.claim)

    def _apply_extrinsic(
        self, block_number: int, index: int, caller: Any, call: RuntimeCall
    ) -> ExtrinsicOutcome:
        self.system.inc_nonce(caller)

        module = str(call.module)
        status = ExtrinsicStatus.SUCCESS
        error: Optional[Dict[str, Any]] = None
        try:
            self.dispatch(caller, call)
        except DispatchError as err:
            status = ExtrinsicStatus.FAILED
            error = err.to_dict()
            if self._log_extrinsic_errors:
                log.warning(
                    "extrinsic failed",
                    extra={
                        "height": block_number,
                        "extrinsic": index,
                        "caller": str(caller),
                        "code": err.code,
                        "error": err.message,
                    },
                )

        if self._collect_metrics:
            metrics.observe_extrinsic(result=str(status), module=module)
        return ExtrinsicOutcome(
            block_number=block_number,
            index=index,
            caller=caller,
            module=module,
            call=call.call_name,
            status=status,
            error=error,
        )

    # ----------------------------------------------------------------------------------
    # Inspection
    # ----------------------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Deterministic, JSON-friendly view of every pallet's state."""
        return {
            "system": self.system.to_dict(),
            "balances": self.balances.to_dict(),
            "proof_of_existence": self.proof_of_existence.to_dict(),
        }

    def state_root(self) -> bytes:
        """SHA3-256 commitment over the canonical JSON snapshot."""
        blob = json.dumps(self.snapshot(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha3_256(blob.encode("utf-8")).digest()

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return (
            f"Runtime(block_number={self.system.block_number()}, "
            f"{self.balances!r}, {self.proof_of_existence!r})"
        )


__all__ = ["Runtime"]
