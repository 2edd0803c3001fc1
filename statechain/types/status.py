"""
statechain.types.status — canonical extrinsic status enum.

ExtrinsicStatus models the *logical* outcome of dispatching one extrinsic:
  - SUCCESS : the pallet call completed
  - FAILED  : the pallet reported a DispatchError (state left as the pallet left it)

String forms:
  - str(ExtrinsicStatus.SUCCESS) -> "success"   (good for logs/metrics)
  - ExtrinsicStatus.SUCCESS.code  -> "SUCCESS"  (good for JSON output)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ExtrinsicStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def code(self) -> str:
        return self.value.upper()

    @property
    def is_success(self) -> bool:
        return self is ExtrinsicStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(
        cls, s: str, *, default: Optional["ExtrinsicStatus"] = None
    ) -> "ExtrinsicStatus":
        """
        Parse a status from a string (case-insensitive).

        Accepted values:
          - success: "success", "ok", "s"
          - failed : "failed", "fail", "error", "err"
        """
        if not s:
            if default is not None:
                return default
            raise ValueError("empty status")
        norm = s.strip().lower()
        if norm in {"success", "ok", "s"}:
            return cls.SUCCESS
        if norm in {"failed", "fail", "error", "err"}:
            return cls.FAILED
        if default is not None:
            return default
        raise ValueError(f"unknown ExtrinsicStatus: {s!r}")


__all__ = ["ExtrinsicStatus"]
