"""
statechain.config — process-level settings for the runtime.

Two groups of settings, both read from the environment with defaults that make a
bare `Runtime()` behave like the reference chain:

  widths    bit widths of the ledger integer types handed to the pallets
  features  switches for metrics recording and failed-extrinsic logging

  variable                          field                         default
  STATECHAIN_BALANCE_BITS           widths.balance_bits           128
  STATECHAIN_BLOCK_NUMBER_BITS      widths.block_number_bits      32
  STATECHAIN_NONCE_BITS             widths.nonce_bits             32
  STATECHAIN_METRICS                features.metrics              1
  STATECHAIN_LOG_EXTRINSIC_ERRORS   features.log_extrinsic_errors 1

`get_config()` is read once per process and cached. Tests and embedders build
their own with `load_config(env={...}, overrides={...})`.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Union

_TRUTHY = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSY = frozenset({"0", "false", "f", "no", "n", "off"})

MAX_BITS = 4096

# field -> (env var, default)
_WIDTH_VARS = {
    "balance_bits": ("STATECHAIN_BALANCE_BITS", 128),
    "block_number_bits": ("STATECHAIN_BLOCK_NUMBER_BITS", 32),
    "nonce_bits": ("STATECHAIN_NONCE_BITS", 32),
}
_FLAG_VARS = {
    "metrics": ("STATECHAIN_METRICS", True),
    "log_extrinsic_errors": ("STATECHAIN_LOG_EXTRINSIC_ERRORS", True),
}


def _flag(raw: Optional[str], default: bool) -> bool:
    """Parse a boolean env value; unrecognized non-empty text counts as on."""
    if raw is None or not raw.strip():
        return default
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return True


def _bits(field: str, raw: Union[str, int]) -> int:
    try:
        n = int(str(raw).strip())
    except ValueError as e:
        raise ValueError(f"{field}: invalid bit width {raw!r}") from e
    if not 0 < n <= MAX_BITS:
        raise ValueError(f"{field}: bit width must be in 1..{MAX_BITS}, got {n}")
    return n


@dataclass(frozen=True)
class Widths:
    balance_bits: int = 128
    block_number_bits: int = 32
    nonce_bits: int = 32


@dataclass(frozen=True)
class FeatureFlags:
    metrics: bool = True
    log_extrinsic_errors: bool = True


@dataclass(frozen=True)
class StateChainConfig:
    widths: Widths = Widths()
    features: FeatureFlags = FeatureFlags()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, bool]]] = None,
) -> StateChainConfig:
    """
    Resolve a StateChainConfig.

    Args:
        env: where to read STATECHAIN_* variables (default: os.environ).
        overrides: values keyed by field name ('balance_bits', 'metrics', ...).
            A width override beats the environment; a flag override only replaces
            the default, so an explicit env setting still wins.

    Raises:
        ValueError: a width is not an integer in 1..MAX_BITS.
    """
    src = os.environ if env is None else env
    ov = dict(overrides or {})

    widths = {
        field: _bits(field, ov[field] if field in ov else src.get(var, default))
        for field, (var, default) in _WIDTH_VARS.items()
    }
    flags = {
        field: _flag(src.get(var), bool(ov.get(field, default)))
        for field, (var, default) in _FLAG_VARS.items()
    }
    return StateChainConfig(widths=Widths(**widths), features=FeatureFlags(**flags))


@lru_cache(maxsize=1)
def get_config() -> StateChainConfig:
    """Process-wide config from os.environ, resolved on first call."""
    return load_config()


def summary(cfg: Optional[StateChainConfig] = None) -> str:
    """One-line rendering for startup logs."""
    c = cfg if cfg is not None else get_config()
    w, f = c.widths, c.features
    return (
        f"statechain{{balance=u{w.balance_bits}, block=u{w.block_number_bits}, "
        f"nonce=u{w.nonce_bits}, metrics={int(f.metrics)}, "
        f"log_errors={int(f.log_extrinsic_errors)}}}"
    )


__all__ = [
    "MAX_BITS",
    "Widths",
    "FeatureFlags",
    "StateChainConfig",
    "load_config",
    "get_config",
    "summary",
]
