"""
statechain.types.primitives — bounded unsigned integers and checked arithmetic.

Python ints are unbounded, so ledger quantities (Balance, BlockNumber, Nonce) are
described by an explicit `UInt` parameterization (name + bit width) instead of a
hardcoded primitive. Pallets receive their `UInt`s through their config and use
them for validation and checked math.

Exports
-------
* `UInt`                 — frozen (name, bits) parameterization
* `U32`, `U64`, `U128`   — common widths
* `uint_max(bits)`, `is_uint(n, bits)`
* `safe_add(a, b, cap=...)` → raises OverflowError on cap breach
* `safe_sub(a, b)`          → raises ValueError if result < 0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def uint_max(bits: int) -> int:
    """Largest value representable with `bits` unsigned bits."""
    if not isinstance(bits, int) or bits <= 0:
        raise ValueError("bits must be a positive int")
    return (1 << bits) - 1


def is_uint(n: int, bits: int) -> bool:
    """Return True iff 0 <= n <= uint_max(bits)."""
    return isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= uint_max(bits)


def _ensure_nonneg_int(n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"expected int, got {type(n).__name__}")
    if n < 0:
        raise ValueError("value must be non-negative")
    return n


def safe_add(a: int, b: int, *, cap: int) -> int:
    """
    Checked addition. Raises OverflowError if result exceeds `cap`.
    """
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    s = a + b
    if s > cap:
        raise OverflowError(f"addition overflow: {a} + {b} > cap {cap}")
    return s


def safe_sub(a: int, b: int) -> int:
    """
    Checked subtraction. Raises ValueError if result would be negative.
    """
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    if b > a:
        raise ValueError(f"subtraction underflow: {a} - {b} < 0")
    return a - b


@dataclass(frozen=True)
class UInt:
    """
    An unsigned integer type of fixed width.

    Instances are values-as-types: `U128.validate(x)` checks that `x` fits,
    `U128.checked_add(a, b)` returns None instead of wrapping.
    """

    name: str
    bits: int

    def __post_init__(self) -> None:
        if not isinstance(self.bits, int) or self.bits <= 0:
            raise ValueError(f"{self.name}: bits must be a positive int")

    @property
    def max(self) -> int:
        return uint_max(self.bits)

    @property
    def zero(self) -> int:
        return 0

    def contains(self, n: int) -> bool:
        return is_uint(n, self.bits)

    def validate(self, n: int, *, what: str = "value") -> int:
        """Return `n` unchanged if it is a valid value of this type, else raise."""
        _ensure_nonneg_int(n)
        if n > self.max:
            raise OverflowError(f"{what} exceeds {self.name} max ({self.max})")
        return n

    def checked_add(self, a: int, b: int) -> Optional[int]:
        try:
            return safe_add(a, b, cap=self.max)
        except OverflowError:
            return None

    def checked_sub(self, a: int, b: int) -> Optional[int]:
        try:
            return safe_sub(a, b)
        except ValueError:
            return None

    def __str__(self) -> str:  # pragma: no cover - cosmetic
        return self.name


U32 = UInt("u32", 32)
U64 = UInt("u64", 64)
U128 = UInt("u128", 128)


def uint_for_bits(bits: int) -> UInt:
    """Return the canonical UInt for a bit width (named `u<bits>`)."""
    for known in (U32, U64, U128):
        if known.bits == bits:
            return known
    return UInt(f"u{int(bits)}", int(bits))


__all__ = [
    "UInt",
    "U32",
    "U64",
    "U128",
    "uint_max",
    "is_uint",
    "uint_for_bits",
    "safe_add",
    "safe_sub",
]
