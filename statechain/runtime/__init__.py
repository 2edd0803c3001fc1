"""
statechain.runtime — pallet composition, call routing and block execution.

Submodules
----------
- dispatcher : RuntimeCall (tagged pallet call), ModuleTag, Dispatch protocol, routing
- executor   : Runtime, which owns the pallets, dispatches calls and executes blocks

Names resolve lazily on first access, so `import statechain.runtime` alone does
not import the pallets:

    from statechain.runtime import Runtime, RuntimeCall, ModuleTag, dispatch
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Optional

from ..version import __version__ as __version__

__all__ = (
    "dispatcher",
    "executor",
    "Runtime",
    "RuntimeCall",
    "ModuleTag",
    "Dispatch",
    "dispatch",
)

# attribute -> (submodule, name in submodule); None means the submodule itself
_LAZY: Dict[str, tuple[str, Optional[str]]] = {
    "dispatcher": ("dispatcher", None),
    "executor": ("executor", None),
    "Runtime": ("executor", "Runtime"),
    "RuntimeCall": ("dispatcher", "RuntimeCall"),
    "ModuleTag": ("dispatcher", "ModuleTag"),
    "Dispatch": ("dispatcher", "Dispatch"),
    "dispatch": ("dispatcher", "dispatch"),
}


def __getattr__(name: str) -> Any:  # PEP 562
    try:
        submodule, attr = _LAZY[name]
    except KeyError:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from None
    mod = import_module(f".{submodule}", __name__)
    return mod if attr is None else getattr(mod, attr)


def __dir__() -> list[str]:
    return sorted([*__all__, "__version__"])
