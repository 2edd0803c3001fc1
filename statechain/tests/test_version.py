from __future__ import annotations

import statechain
from statechain import runtime, version


def test_describe_override(monkeypatch) -> None:
    version.git_describe.cache_clear()
    monkeypatch.setenv("STATECHAIN_GIT_DESCRIBE", "v0.1.0-2-gabc1234-dirty")
    try:
        meta = version.version_metadata()
    finally:
        version.git_describe.cache_clear()

    assert meta["version"] == statechain.__version__
    assert meta["describe"] == "v0.1.0-2-gabc1234-dirty"
    assert meta["dirty"] == "true"


def test_describe_always_non_empty() -> None:
    version.git_describe.cache_clear()
    try:
        assert version.git_describe()
    finally:
        version.git_describe.cache_clear()


def test_runtime_lazy_exports() -> None:
    from statechain.runtime.dispatcher import RuntimeCall
    from statechain.runtime.executor import Runtime

    assert runtime.Runtime is Runtime
    assert runtime.RuntimeCall is RuntimeCall
    assert "Runtime" in dir(runtime)
    assert runtime.executor.Runtime is Runtime
