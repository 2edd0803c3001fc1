from __future__ import annotations

import pytest

from statechain.runtime.executor import Runtime
from statechain.types.params import RuntimeParams


@pytest.fixture
def params() -> RuntimeParams:
    return RuntimeParams()


@pytest.fixture
def runtime(params: RuntimeParams) -> Runtime:
    """Fresh runtime with default types; metrics off so tests stay independent."""
    return Runtime(params, collect_metrics=False, log_extrinsic_errors=True)
