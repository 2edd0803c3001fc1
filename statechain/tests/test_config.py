from __future__ import annotations

import pytest

from statechain.config import load_config, summary
from statechain.types.params import RuntimeParams
from statechain.types.primitives import U32, U64, U128


def test_defaults() -> None:
    cfg = load_config(env={})
    assert cfg.widths.balance_bits == 128
    assert cfg.widths.block_number_bits == 32
    assert cfg.widths.nonce_bits == 32
    assert cfg.features.metrics is True
    assert cfg.features.log_extrinsic_errors is True
    assert summary(cfg) == (
        "statechain{balance=u128, block=u32, nonce=u32, metrics=1, log_errors=1}"
    )


def test_env_values() -> None:
    cfg = load_config(
        env={
            "STATECHAIN_BALANCE_BITS": "64",
            "STATECHAIN_NONCE_BITS": " 16 ",
            "STATECHAIN_METRICS": "off",
            "STATECHAIN_LOG_EXTRINSIC_ERRORS": "No",
        }
    )
    assert cfg.widths.balance_bits == 64
    assert cfg.widths.nonce_bits == 16
    assert cfg.features.metrics is False
    assert cfg.features.log_extrinsic_errors is False


def test_overrides_win_for_widths() -> None:
    cfg = load_config(env={"STATECHAIN_BALANCE_BITS": "64"}, overrides={"balance_bits": 8})
    assert cfg.widths.balance_bits == 8


def test_overrides_are_defaults_for_flags() -> None:
    assert load_config(env={}, overrides={"metrics": False}).features.metrics is False
    cfg = load_config(env={"STATECHAIN_METRICS": "1"}, overrides={"metrics": False})
    assert cfg.features.metrics is True


@pytest.mark.parametrize("raw", ["0", "-8", "abc", "5000"])
def test_invalid_bits(raw: str) -> None:
    with pytest.raises(ValueError):
        load_config(env={"STATECHAIN_BLOCK_NUMBER_BITS": raw})


def test_params_from_config() -> None:
    cfg = load_config(env={"STATECHAIN_BALANCE_BITS": "64"})
    p = RuntimeParams.from_config(cfg)
    assert p.balance == U64
    assert p.block_number is U32
    assert p.nonce is U32

    assert RuntimeParams.from_config(load_config(env={})).balance is U128


def test_to_dict() -> None:
    d = load_config(env={}).to_dict()
    assert d["widths"]["balance_bits"] == 128
    assert d["features"] == {"metrics": True, "log_extrinsic_errors": True}
