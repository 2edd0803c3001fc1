from __future__ import annotations

import pytest

from statechain.errors import InsufficientFunds, UnroutableOperation
from statechain.pallets.balances import Transfer
from statechain.pallets.proof_of_existence import CreateClaim, RevokeClaim
from statechain.runtime.dispatcher import (ModuleTag, RuntimeCall,
                                           resolve_module_tag)

ALICE = "alice"
BOB = "bob"


def test_constructors_tag_calls() -> None:
    c = RuntimeCall.balances(Transfer(to=BOB, amount=1))
    assert c.module is ModuleTag.BALANCES
    assert c.call_name == "transfer"

    c = RuntimeCall.proof_of_existence(RevokeClaim("x"))
    assert c.module is ModuleTag.PROOF_OF_EXISTENCE
    assert c.call_name == "revoke_claim"


@pytest.mark.parametrize(
    "name,expected",
    [
        ("balances", ModuleTag.BALANCES),
        ("Balances", ModuleTag.BALANCES),
        ("poe", ModuleTag.PROOF_OF_EXISTENCE),
        ("ProofOfExistence", ModuleTag.PROOF_OF_EXISTENCE),
        ("proof-of-existence", ModuleTag.PROOF_OF_EXISTENCE),
        ("Staking", "staking"),
    ],
)
def test_resolve_module_tag(name, expected) -> None:
    assert resolve_module_tag(name) == expected


def test_runtime_routes_to_owning_pallet(runtime) -> None:
    runtime.balances.set_balance(ALICE, 10)
    runtime.dispatch(ALICE, RuntimeCall.balances(Transfer(to=BOB, amount=3)))
    runtime.dispatch(ALICE, RuntimeCall.proof_of_existence(CreateClaim("x")))

    assert runtime.balances.balance(BOB) == 3
    assert runtime.proof_of_existence.get_claim("x") == ALICE


def test_dispatch_does_not_touch_nonces_or_block_number(runtime) -> None:
    runtime.dispatch(ALICE, RuntimeCall.proof_of_existence(CreateClaim("x")))
    assert runtime.system.nonce(ALICE) == 0
    assert runtime.system.block_number() == 0


def test_pallet_errors_propagate(runtime) -> None:
    with pytest.raises(InsufficientFunds):
        runtime.dispatch(ALICE, RuntimeCall.balances(Transfer(to=BOB, amount=1)))


def test_wrong_family_is_unroutable(runtime) -> None:
    bad = RuntimeCall(ModuleTag.BALANCES, CreateClaim("x"))
    with pytest.raises(UnroutableOperation) as ei:
        runtime.dispatch(ALICE, bad)
    assert ei.value.data == {"module": "balances", "call": "create_claim"}
    assert runtime.proof_of_existence.get_claim("x") is None


def test_unknown_module_is_unroutable(runtime) -> None:
    call = RuntimeCall.from_dict({"module": "staking", "call": "bond", "args": {"value": 5}})
    assert call.module == "staking"
    assert call.to_dict() == {"module": "staking", "call": "bond", "args": {"value": 5}}
    with pytest.raises(UnroutableOperation) as ei:
        runtime.dispatch(ALICE, call)
    assert ei.value.code == "UNROUTABLE_OPERATION"


def test_from_dict_parses_known_calls() -> None:
    call = RuntimeCall.from_dict(
        {"module": "balances", "call": "transfer", "args": {"to": BOB, "amount": 69}}
    )
    assert call == RuntimeCall.balances(Transfer(to=BOB, amount=69))

    call = RuntimeCall.from_dict({"module": "poe", "call": "create_claim", "args": {"claim": "hi"}})
    assert call == RuntimeCall.proof_of_existence(CreateClaim("hi"))


def test_from_dict_rejects_malformed() -> None:
    with pytest.raises(ValueError):
        RuntimeCall.from_dict({"module": "balances"})
    with pytest.raises(ValueError, match="unknown balances call"):
        RuntimeCall.from_dict({"module": "balances", "call": "mint", "args": {}})
    with pytest.raises(TypeError):
        RuntimeCall.from_dict({"module": "balances", "call": "transfer", "args": [1, 2]})


def test_to_dict() -> None:
    c = RuntimeCall.proof_of_existence(CreateClaim("hi"))
    assert c.to_dict() == {
        "module": "proof_of_existence",
        "call": "create_claim",
        "args": {"claim": "hi"},
    }


@pytest.mark.parametrize("module", ["balances", "Balances", ModuleTag.BALANCES])
def test_direct_construction_normalizes_module(runtime, module) -> None:
    call = RuntimeCall(module, Transfer(to=BOB, amount=2))
    assert call.module is ModuleTag.BALANCES
    assert call == RuntimeCall.balances(Transfer(to=BOB, amount=2))

    runtime.balances.set_balance(ALICE, 2)
    runtime.dispatch(ALICE, call)
    assert runtime.balances.balance(BOB) == 2


def test_direct_construction_with_poe_alias(runtime) -> None:
    call = RuntimeCall("poe", CreateClaim("hi"))
    assert call.module is ModuleTag.PROOF_OF_EXISTENCE
    runtime.dispatch(ALICE, call)
    assert runtime.proof_of_existence.get_claim("hi") == ALICE
