from __future__ import annotations

import pytest

from statechain.errors import (ClaimAlreadyExists, ClaimNotFound,
                               ClaimOwnerMismatch, UnroutableOperation)
from statechain.pallets import proof_of_existence as poe
from statechain.pallets.balances import Transfer

ALICE = "alice"
BOB = "bob"


def test_basic_proof_of_existence() -> None:
    p = poe.Pallet()
    assert p.get_claim("Hello, world!") is None

    p.create_claim(ALICE, "Hello, world!")
    assert p.get_claim("Hello, world!") == ALICE

    with pytest.raises(ClaimAlreadyExists) as ei:
        p.create_claim(BOB, "Hello, world!")
    assert ei.value.owner == ALICE
    assert p.get_claim("Hello, world!") == ALICE

    p.revoke_claim(ALICE, "Hello, world!")
    assert p.get_claim("Hello, world!") is None


def test_owner_cannot_reclaim_own_content() -> None:
    p = poe.Pallet()
    p.create_claim(ALICE, "doc")
    with pytest.raises(ClaimAlreadyExists):
        p.create_claim(ALICE, "doc")


def test_revoke_by_non_owner_keeps_claim() -> None:
    p = poe.Pallet()
    p.create_claim(ALICE, "doc")

    with pytest.raises(ClaimOwnerMismatch) as ei:
        p.revoke_claim(BOB, "doc")
    assert ei.value.to_dict()["data"] == {"claim": "doc", "owner": ALICE, "caller": BOB}
    assert p.get_claim("doc") == ALICE


def test_revoke_unknown_claim() -> None:
    p = poe.Pallet()
    with pytest.raises(ClaimNotFound) as ei:
        p.revoke_claim(ALICE, "nothing")
    assert ei.value.code == "CLAIM_NOT_FOUND"


def test_account_may_hold_many_claims() -> None:
    p = poe.Pallet()
    for c in ("a", "b", "c"):
        p.create_claim(ALICE, c)
    assert p.to_dict() == {"claims": {"a": ALICE, "b": ALICE, "c": ALICE}}


def test_claimed_again_after_revoke() -> None:
    p = poe.Pallet()
    p.create_claim(ALICE, "doc")
    p.revoke_claim(ALICE, "doc")
    p.create_claim(BOB, "doc")
    assert p.get_claim("doc") == BOB


def test_content_type_is_checked() -> None:
    p = poe.Pallet()
    with pytest.raises(TypeError, match="content"):
        p.create_claim(ALICE, b"bytes-not-str")


def test_dispatch() -> None:
    p = poe.Pallet()
    p.dispatch(ALICE, poe.CreateClaim("x"))
    assert p.get_claim("x") == ALICE
    p.dispatch(ALICE, poe.RevokeClaim("x"))
    assert p.get_claim("x") is None

    with pytest.raises(UnroutableOperation):
        p.dispatch(ALICE, Transfer(to=BOB, amount=1))  # type: ignore[arg-type]


def test_call_from_dict() -> None:
    assert poe.call_from_dict("create_claim", {"claim": "x"}) == poe.CreateClaim("x")
    assert poe.call_from_dict("revoke_claim", {"claim": "x"}) == poe.RevokeClaim("x")
    with pytest.raises(ValueError, match="missing argument"):
        poe.call_from_dict("create_claim", {})
    with pytest.raises(ValueError, match="unknown"):
        poe.call_from_dict("transfer_claim", {"claim": "x"})


@pytest.mark.parametrize("name", ["create_claim", "revoke_claim"])
def test_call_from_dict_rejects_non_string_claim(name) -> None:
    with pytest.raises(ValueError, match="'claim' must be a string"):
        poe.call_from_dict(name, {"claim": 42})
