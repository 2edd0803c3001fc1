from __future__ import annotations

import json
import logging

import pytest

from statechain.cli import apply_blocks
from statechain.runtime.executor import Runtime
from statechain.types.params import RuntimeParams


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _runtime() -> Runtime:
    return Runtime(RuntimeParams(), collect_metrics=False, log_extrinsic_errors=False)


def test_demo_json(capsys) -> None:
    rc = apply_blocks.main(["--demo", "--json"])
    assert rc == 0

    report = json.loads(capsys.readouterr().out)
    assert report["rejected"] is None
    assert [b["blockNumber"] for b in report["blocks"]] == [1, 2, 3]
    assert report["blocks"][1]["outcomes"][1]["error"]["code"] == "CLAIM_ALREADY_EXISTS"

    state = report["state"]
    assert state["system"] == {"block_number": 3, "nonces": {"alice": 4, "bob": 2}}
    assert state["balances"]["balances"] == {"alice": 50, "bob": 30, "charlie": 20}
    assert state["proof_of_existence"]["claims"] == {"Hello, world!": "bob"}
    assert report["stateRoot"].startswith("0x") and len(report["stateRoot"]) == 66


def test_demo_text(capsys) -> None:
    assert apply_blocks.main(["--demo"]) == 0
    out = capsys.readouterr().out
    assert "block #2: 2 extrinsic(s), 1 failed" in out
    assert "balance alice: 50" in out
    assert "CLAIM_ALREADY_EXISTS" in out


def test_run_stops_at_rejected_block() -> None:
    doc = {
        "genesis": {"balances": {"alice": 100}},
        "blocks": [
            {"header": {"block_number": 1}, "extrinsics": []},
            {
                "header": {"block_number": 3},
                "extrinsics": [{"caller": "alice", "call": {
                    "module": "balances", "call": "transfer",
                    "args": {"to": "bob", "amount": 1}}}],
            },
            {"header": {"block_number": 3}, "extrinsics": []},
        ],
    }
    report = apply_blocks.run(doc, runtime=_runtime())
    assert len(report["blocks"]) == 1
    assert report["rejected"]["code"] == "BLOCK_NUMBER_MISMATCH"
    assert report["rejected"]["data"] == {"expected": 2, "got": 3}
    assert report["state"]["system"]["block_number"] == 2
    assert report["state"]["balances"]["balances"] == {"alice": 100}


def test_input_file_and_exit_codes(tmp_path, capsys) -> None:
    good = tmp_path / "chain.json"
    good.write_text(json.dumps(apply_blocks.demo_chain()), encoding="utf-8")
    assert apply_blocks.main(["--input", str(good), "--json"]) == 0
    capsys.readouterr()

    rejected = tmp_path / "rejected.json"
    rejected.write_text(json.dumps({"blocks": [{"header": {"block_number": 2}}]}), encoding="utf-8")
    assert apply_blocks.main(["--input", str(rejected)]) == 1
    assert "BLOCK_NUMBER_MISMATCH" in capsys.readouterr().out

    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2, 3]", encoding="utf-8")
    assert apply_blocks.main(["--input", str(broken)]) == 2
    assert "invalid input" in capsys.readouterr().err

    assert apply_blocks.main(["--input", str(tmp_path / "missing.json")]) == 2


def test_seed_genesis_validates() -> None:
    rt = _runtime()
    with pytest.raises(ValueError):
        apply_blocks.seed_genesis(rt, {"balances": ["alice"]})
    with pytest.raises(OverflowError):
        apply_blocks.seed_genesis(rt, {"balances": {"alice": 2**128}})


def test_malformed_later_block_applies_nothing(tmp_path, capsys) -> None:
    ok = {"caller": "alice", "call": {"module": "balances", "call": "transfer",
                                      "args": {"to": "bob", "amount": 10}}}
    bad = {"caller": "alice", "call": {"module": "balances", "call": "transfer",
                                       "args": {"to": "bob", "amount": 1.9}}}
    doc = {
        "genesis": {"balances": {"alice": 100}},
        "blocks": [
            {"header": {"block_number": 1}, "extrinsics": [ok]},
            {"header": {"block_number": 2}, "extrinsics": [ok, bad]},
        ],
    }
    rt = _runtime()
    with pytest.raises(TypeError):
        apply_blocks.run(doc, runtime=rt)
    assert rt.system.block_number() == 0
    assert rt.balances.balance("alice") == 0
    assert rt.balances.balance("bob") == 0

    path = tmp_path / "chain.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    assert apply_blocks.main(["--input", str(path)]) == 2
    assert "invalid input" in capsys.readouterr().err


def test_genesis_amounts_are_not_truncated() -> None:
    with pytest.raises(TypeError):
        apply_blocks.seed_genesis(_runtime(), {"balances": {"alice": 10.5}})
    rt = _runtime()
    apply_blocks.seed_genesis(rt, {"balances": {"alice": "100"}})
    assert rt.balances.balance("alice") == 100
