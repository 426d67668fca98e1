# tests/test_cli_replay.py
from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from energytoken.cli import main


def _write_jsonl(path: Path, envs: list) -> Path:
    lines = ["# walkthrough", ""] + [json.dumps(e) for e in envs]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _run(argv: list) -> tuple[int, list]:
    out = io.StringIO()
    rc = main(argv, out=out)
    return rc, [json.loads(line) for line in out.getvalue().splitlines()]


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENERGYTOKEN_CONFIG_PATH", raising=False)


def test_replay_walkthrough(tmp_path: Path) -> None:
    f = _write_jsonl(
        tmp_path / "txs.jsonl",
        [
            {"tx_type": "PRODUCER_REGISTER", "signer": "P1", "payload": {"name": "SolarCo"}},
            {"tx_type": "ENERGY_MINT", "signer": "P1", "payload": {"amount": 100}},
            {"tx_type": "PRODUCER_VERIFY", "signer": "STADMIN", "payload": {"producer": "P1"}},
            {"tx_type": "ENERGY_MINT", "signer": "P1", "payload": {"amount": 100}},
            {"tx_type": "ENERGY_TRANSFER", "signer": "P1", "payload": {"to": "U1", "amount": 60}},
        ],
    )

    rc, rows = _run(["replay", str(f)])
    assert rc == 0

    results, summary = rows[:-1], rows[-1]
    assert [r["line"] for r in results] == [3, 4, 5, 6, 7]
    assert [r["ok"] for r in results] == [True, False, True, True, True]
    assert results[1]["result"] == {"error": 100}
    assert results[1]["code"] == "not_authorized"

    assert summary["admin"] == "STADMIN"
    assert summary["balances"] == {"P1": 40, "U1": 60}
    assert summary["producers"] == {"P1": {"name": "SolarCo", "verified": True}}
    assert summary["total_supply"] == 100


def test_replay_strict_exit_code(tmp_path: Path) -> None:
    f = _write_jsonl(tmp_path / "txs.jsonl", [{"tx_type": "ENERGY_BURN", "signer": "U1", "payload": {"amount": 1}}])
    rc, rows = _run(["replay", "--strict", str(f)])
    assert rc == 1
    assert rows[0]["result"] == {"error": 104}


def test_replay_admin_override(tmp_path: Path) -> None:
    f = _write_jsonl(
        tmp_path / "txs.jsonl",
        [{"tx_type": "ADMIN_TRANSFER", "signer": "STOPS", "payload": {"new_admin": "STNEXT"}}],
    )
    rc, rows = _run(["replay", "--admin", "STOPS", str(f)])
    assert rc == 0
    assert rows[-1]["admin"] == "STNEXT"


def test_replay_uses_config_file(tmp_path: Path) -> None:
    cfg = tmp_path / "ledger.json"
    cfg.write_text(json.dumps({"admin": "STGRIDOP", "log_level": "WARNING"}))
    f = _write_jsonl(tmp_path / "txs.jsonl", [])

    rc, rows = _run(["replay", "--config", str(cfg), str(f)])
    assert rc == 0
    assert rows == [{"admin": "STGRIDOP", "producers": {}, "balances": {}, "total_supply": 0}]


def test_replay_rejects_bad_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = tmp_path / "txs.jsonl"
    f.write_text('{"tx_type": "ENERGY_MINT"\n', encoding="utf-8")

    rc, _ = _run(["replay", str(f)])
    assert rc == 2
    assert "invalid JSON" in capsys.readouterr().err


def test_replay_rejects_non_object_lines(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = tmp_path / "txs.jsonl"
    f.write_text("[1, 2]\n", encoding="utf-8")

    rc, _ = _run(["replay", str(f)])
    assert rc == 2
    assert "must be a JSON object" in capsys.readouterr().err


def test_replay_missing_file(tmp_path: Path) -> None:
    rc, rows = _run(["replay", str(tmp_path / "absent.jsonl")])
    assert rc == 2
    assert rows == []


def test_replay_bad_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "ledger.json"
    cfg.write_text(json.dumps({"admin": "A", "max_receipts": -2}))
    f = _write_jsonl(tmp_path / "txs.jsonl", [])

    rc, _ = _run(["replay", "--config", str(cfg), str(f)])
    assert rc == 2
    assert "bad ledger config" in capsys.readouterr().err


def test_replay_log_level_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENERGYTOKEN_LOG_LEVEL", "WARNING")
    f = _write_jsonl(tmp_path / "txs.jsonl", [])

    rc, _ = _run(["replay", str(f)])
    assert rc == 0
    assert logging.getLogger().level == logging.WARNING


def test_replay_config_log_level_wins_over_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENERGYTOKEN_LOG_LEVEL", "WARNING")
    cfg = tmp_path / "ledger.json"
    cfg.write_text(json.dumps({"log_level": "debug"}))
    f = _write_jsonl(tmp_path / "txs.jsonl", [])

    rc, _ = _run(["replay", "--config", str(cfg), str(f)])
    assert rc == 0
    assert logging.getLogger().level == logging.DEBUG
