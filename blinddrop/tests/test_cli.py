import json

from typer.testing import CliRunner

from blinddrop.cli import app
from blinddrop.commitment import build_commitment_hex
from blinddrop.generator import token_uri_with_seed
from blinddrop.tests import GUARDIAN_SEED
from blinddrop.utils.bytes import to_hex

runner = CliRunner()
SEED_HEX = to_hex(GUARDIAN_SEED)


def test_commit_with_given_seed():
    res = runner.invoke(app, ["commit", "--seed", SEED_HEX])
    assert res.exit_code == 0, res.output
    out = json.loads(res.stdout)
    assert out == {"seed": SEED_HEX, "commitment": build_commitment_hex(GUARDIAN_SEED)}


def test_commit_generates_fresh_seed():
    a = json.loads(runner.invoke(app, ["commit"]).stdout)
    b = json.loads(runner.invoke(app, ["commit"]).stdout)
    assert a["seed"] != b["seed"]


def test_verify():
    ok = runner.invoke(app, ["verify", "-s", SEED_HEX, "-c", build_commitment_hex(GUARDIAN_SEED)])
    assert ok.exit_code == 0
    assert json.loads(ok.stdout)["valid"] is True
    bad = runner.invoke(app, ["verify", "-s", "0x" + "00" * 32, "-c", build_commitment_hex(GUARDIAN_SEED)])
    assert bad.exit_code == 1


def test_render_formats():
    uri = runner.invoke(app, ["render", "-f", SEED_HEX, "-t", "7", "--format", "uri"])
    assert uri.exit_code == 0
    assert uri.stdout.strip() == token_uri_with_seed(GUARDIAN_SEED, 7)
    svg = runner.invoke(app, ["render", "-f", SEED_HEX, "-t", "7", "--format", "svg"])
    assert svg.stdout.startswith("<svg")
    attrs = json.loads(runner.invoke(app, ["render", "-f", SEED_HEX, "-t", "7"]).stdout)
    assert attrs["tokenId"] == 7 and len(attrs["slots"]) == 8


def test_render_rejects_bad_input():
    assert runner.invoke(app, ["render", "-f", "0x1234", "-t", "1"]).exit_code == 1
    assert runner.invoke(app, ["render", "-f", SEED_HEX, "-t", "1", "--format", "png"]).exit_code == 1


def test_simulate_guardian_and_fallback():
    res = runner.invoke(app, ["simulate", "--supply", "3", "--claims", "3", "--guardian-seed", SEED_HEX])
    assert res.exit_code == 0, res.output
    out = json.loads(res.stdout)
    assert out["snapshot"]["seed"]["phase"] == "final_seed_set"
    assert out["snapshot"]["seed"]["reveal_path"] == "guardian"
    assert sorted(out["tokens"]) == ["1", "2", "3"]

    res = runner.invoke(app, ["simulate", "--claims", "1", "--no-guardian"])
    assert res.exit_code == 0, res.output
    out = json.loads(res.stdout)
    assert out["snapshot"]["seed"]["reveal_path"] == "fallback"
    assert [e["event"] for e in out["events"]][-2:] == ["AutomaticSeedSet", "FallbackSeedSet"]


def test_simulate_reports_drop_errors():
    res = runner.invoke(app, ["simulate", "--supply", "2", "--claims", "3"])
    assert res.exit_code == 1


def test_simulate_reports_mistyped_config(tmp_path):
    commitment = build_commitment_hex(GUARDIAN_SEED)
    for name, body in [
        ("hex.yaml", f"guardian_commitment: {commitment}\n"),
        ("name.yaml", f'guardian_commitment: "{commitment}"\ncollection_name: 123\n'),
    ]:
        path = tmp_path / name
        path.write_text(body)
        res = runner.invoke(app, ["simulate", "--config", str(path), "--guardian-seed", SEED_HEX])
        assert res.exit_code == 1
        assert res.exception is None or isinstance(res.exception, SystemExit)
        assert "Simulation failed" in res.output
