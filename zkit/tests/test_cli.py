import json

import pytest
from typer.testing import CliRunner

from zkit.cli import app, main
from zkit.envelope import decode_envelope
from zkit.version import __version__

runner = CliRunner()

ENV = {"ZKIT_K": "3", "ZKIT_SRS_SEED": "cli-tests", "ZKIT_LOG_LEVEL": "WARNING", "ZKIT_ENABLED_ROWS": "1"}


def _invoke(args, **kw):
    return runner.invoke(app, args, env=ENV, **kw)


@pytest.mark.parametrize("flag", ["--version", "-V"])
def test_version_without_subcommand(flag):
    result = _invoke([flag])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == f"zkit {__version__}"
    assert "Missing command" not in result.output


def test_main_exits_with_command_status(capsys):
    with pytest.raises(SystemExit) as ei:
        main(["--version"])
    assert ei.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_info_json():
    result = _invoke(["info", "--json"])
    assert result.exit_code == 0, result.output
    info = json.loads(result.output)
    assert info["k"] == 3 and info["rows"] == 8
    assert info["seeded"] is True
    assert info["vk_hash"].startswith("sha3-256:")


def test_info_rejects_bad_config():
    result = runner.invoke(app, ["info"], env={**ENV, "ZKIT_K": "nope"})
    assert result.exit_code == 2
    assert "ZKIT_K" in result.output


def test_menu_ingest_and_retrieve():
    keys = "\n".join(["1", "65,66,67", "1", "1", "4", "1", "4", "2", "4", "9", "5"]) + "\n"
    result = _invoke(["menu"], input=keys)
    assert result.exit_code == 0, result.output
    assert "Data ingested with ID: 1" in result.output
    assert "Data ingested with ID: 2" in result.output
    assert "Retrieved data: [65, 66, 67]" in result.output
    assert "Retrieved data: [1]" in result.output
    assert "Data not found." in result.output


def test_menu_recovers_from_bad_input():
    keys = "\n".join(["7", "1", "300", "4", "x", "3", "zz", "3", "00", "2", "1,2,3", "5"]) + "\n"
    result = _invoke(["menu"], input=keys)
    assert result.exit_code == 0, result.output
    assert "Invalid choice, please try again." in result.output
    assert result.output.count("Invalid input:") == 4
    assert "Error:" in result.output  # violating witness
    assert "Data ingested" not in result.output


@pytest.mark.slow
def test_menu_prove_then_verify():
    first = _invoke(["menu"], input="2\n0,1,2\n5\n")
    assert first.exit_code == 0, first.output
    line = next(ln for ln in first.output.splitlines() if "Proof created successfully:" in ln)
    proof_hex = line.split(":", 1)[1].strip()
    assert proof_hex.startswith("0x") and len(proof_hex) == 2 + 2 * 256

    second = _invoke(["menu"], input=f"3\n{proof_hex}\n5\n")
    assert second.exit_code == 0, second.output
    assert "Proof verified successfully." in second.output


@pytest.mark.slow
def test_prove_to_file_and_verify(tmp_path):
    out = tmp_path / "proof.json"
    result = _invoke(["prove", "--witness", "0,5", "--out", str(out)])
    assert result.exit_code == 0, result.output
    env = decode_envelope(out.read_bytes())
    assert env.kind == "plonk-kzg-bn254"
    assert env.meta["k"] == 3 and env.meta["witness_len"] == 2

    result = _invoke(["verify", str(out)])
    assert result.exit_code == 0, result.output
    assert "OK proof verified" in result.output


def test_prove_refuses_violating_witness():
    result = _invoke(["prove", "--witness", "1,2,3"])
    assert result.exit_code == 1
    assert "PROOF_GENERATION" in result.output


def test_verify_with_other_parameters_reports_key_mismatch():
    proved = _invoke(["prove", "--witness", "0"])
    assert proved.exit_code == 0, proved.output
    envelope_json = proved.output.strip().splitlines()[-1]
    result = _invoke(["verify", envelope_json, "--seed", "someone-else"])
    assert result.exit_code == 1
    assert "proof was made for" in result.output


@pytest.mark.parametrize("source", ["0x1234", "nothex", '{"kind": 1}'])
def test_verify_rejects_malformed_input(source):
    result = _invoke(["verify", source])
    assert result.exit_code == 1
    assert "[verify]" in result.output
