#!/usr/bin/env python3
"""
zkit.cli
========

Command line front end. All parsing happens here (see zkit.hexio); the
SessionCoordinator only ever sees bytes, ids and circuit instances.

Commands:
  menu      interactive loop (ingest / create proof / verify / retrieve / exit)
  prove     derive keys, prove a witness and print (or write) a JSON envelope
  verify    derive keys and verify an envelope file, envelope JSON or raw hex
  info      show version, parameters and verifying-key digest

Parameters come from the environment (zkit.config). Proofs made by one process
only verify in another when both derive the same parameters, i.e. both run
with the same ZKIT_SRS_SEED (or --seed).

Examples:
  ZKIT_SRS_SEED=dev zkit prove --witness 0,1,2 --out proof.json
  ZKIT_SRS_SEED=dev zkit verify proof.json
  zkit menu
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer

from .circuit import CircuitShape
from .config import ZkitConfig, load_config
from .envelope import ProofEnvelope, decode_envelope, encode_envelope, make_envelope
from .errors import EncodingError, ProofFormatError, ZkitError
from .hexio import parse_byte_list, parse_hex, parse_id, parse_witness, to_hex
from .session import SessionCoordinator
from .version import __version__, runtime_banner

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_WITNESS = "0,1,2"

app = typer.Typer(
    name="zkit",
    add_completion=False,
    no_args_is_help=True,
    help="Ingest data into a ledger and issue/verify zero-knowledge proofs over a small circuit.",
)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _die(msg: str, code: int = 1) -> None:
    typer.echo(msg.rstrip(), err=True)
    raise typer.Exit(code)


def _load(seed: Optional[str]) -> ZkitConfig:
    try:
        config = load_config()
        if seed is not None:
            config = replace(config, srs_seed=seed).validate()
    except ZkitError as e:
        _die(f"[config] {e}", 2)
    configure_logging(config.log_level)
    return config


def _open_session(config: ZkitConfig) -> SessionCoordinator:
    session = SessionCoordinator.from_config(config)
    session.keygen(CircuitShape(enabled_rows=config.enabled_rows))
    return session


def _envelope_for(session: SessionCoordinator, config: ZkitConfig, proof: bytes, witness_len: int) -> ProofEnvelope:
    kp = session.key_pair
    return make_envelope(
        session.backend.name,
        proof,
        kp.digest,
        k=config.k,
        enabled_rows=config.enabled_rows,
        witness_len=witness_len,
    )


def _read_proof_source(source: str) -> tuple[bytes, Optional[ProofEnvelope]]:
    """A path to an envelope/hex file, an envelope JSON string, or a hex string."""
    text = source
    path = Path(source)
    try:
        is_file = path.is_file()
    except OSError:
        is_file = False
    if is_file:
        text = path.read_text(encoding="utf-8")
    text = text.strip()
    if text.startswith("{"):
        env = decode_envelope(text)
        return env.proof_bytes(), env
    return parse_hex(text), None


# -------------------- commands --------------------


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"zkit {__version__}")
        raise typer.Exit(0)


@app.callback()
def _meta(
    version: bool = typer.Option(
        False, "--version", "-V", help="Print version and exit", is_eager=True, callback=_print_version
    ),
) -> None:
    # eager option: runs while parsing, before the group asks for a subcommand
    pass


@app.command("info")
def info_cmd(
    seed: Optional[str] = typer.Option(None, "--seed", help="Deterministic parameter seed (overrides ZKIT_SRS_SEED)"),
    json_out: bool = typer.Option(False, "--json", help="Print machine-readable JSON"),
) -> None:
    """Show version, parameters and the verifying-key digest."""
    config = _load(seed)
    try:
        session = _open_session(config)
    except ZkitError as e:
        _die(f"[info] {e}")
        return
    out = {
        "version": __version__,
        "backend": session.backend.name,
        "k": config.k,
        "rows": config.rows,
        "max_degree": config.max_degree,
        "enabled_rows": config.enabled_rows,
        "seeded": config.srs_seed is not None,
        "vk_hash": session.key_pair.digest,
    }
    if json_out:
        typer.echo(json.dumps(out, indent=2, sort_keys=True))
        return
    typer.echo(runtime_banner())
    for key, value in out.items():
        typer.echo(f"{key:>13}: {value}")


@app.command("prove")
def prove_cmd(
    witness: str = typer.Option(DEFAULT_WITNESS, "--witness", "-w", help="Comma separated witness values"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the envelope to this file"),
    seed: Optional[str] = typer.Option(None, "--seed", help="Deterministic parameter seed (overrides ZKIT_SRS_SEED)"),
) -> None:
    """Derive keys, prove the witness and emit a JSON proof envelope."""
    config = _load(seed)
    if config.srs_seed is None:
        log.warning("no ZKIT_SRS_SEED set: this proof only verifies against parameters of this process")
    try:
        values = parse_witness(witness)
        session = _open_session(config)
        proof = session.prove(CircuitShape(enabled_rows=config.enabled_rows).instantiate(values))
    except ZkitError as e:
        _die(f"[prove] {e}")
        return
    data = encode_envelope(_envelope_for(session, config, proof, len(values)))
    if out is None:
        typer.echo(data.decode("utf-8"))
        return
    out.write_bytes(data + b"\n")
    typer.echo(f"wrote {len(proof)}-byte proof to {out}")


@app.command("verify")
def verify_cmd(
    source: str = typer.Argument(..., help="Envelope file, envelope JSON, or proof hex"),
    seed: Optional[str] = typer.Option(None, "--seed", help="Deterministic parameter seed (overrides ZKIT_SRS_SEED)"),
) -> None:
    """Derive keys with the current configuration and verify a proof."""
    config = _load(seed)
    try:
        proof, env = _read_proof_source(source)
        session = _open_session(config)
        if env is not None and env.vk_hash != session.key_pair.digest:
            _die(
                f"[verify] proof was made for {env.vk_hash}, current keys are {session.key_pair.digest} "
                "(different parameters or circuit shape)"
            )
        ok = session.verify(proof)
    except ZkitError as e:
        _die(f"[verify] {e}")
        return
    if not ok:
        _die("FAILED proof did not verify")
    typer.echo("OK proof verified")


@app.command("menu")
def menu_cmd(
    seed: Optional[str] = typer.Option(None, "--seed", help="Deterministic parameter seed (overrides ZKIT_SRS_SEED)"),
) -> None:
    """Interactive loop over one session."""
    config = _load(seed)
    try:
        session = _open_session(config)
    except ZkitError as e:
        _die(f"[menu] {e}", 2)
        return
    shape = session.key_pair.shape

    while True:
        typer.echo("ZKIT Ledger")
        typer.echo("1. Ingest Data")
        typer.echo("2. Create Proof")
        typer.echo("3. Verify Proof")
        typer.echo("4. Retrieve Data")
        typer.echo("5. Exit")
        choice = typer.prompt("Enter your choice").strip()

        try:
            if choice == "1":
                data = parse_byte_list(typer.prompt("Enter data to ingest (comma separated bytes)", default="", show_default=False))
                entry_id = session.ingest(data)
                typer.echo(f"Data ingested with ID: {entry_id}")
            elif choice == "2":
                values = parse_witness(typer.prompt("Enter witness values (comma separated)", default=DEFAULT_WITNESS))
                proof = session.prove(shape.instantiate(values))
                typer.echo(f"Proof created successfully: {to_hex(proof)}")
            elif choice == "3":
                proof = parse_hex(typer.prompt("Enter proof to verify (hex string)"))
                if session.verify(proof):
                    typer.echo("Proof verified successfully.")
                else:
                    typer.echo("Proof verification failed.")
            elif choice == "4":
                entry_id = parse_id(typer.prompt("Enter data ID to retrieve"))
                data = session.retrieve(entry_id)
                if data is None:
                    typer.echo("Data not found.")
                else:
                    typer.echo(f"Retrieved data: {list(data)}")
            elif choice == "5":
                break
            else:
                typer.echo("Invalid choice, please try again.")
        except (EncodingError, ProofFormatError) as e:
            typer.echo(f"Invalid input: {e.msg}")
        except ZkitError as e:
            typer.echo(f"Error: {e}")


def main(argv: Optional[list[str]] = None) -> None:
    """Console entry point; exits the process with the command's status."""
    app(args=argv if argv is not None else sys.argv[1:], prog_name="zkit")


if __name__ == "__main__":  # pragma: no cover
    main()
