"""
endorser keygen / endorser pubkey: authority key management.
"""

import sys
from pathlib import Path

import click

from endorser.config import EndorserConfig
from endorser.core.crypto import SignatureEngine
from endorser.core.exceptions import ConfigError


@click.command(name="keygen")
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing key file.")
def keygen_command(output: str, force: bool) -> None:
    """
    Generate a new Ed25519 authority key.

    Writes the private key to OUTPUT as PEM and prints the base58 public key.
    """
    path = Path(output)
    if path.exists() and not force:
        click.echo(f"Key file already exists: {path} (use --force to overwrite)", err=True)
        sys.exit(2)

    engine = SignatureEngine.generate()
    try:
        engine.save(path)
    except RuntimeError as e:
        click.echo(str(e), err=True)
        sys.exit(2)
    click.echo(engine.public_key_base58)


@click.command(name="pubkey")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    required=True,
    help="Endorser YAML configuration.",
)
def pubkey_command(config_path: str) -> None:
    """Print the configured authority's base58 public key."""
    try:
        engine = EndorserConfig.from_yaml(Path(config_path)).load_signature_engine()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    click.echo(engine.public_key_base58)
