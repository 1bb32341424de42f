"""
endorser endorse / approve / verify: run the authority from the terminal.

Usage:
    endorser endorse --config endorser.yaml request.json
    endorser endorse --config endorser.yaml - < request.json
    endorser approve --config endorser.yaml token.json --now 1700000000
    endorser verify endorsement.json --public-key <base58>

Results are printed as JSON in their wire shape. A rejected input
(exit 2) prints the error object instead, e.g.

    {"error": "invalid sendQty", "field": "sendQty", "value": "1.5"}
"""

import json
import math
import sys
from pathlib import Path
from typing import IO, Any, Optional

import click

from endorser.authority.endorser import verify_endorsement
from endorser.config import EndorserConfig
from endorser.core.exceptions import ConfigError, ValidationError
from endorser.core.models import Endorsement
from endorser.core.time import utc_now


def _load_json(stream: IO[str]) -> Any:
    try:
        return json.load(stream)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        click.echo(f"Error: {stream.name} is not valid JSON: {e}", err=True)
        sys.exit(2)


def _load_authority(config_path: str):
    try:
        return EndorserConfig.from_yaml(Path(config_path)).build_request_endorser()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)


def _echo_json(obj: dict) -> None:
    click.echo(json.dumps(obj, indent=2))


_config_option = click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    required=True,
    help="Endorser YAML configuration.",
)


def _finite_seconds(ctx, param, value: Optional[float]) -> Optional[float]:
    if value is not None and not math.isfinite(value):
        raise click.BadParameter("must be a finite number of unix seconds")
    return value


_now_option = click.option(
    "--now",
    type=float,
    default=None,
    callback=_finite_seconds,
    metavar="UNIX_SECONDS",
    help="Evaluate at this time instead of the current clock.",
)


@click.command(name="endorse")
@_config_option
@_now_option
@click.argument("request", type=click.File("r"))
def endorse_command(config_path: str, now: Optional[float], request: IO[str]) -> None:
    """
    Endorse the request in REQUEST (a JSON file, or - for stdin).
    """
    authority = _load_authority(config_path)
    payload   = _load_json(request)
    try:
        result = authority.maybe_endorse(payload, utc_now() if now is None else now)
    except ValidationError as e:
        click.echo(f"Invalid endorsement request: {e}", err=True)
        _echo_json(e.to_dict())
        sys.exit(2)

    _echo_json(result.to_dict())
    sys.exit(0 if result.endorsed else 1)


@click.command(name="approve")
@_config_option
@_now_option
@click.argument("token", type=click.File("r"))
def approve_command(config_path: str, now: Optional[float], token: IO[str]) -> None:
    """
    Approve the payment-in-lieu token in TOKEN (a JSON file, or - for stdin).
    """
    authority = _load_authority(config_path)
    payload   = _load_json(token)
    try:
        result = authority.maybe_approve_payment_in_lieu(
            payload, utc_now() if now is None else now
        )
    except ValidationError as e:
        click.echo(f"Invalid payment in lieu token: {e}", err=True)
        _echo_json(e.to_dict())
        sys.exit(2)

    _echo_json(result.to_dict())
    sys.exit(0 if result.approved else 1)


@click.command(name="verify")
@click.argument("endorsement", type=click.File("r"))
@click.option(
    "--public-key",
    required=True,
    metavar="BASE58",
    help="Authority public key the endorsement should be signed by.",
)
def verify_command(endorsement: IO[str], public_key: str) -> None:
    """
    Verify the signature of the endorsement in ENDORSEMENT.

    Accepts either a bare endorsement or a full endorse result.
    """
    payload = _load_json(endorsement)
    if isinstance(payload, dict) and "endorsement" in payload:
        payload = payload["endorsement"]
    try:
        parsed = Endorsement.from_dict(payload)
    except ValidationError as e:
        click.echo(f"Invalid endorsement: {e}", err=True)
        sys.exit(2)

    if verify_endorsement(parsed, public_key):
        click.echo("valid")
        sys.exit(0)
    click.echo("invalid")
    sys.exit(1)
