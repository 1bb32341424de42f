"""
endorser/cli/__init__.py

Endorser CLI: root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    endorser = "endorser.cli:cli"

Exit codes (shared by every command):
    0  success: endorsed, approved, key written, signature valid
    1  business rejection or invalid signature
    2  error: bad input, bad configuration
"""

import logging

import click

from endorser.cli.authority import approve_command, endorse_command, verify_command
from endorser.cli.keys import keygen_command, pubkey_command


@click.group()
@click.version_option(package_name="endorsement-server")
@click.option("-v", "--verbose", count=True, help="Log to stderr (-v info, -vv debug).")
def cli(verbose: int) -> None:
    """
    Endorser: sign retail trade endorsements and payment-in-lieu approvals.

    \b
    Commands:
      keygen    Generate an authority keypair (PEM).
      pubkey    Print the configured authority public key.
      endorse   Endorse a request JSON document.
      approve   Approve a payment-in-lieu token JSON document.
      verify    Verify an endorsement against a public key.

    \b
    Quick start:
      endorser keygen endorser.pem
      endorser endorse --config endorser.yaml request.json
      endorser approve --config endorser.yaml token.json
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


cli.add_command(keygen_command)
cli.add_command(pubkey_command)
cli.add_command(endorse_command)
cli.add_command(approve_command)
cli.add_command(verify_command)
