"""
JWS/JCS Command Line Interface

Provides commands for validating, canonicalizing and signing JSON objects
with an embedded detached JWS.
"""

import json
import logging
import sys
from typing import List, Optional

import click
from cryptography import x509
from pydantic import ValidationError

from jws_jcs.config import VerifierConfig
from jws_jcs.core.algorithms import ALGORITHMS
from jws_jcs.core.canonicalization import canonicalize
from jws_jcs.core.errors import JwsJcsError
from jws_jcs.core.json_model import parse, serialize_pretty
from jws_jcs.core.signer import sign_document
from jws_jcs.core.verifier import validate

# Configure click
CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

DEFAULT_SIGNATURE_LABEL = "signature"

label_option = click.option(
    '--label', '-l',
    default=DEFAULT_SIGNATURE_LABEL,
    show_default=True,
    envvar='JWS_JCS_SIGNATURE_LABEL',
    help='Name of the signature property',
)


# Helper functions
def read_text(file_path: str) -> str:
    """Read a UTF-8 text file, '-' meaning standard input."""
    try:
        with click.open_file(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error reading {file_path}: {e}", err=True)
        sys.exit(1)


def load_config() -> VerifierConfig:
    """Load the verifier configuration from the environment."""
    try:
        return VerifierConfig.from_env()
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)


def load_certificates(paths: List[str]) -> List[x509.Certificate]:
    """Load PEM certificates, leaf first."""
    certificates = []
    for path in paths:
        try:
            with open(path, 'rb') as f:
                certificates.append(x509.load_pem_x509_certificate(f.read()))
        except (OSError, ValueError) as e:
            click.echo(f"Error loading certificate {path}: {e}", err=True)
            sys.exit(1)
    return certificates


# Command group
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option('--verbose', '-v', count=True, help='Increase log output (-v info, -vv debug)')
def cli(verbose: int):
    """JWS/JCS - JSON objects signed with an embedded detached JWS."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO if verbose == 1 else logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command('validate')
@click.argument('signed_file')
@click.option('--key', '-k', 'key_file', required=True,
              help='Validation key: hex secret, PEM public key or JWK')
@label_option
@click.option('--json', 'as_json', is_flag=True, help='Print the full report as JSON')
def validate_command(signed_file: str, key_file: str, label: str, as_json: bool):
    """Validate the embedded signature of a JSON object."""
    signed_json = read_text(signed_file)
    validation_key = read_text(key_file).strip()
    report = validate(signed_json, validation_key, label, config=load_config())

    if as_json:
        click.echo(json.dumps(report.to_display_dict(), indent=2, ensure_ascii=False))
    elif report.is_valid:
        click.echo("✅ Signature successfully validated")
        click.echo(f"Algorithm: {report.algorithm}")
        click.echo(f"Validation key format: {report.key_format}")
        click.echo("\nDecoded JWS header:")
        click.echo(json.dumps(report.protected_header, indent=2))
        click.echo("\nCanonical version of the JSON data:")
        click.echo(report.canonical_payload.decode('utf-8'))
        for index, info in enumerate(report.certificate_path or []):
            click.echo(f"\nCertificate {index}:")
            click.echo(str(info))
        click.echo("\nSame object expressed as a standard JWS:")
        click.echo(report.standard_jws)
    else:
        click.echo(f"❌ {report.failure_reason.value}: {report.message}", err=True)

    sys.exit(0 if report.is_valid else 1)


@cli.command('canonicalize')
@click.argument('json_file')
@click.option('--pretty', is_flag=True, help='Print in document order with indentation instead')
def canonicalize_command(json_file: str, pretty: bool):
    """Print the RFC 8785 canonical form of a JSON document."""
    try:
        document = parse(read_text(json_file))
        if pretty:
            click.echo(serialize_pretty(document))
        else:
            click.echo(canonicalize(document).decode('utf-8'))
    except JwsJcsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command('sign')
@click.argument('json_file')
@click.option('--key', '-k', 'key_file', required=True,
              help='Signing key: hex secret, PEM private key or private JWK')
@click.option('--algorithm', '-a', required=True, type=click.Choice(sorted(ALGORITHMS)),
              help='Signature algorithm')
@label_option
@click.option('--kid', help='Key ID placed in the JWS header')
@click.option('--embed-jwk', is_flag=True, help='Embed the public key in the header')
@click.option('--certificate', '-c', 'certificates', multiple=True,
              help='PEM certificate to embed in x5c (repeat, leaf first)')
@click.option('--output', '-o', help='Output file (default: standard output)')
def sign_command(json_file: str, key_file: str, algorithm: str, label: str,
                 kid: Optional[str], embed_jwk: bool, certificates: List[str],
                 output: Optional[str]):
    """Sign a JSON object and embed the detached JWS."""
    try:
        document = parse(read_text(json_file))
        signed = sign_document(
            document,
            read_text(key_file).strip(),
            algorithm,
            label,
            kid=kid,
            embed_jwk=embed_jwk,
            certificate_path=load_certificates(list(certificates)) or None,
        )
    except ValueError as e:
        click.echo(f"Error signing document: {e}", err=True)
        sys.exit(1)

    text = serialize_pretty(signed)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
        click.echo(f"Signed document saved to {output}")
    else:
        click.echo(text)


# Main entry point
if __name__ == '__main__':
    cli()
