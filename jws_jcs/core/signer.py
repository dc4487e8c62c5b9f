"""
Creation of JSON objects with an embedded detached JWS.

Counterpart of the verifier: the object (without the signature property) is
canonicalized, signed, and the compact detached JWS is added under the
signature label.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from jws_jcs.core.algorithms import get_algorithm
from jws_jcs.core.canonicalization import canonicalize
from jws_jcs.core.crypto import (
    b64url_encode,
    create_signature,
    curve_of,
    decode_jwk_private_key,
    key_type_of,
    public_key_to_jwk,
)
from jws_jcs.core.errors import KeyFormatError, ParseError
from jws_jcs.core.json_model import parse
from jws_jcs.core.keys import decode_hex_secret, looks_like_jwk
from jws_jcs.core.models import AlgorithmFamily, AlgorithmSpec
from jws_jcs.core.verifier import signing_input

logger = logging.getLogger(__name__)


def load_signing_key(material: str, algorithm: AlgorithmSpec) -> Any:
    """Load a hex secret or a PEM/JWK private key suitable for ``algorithm``."""
    if algorithm.family is AlgorithmFamily.SYMMETRIC:
        return decode_hex_secret(material)

    if looks_like_jwk(material):
        try:
            jwk = parse(material)
        except ParseError as e:
            raise KeyFormatError(f"JWK is not valid JSON: {e}") from e
        try:
            private_key = decode_jwk_private_key(jwk)
        except ValueError as e:
            raise KeyFormatError(str(e)) from e
    else:
        try:
            private_key = serialization.load_pem_private_key(
                material.strip().encode("utf-8"), password=None
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyFormatError(f"Not a PEM encoded private key: {e}") from e

    try:
        key_type = key_type_of(private_key)
    except ValueError as e:
        raise KeyFormatError(str(e)) from e
    if key_type is not algorithm.key_type:
        raise KeyFormatError(
            f"{algorithm.name} requires a {algorithm.key_type.value} key, got {key_type.value}"
        )
    if algorithm.curves and curve_of(private_key) not in algorithm.curves:
        raise KeyFormatError(
            f"{algorithm.name} requires curve {'/'.join(algorithm.curves)}"
        )
    return private_key


def sign_document(
    document: Dict[str, Any],
    signing_key: str,
    algorithm: str,
    signature_label: str,
    kid: Optional[str] = None,
    embed_jwk: bool = False,
    certificate_path: Optional[List[x509.Certificate]] = None,
) -> Dict[str, Any]:
    """
    Sign ``document`` and return a copy with the detached JWS added.

    Args:
        document: JSON object to sign (must not already hold ``signature_label``)
        signing_key: Hex secret, PEM private key or private JWK
        algorithm: JWA identifier
        signature_label: Property name receiving the signature
        kid: Optional key identifier placed in the header
        embed_jwk: Put the public key in the header as ``jwk``
        certificate_path: Certificates (leaf first) to put in ``x5c``

    Returns:
        A new dict: the original properties followed by the signature
    """
    spec = get_algorithm(algorithm)
    if not isinstance(document, dict):
        raise ValueError("Only JSON objects can be signed")
    if signature_label in document:
        raise ValueError(f"Document already has a {signature_label!r} property")
    key = load_signing_key(signing_key, spec)

    header: Dict[str, Any] = {"alg": spec.name}
    if kid is not None:
        header["kid"] = kid
    if not spec.is_symmetric:
        if embed_jwk and certificate_path:
            raise ValueError("Use either an embedded JWK or a certificate path, not both")
        if embed_jwk:
            header["jwk"] = public_key_to_jwk(key.public_key())
        if certificate_path:
            header["x5c"] = [
                base64.b64encode(cert.public_bytes(serialization.Encoding.DER)).decode("ascii")
                for cert in certificate_path
            ]

    header_raw = b64url_encode(canonicalize(header))
    payload = canonicalize(document)
    signature = create_signature(spec, key, signing_input(header_raw, payload))
    logger.debug("Signed %d byte payload with %s", len(payload), spec.name)

    signed = dict(document)
    signed[signature_label] = f"{header_raw}..{b64url_encode(signature)}"
    return signed
