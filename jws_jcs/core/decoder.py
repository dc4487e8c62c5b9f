"""
Decoding of the detached JWS stored in a JSON object's signature property.

The property value is a compact JWS with an empty payload segment::

    BASE64URL(protected header) ".." BASE64URL(signature)
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from jws_jcs.core.algorithms import get_algorithm
from jws_jcs.core.crypto import b64url_decode, decode_certificate, decode_jwk_public_key
from jws_jcs.core.errors import DecodeError, MalformedCertificate, ParseError, PropertyMissing
from jws_jcs.core.json_model import parse
from jws_jcs.core.models import ProtectedHeader, SignatureContainer

logger = logging.getLogger(__name__)

_REFUSED_HEADER_MEMBERS = ("crit", "b64")


def _decode_header(header_raw: str) -> ProtectedHeader:
    try:
        header_json = b64url_decode(header_raw)
    except ValueError as e:
        raise DecodeError(f"Protected header is not base64url: {e}") from e
    try:
        header = parse(header_json)
    except ParseError as e:
        raise DecodeError(f"Protected header is not valid JSON: {e}") from e
    if not isinstance(header, dict):
        raise DecodeError("Protected header must be a JSON object")
    for member in _REFUSED_HEADER_MEMBERS:
        if member in header:
            raise DecodeError(f"Unsupported header member: {member!r}")
    try:
        return ProtectedHeader.model_validate(header)
    except ValidationError as e:
        raise DecodeError(f"Invalid protected header: {e}") from e


def _decode_certificate_path(entries: List[str]) -> List[Any]:
    path = []
    for index, entry in enumerate(entries):
        try:
            path.append(decode_certificate(entry))
        except ValueError as e:
            raise MalformedCertificate(f"Certificate {index} in x5c is malformed: {e}") from e
    return path


def decode(
    document: Dict[str, Any],
    signature_label: str,
    allowed_algorithms: Optional[Iterable[str]] = None,
) -> SignatureContainer:
    """
    Extract and validate the signature container of ``document``.

    The document is not modified.

    Args:
        document: Parsed top-level JSON object
        signature_label: Name of the property holding the JWS
        allowed_algorithms: Optional allow-list narrowing the registry

    Returns:
        SignatureContainer: header, algorithm, signature and certificate path

    Raises:
        PropertyMissing: The signature property is absent
        DecodeError: The property value is not a valid detached JWS
        UnsupportedAlgorithm: The header declares an unknown algorithm
        MalformedCertificate: An ``x5c`` entry cannot be decoded
    """
    if not isinstance(document, dict):
        raise DecodeError("Signed data must be a JSON object")
    if not signature_label or signature_label not in document:
        raise PropertyMissing(f"Signature property not found: {signature_label!r}")

    jws = document[signature_label]
    if not isinstance(jws, str):
        raise DecodeError(
            f"Signature property must be a string, got {type(jws).__name__}"
        )
    segments = jws.split(".")
    if len(segments) != 3:
        raise DecodeError("Signature must have three '.'-separated segments")
    header_raw, payload, signature_raw = segments
    if payload:
        raise DecodeError("Signature must use a detached (empty) payload")
    if not header_raw or not signature_raw:
        raise DecodeError("Signature has an empty header or signature segment")

    header = _decode_header(header_raw)
    algorithm = get_algorithm(header.alg, allowed_algorithms)

    try:
        signature_bytes = b64url_decode(signature_raw)
    except ValueError as e:
        raise DecodeError(f"Signature value is not base64url: {e}") from e

    if algorithm.is_symmetric and (header.jwk is not None or header.x5c is not None):
        raise DecodeError(f"{algorithm.name} must not carry 'jwk' or 'x5c'")
    if header.jwk is not None and header.x5c is not None:
        raise DecodeError("Header must not carry both 'jwk' and 'x5c'")

    certificate_path = None
    header_public_key = None
    if header.x5c is not None:
        certificate_path = _decode_certificate_path(header.x5c)
        header_public_key = certificate_path[0].public_key()
    elif header.jwk is not None:
        try:
            header_public_key = decode_jwk_public_key(header.jwk)
        except ValueError as e:
            raise DecodeError(f"Embedded 'jwk' is invalid: {e}") from e

    logger.debug(
        "Decoded %s signature (kid=%s, certificates=%d)",
        algorithm.name,
        header.kid,
        len(certificate_path or ()),
    )
    return SignatureContainer(
        protected_header_raw=header_raw,
        protected_header=header,
        algorithm=algorithm,
        signature_raw=signature_raw,
        signature_bytes=signature_bytes,
        certificate_path=certificate_path,
        header_public_key=header_public_key,
    )
