"""
Cryptographic primitives for JWS/JCS.

Thin contracts over PyJWT's JWA implementations and ``cryptography``:
signature verification and creation, PEM/JWK public key import, and X.509
certificate decoding.
"""

import base64
import binascii
import hashlib
import logging
import re
from typing import Any, Dict, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm as CryptoUnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from jwt.algorithms import ECAlgorithm, OKPAlgorithm, RSAAlgorithm, get_default_algorithms
from jwt.exceptions import InvalidKeyError

from jws_jcs.core.models import AlgorithmSpec, CertificateInfo, KeyType

logger = logging.getLogger(__name__)

PublicKey = Union[
    rsa.RSAPublicKey,
    ec.EllipticCurvePublicKey,
    ed25519.Ed25519PublicKey,
    ed448.Ed448PublicKey,
]

# cryptography curve names to JOSE curve names
EC_CURVE_NAMES = {
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
}

_JWK_IMPORTERS = {
    "RSA": RSAAlgorithm,
    "EC": ECAlgorithm,
    "OKP": OKPAlgorithm,
}

_B64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")

_primitives = get_default_algorithms()


def b64url_encode(data: bytes) -> str:
    """Base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(data: str) -> bytes:
    """Strict base64url decoding (unpadded alphabet only)."""
    if not _B64URL_RE.match(data) or len(data) % 4 == 1:
        raise ValueError("Invalid base64url encoding")
    decoded = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    # Unused trailing bits must be zero
    if b64url_encode(decoded) != data:
        raise ValueError("Invalid base64url encoding: non-canonical trailing bits")
    return decoded


def _primitive(algorithm: AlgorithmSpec):
    try:
        return _primitives[algorithm.name]
    except KeyError:
        raise ValueError(f"No primitive available for {algorithm.name}")


def verify_signature(algorithm: AlgorithmSpec, key: Any, message: bytes, signature: bytes) -> bool:
    """Verify ``signature`` over ``message``.

    ``key`` is the raw secret for HMAC algorithms and a public key object
    otherwise. Returns False for a signature that does not verify.
    """
    return bool(_primitive(algorithm).verify(message, key, signature))


def create_signature(algorithm: AlgorithmSpec, key: Any, message: bytes) -> bytes:
    """Sign ``message`` (raw secret or private key object); ECDSA output is raw r||s."""
    return _primitive(algorithm).sign(message, key)


def decode_pem_public_key(pem: Union[str, bytes]) -> PublicKey:
    """Load a public key from PEM (SubjectPublicKeyInfo) text.

    Raises:
        ValueError: If the data is not a supported PEM public key
    """
    if isinstance(pem, str):
        pem = pem.encode("utf-8")
    try:
        key = serialization.load_pem_public_key(pem)
    except CryptoUnsupportedAlgorithm as e:
        raise ValueError(f"Unsupported public key algorithm: {e}") from e
    if not isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey,
                            ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
        raise ValueError(f"Unsupported public key type: {type(key).__name__}")
    return key


def decode_jwk_public_key(jwk: Dict[str, Any]) -> PublicKey:
    """Extract the public key from a JWK object.

    Private members, if present, are ignored.

    Raises:
        ValueError: If the JWK is malformed or of an unsupported ``kty``
    """
    if not isinstance(jwk, dict):
        raise ValueError("JWK must be a JSON object")
    importer = _JWK_IMPORTERS.get(jwk.get("kty"))
    if importer is None:
        raise ValueError(f"Unsupported JWK key type: {jwk.get('kty')!r}")
    try:
        key = importer.from_jwk(jwk)
    except (InvalidKeyError, KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid {jwk.get('kty')} JWK: {e}") from e
    if hasattr(key, "public_key"):
        key = key.public_key()
    if not isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey,
                            ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
        raise ValueError(f"Unsupported JWK key: {type(key).__name__}")
    logger.debug("Imported %s public key from JWK", jwk.get("kty"))
    return key


def decode_jwk_private_key(jwk: Dict[str, Any]) -> Any:
    """Load the private key of a JWK carrying the private member ``d``.

    Raises:
        ValueError: If the JWK is malformed, public only, or unsupported
    """
    if not isinstance(jwk, dict) or "d" not in jwk:
        raise ValueError("Private JWK must be an object with member 'd'")
    importer = _JWK_IMPORTERS.get(jwk.get("kty"))
    if importer is None:
        raise ValueError(f"Unsupported JWK key type: {jwk.get('kty')!r}")
    try:
        return importer.from_jwk(jwk)
    except (InvalidKeyError, KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid {jwk.get('kty')} JWK: {e}") from e


def public_key_to_jwk(key: PublicKey) -> Dict[str, Any]:
    """Export a public key as a JWK dictionary."""
    kty = key_type_of(key)
    return _JWK_IMPORTERS[kty.value].to_jwk(key, as_dict=True)


def key_type_of(key: Any) -> KeyType:
    """Map a public or private key object to its JWK key type."""
    if isinstance(key, (rsa.RSAPublicKey, rsa.RSAPrivateKey)):
        return KeyType.RSA
    if isinstance(key, (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey)):
        return KeyType.EC
    if isinstance(key, (ed25519.Ed25519PublicKey, ed25519.Ed25519PrivateKey,
                        ed448.Ed448PublicKey, ed448.Ed448PrivateKey)):
        return KeyType.OKP
    raise ValueError(f"Unsupported key object: {type(key).__name__}")


def curve_of(key: Any) -> str:
    """JOSE curve name of an EC or OKP key, empty string for RSA."""
    if isinstance(key, (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey)):
        return EC_CURVE_NAMES.get(key.curve.name, key.curve.name)
    if isinstance(key, (ed25519.Ed25519PublicKey, ed25519.Ed25519PrivateKey)):
        return "Ed25519"
    if isinstance(key, (ed448.Ed448PublicKey, ed448.Ed448PrivateKey)):
        return "Ed448"
    return ""


def public_key_fingerprint(key: PublicKey) -> bytes:
    """DER SubjectPublicKeyInfo of ``key``, used for key equality checks."""
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def decode_certificate(der_b64: str) -> x509.Certificate:
    """Decode one ``x5c`` entry (standard base64 of DER).

    Raises:
        ValueError: If the entry is not a decodable X.509 certificate
    """
    try:
        der = base64.b64decode(der_b64, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Certificate is not valid base64: {e}") from e
    return x509.load_der_x509_certificate(der)


def certificate_info(certificate: x509.Certificate) -> CertificateInfo:
    """Summarize a certificate for display. No trust decisions are made."""
    public_key = certificate.public_key()
    try:
        kty = key_type_of(public_key)
        curve = curve_of(public_key)
        key_description = f"{kty.value} {curve}".strip()
        if kty is KeyType.RSA:
            key_description = f"RSA {public_key.key_size} bits"
    except ValueError:
        key_description = type(public_key).__name__
    fingerprint = hashlib.sha256(
        certificate.public_bytes(serialization.Encoding.DER)
    ).hexdigest()
    return CertificateInfo(
        subject=certificate.subject.rfc4514_string(),
        issuer=certificate.issuer.rfc4514_string(),
        serial_number=format(certificate.serial_number, "x"),
        not_before=certificate.not_valid_before_utc,
        not_after=certificate.not_valid_after_utc,
        public_key_algorithm=key_description,
        sha256_fingerprint=fingerprint,
    )
