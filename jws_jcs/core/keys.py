"""
Validation key resolution.

Turns caller-supplied key material into a typed verification key that
matches the family and key type of the declared algorithm:

* symmetric algorithms take a hexadecimal secret;
* asymmetric algorithms take a JWK object when the first non-whitespace
  character is ``{`` and PEM text otherwise.
"""

import logging
import re
from dataclasses import dataclass
from typing import ClassVar, Union

from jws_jcs.core.crypto import (
    PublicKey,
    curve_of,
    decode_jwk_public_key,
    decode_pem_public_key,
    key_type_of,
)
from jws_jcs.core.errors import AlgorithmKeyMismatch, InvalidHex, KeyFormatError, ParseError
from jws_jcs.core.json_model import parse
from jws_jcs.core.models import AlgorithmFamily, AlgorithmSpec, KeyType

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(frozen=True)
class SymmetricSecret:
    """Raw HMAC secret."""

    secret: bytes
    family: ClassVar[AlgorithmFamily] = AlgorithmFamily.SYMMETRIC
    key_format: ClassVar[str] = "hex"

    def __repr__(self) -> str:
        return f"SymmetricSecret(<{len(self.secret)} bytes>)"


@dataclass(frozen=True)
class AsymmetricPublicKey:
    """Public key handle tagged with its JWK key type."""

    public_key: PublicKey
    key_type: KeyType
    curve: str = ""
    key_format: str = "pem"
    family: ClassVar[AlgorithmFamily] = AlgorithmFamily.ASYMMETRIC

    @classmethod
    def from_key(cls, public_key: PublicKey, key_format: str) -> "AsymmetricPublicKey":
        return cls(
            public_key=public_key,
            key_type=key_type_of(public_key),
            curve=curve_of(public_key),
            key_format=key_format,
        )


VerificationKey = Union[SymmetricSecret, AsymmetricPublicKey]


def decode_hex_secret(material: str) -> bytes:
    """Decode a hexadecimal secret.

    Raises:
        InvalidHex: On empty input, odd length or non-hex characters
    """
    value = material.strip()
    if not value:
        raise InvalidHex("Secret key is empty")
    if len(value) % 2:
        raise InvalidHex("Secret key has an odd number of hex digits")
    if not _HEX_RE.match(value):
        raise InvalidHex("Secret key contains non-hexadecimal characters")
    return bytes.fromhex(value)


def looks_like_jwk(material: str) -> bool:
    """Leading-character heuristic: JWK material starts with ``{``."""
    return material.lstrip().startswith("{")


def _check_key_type(key: AsymmetricPublicKey, algorithm: AlgorithmSpec) -> None:
    if key.key_type is not algorithm.key_type:
        raise KeyFormatError(
            f"{algorithm.name} requires a {algorithm.key_type.value} key, "
            f"got {key.key_type.value}"
        )
    if algorithm.curves and key.curve not in algorithm.curves:
        raise KeyFormatError(
            f"{algorithm.name} requires curve {'/'.join(algorithm.curves)}, got {key.curve}"
        )


def _resolve_public_key(material: str, algorithm: AlgorithmSpec) -> AsymmetricPublicKey:
    if looks_like_jwk(material):
        try:
            jwk = parse(material)
        except ParseError as e:
            raise KeyFormatError(f"JWK is not valid JSON: {e}") from e
        if not isinstance(jwk, dict):
            raise KeyFormatError("JWK must be a JSON object")
        if jwk.get("kty") == KeyType.OCT.value:
            raise AlgorithmKeyMismatch(
                f"Symmetric JWK supplied for asymmetric algorithm {algorithm.name}"
            )
        try:
            public_key = decode_jwk_public_key(jwk)
        except ValueError as e:
            raise KeyFormatError(str(e)) from e
        key = AsymmetricPublicKey.from_key(public_key, "jwk")
    else:
        if _HEX_RE.match(material.strip()):
            raise AlgorithmKeyMismatch(
                f"Hexadecimal secret supplied for asymmetric algorithm {algorithm.name}"
            )
        try:
            public_key = decode_pem_public_key(material.strip())
        except (ValueError, TypeError) as e:
            raise KeyFormatError(f"Not a PEM encoded public key: {e}") from e
        key = AsymmetricPublicKey.from_key(public_key, "pem")
    _check_key_type(key, algorithm)
    return key


def resolve_verification_key(material: str, algorithm: AlgorithmSpec) -> VerificationKey:
    """
    Resolve validation key material for ``algorithm``.

    Args:
        material: Hex secret, PEM public key or JWK text
        algorithm: The algorithm declared by the signature

    Returns:
        A ``SymmetricSecret`` or ``AsymmetricPublicKey``

    Raises:
        InvalidHex: Bad hexadecimal secret
        KeyFormatError: Unusable key or key of the wrong type/curve
        AlgorithmKeyMismatch: Key material of the other algorithm family
    """
    if algorithm.family is AlgorithmFamily.SYMMETRIC:
        key: VerificationKey = SymmetricSecret(decode_hex_secret(material))
    elif algorithm.family is AlgorithmFamily.ASYMMETRIC:
        key = _resolve_public_key(material, algorithm)
    else:
        raise ValueError(f"Unhandled algorithm family: {algorithm.family}")
    logger.debug("Resolved %s key for %s", key.key_format, algorithm.name)
    return key
