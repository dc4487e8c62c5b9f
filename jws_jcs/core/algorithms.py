"""
Closed registry of supported JWA signature algorithms.
"""

from typing import Dict, Iterable, Optional

from jws_jcs.core.errors import UnsupportedAlgorithm
from jws_jcs.core.models import AlgorithmFamily, AlgorithmSpec, KeyType


def _hmac(bits: int) -> AlgorithmSpec:
    return AlgorithmSpec(
        name=f"HS{bits}",
        family=AlgorithmFamily.SYMMETRIC,
        key_type=KeyType.OCT,
        digest_bits=bits,
    )


def _rsa(prefix: str, bits: int) -> AlgorithmSpec:
    return AlgorithmSpec(
        name=f"{prefix}{bits}",
        family=AlgorithmFamily.ASYMMETRIC,
        key_type=KeyType.RSA,
        digest_bits=bits,
    )


def _ecdsa(bits: int, curve: str) -> AlgorithmSpec:
    return AlgorithmSpec(
        name=f"ES{bits}",
        family=AlgorithmFamily.ASYMMETRIC,
        key_type=KeyType.EC,
        digest_bits=bits,
        curves=(curve,),
    )


ALGORITHMS: Dict[str, AlgorithmSpec] = {
    spec.name: spec
    for spec in (
        _hmac(256),
        _hmac(384),
        _hmac(512),
        _rsa("RS", 256),
        _rsa("RS", 384),
        _rsa("RS", 512),
        _rsa("PS", 256),
        _rsa("PS", 384),
        _rsa("PS", 512),
        _ecdsa(256, "P-256"),
        _ecdsa(384, "P-384"),
        _ecdsa(512, "P-521"),
        AlgorithmSpec(
            name="EdDSA",
            family=AlgorithmFamily.ASYMMETRIC,
            key_type=KeyType.OKP,
            curves=("Ed25519", "Ed448"),
        ),
    )
}


def get_algorithm(name: str, allowed: Optional[Iterable[str]] = None) -> AlgorithmSpec:
    """Look up ``name`` in the registry, optionally narrowed to ``allowed``.

    Raises:
        UnsupportedAlgorithm: For unknown or disallowed identifiers
    """
    spec = ALGORITHMS.get(name)
    if spec is None:
        raise UnsupportedAlgorithm(f"Unsupported algorithm: {name!r}")
    if allowed is not None and name not in set(allowed):
        raise UnsupportedAlgorithm(f"Algorithm not permitted by configuration: {name!r}")
    return spec
