"""
Core functionality for JSON objects signed with an embedded detached JWS.

This package contains the strict JSON model, RFC 8785 canonicalization, the
signature container decoder, key resolution and the verification pipeline.
"""

from .canonicalization import CanonicalizationError, canonicalize
from .decoder import decode
from .json_model import parse, remove_property, serialize_pretty
from .keys import AsymmetricPublicKey, SymmetricSecret, resolve_verification_key
from .verifier import validate, verify

__all__ = [
    'CanonicalizationError',
    'canonicalize',
    'decode',
    'parse',
    'remove_property',
    'serialize_pretty',
    'AsymmetricPublicKey',
    'SymmetricSecret',
    'resolve_verification_key',
    'validate',
    'verify',
]
