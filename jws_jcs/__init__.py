"""
JWS/JCS - JSON objects signed with an embedded detached JWS.

This package verifies (and creates) signatures stored as a property of a JSON
object, where the signed payload is the rest of the object serialized with
the RFC 8785 JSON Canonicalization Scheme.
"""

import logging
from importlib.metadata import PackageNotFoundError, version

# Set up version
__version__ = "0.1.0"

try:
    __version__ = version("jws-jcs-verifier")
except PackageNotFoundError:
    pass

logging.getLogger(__name__).addHandler(logging.NullHandler())

from jws_jcs.config import VerifierConfig
from jws_jcs.core.canonicalization import (
    CanonicalizationError,
    canonical_json_dumps,
    canonicalize,
    verify_canonical_equivalence,
)
from jws_jcs.core.decoder import decode
from jws_jcs.core.errors import (
    AlgorithmKeyMismatch,
    DecodeError,
    InvalidHex,
    JwsJcsError,
    KeyFormatError,
    KeyMismatch,
    MalformedCertificate,
    ParseError,
    PropertyMissing,
    PropertyNotFoundError,
    UnsupportedAlgorithm,
)
from jws_jcs.core.json_model import parse, remove_property, serialize_pretty
from jws_jcs.core.keys import AsymmetricPublicKey, SymmetricSecret, resolve_verification_key
from jws_jcs.core.models import (
    AlgorithmFamily,
    AlgorithmSpec,
    CertificateInfo,
    FailureReason,
    ProtectedHeader,
    SignatureContainer,
    VerificationReport,
    VerificationResult,
    VerificationState,
)
from jws_jcs.core.signer import sign_document
from jws_jcs.core.verifier import validate, verify

__all__ = [
    # Core functionality
    "canonicalize",
    "canonical_json_dumps",
    "verify_canonical_equivalence",
    "parse",
    "remove_property",
    "serialize_pretty",
    "decode",
    "resolve_verification_key",
    "verify",
    "validate",
    "sign_document",
    "VerifierConfig",
    # Keys
    "AsymmetricPublicKey",
    "SymmetricSecret",
    # Models
    "AlgorithmFamily",
    "AlgorithmSpec",
    "CertificateInfo",
    "FailureReason",
    "ProtectedHeader",
    "SignatureContainer",
    "VerificationReport",
    "VerificationResult",
    "VerificationState",
    # Errors
    "JwsJcsError",
    "ParseError",
    "PropertyNotFoundError",
    "DecodeError",
    "PropertyMissing",
    "UnsupportedAlgorithm",
    "MalformedCertificate",
    "CanonicalizationError",
    "KeyFormatError",
    "InvalidHex",
    "AlgorithmKeyMismatch",
    "KeyMismatch",
]
