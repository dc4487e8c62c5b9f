"""Core data models for detached JWS/JCS signature verification."""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AlgorithmFamily(str, Enum):
    """Closed set of signature algorithm families."""
    SYMMETRIC = "symmetric"
    ASYMMETRIC = "asymmetric"


class KeyType(str, Enum):
    """JWK key types an algorithm can be bound to."""
    OCT = "oct"
    RSA = "RSA"
    EC = "EC"
    OKP = "OKP"


class FailureReason(str, Enum):
    """Why a verification request did not end in success."""
    PARSE_ERROR = "parse_error"
    PROPERTY_MISSING = "property_missing"
    DECODE_ERROR = "decode_error"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    MALFORMED_CERTIFICATE = "malformed_certificate"
    CANONICALIZATION_ERROR = "canonicalization_error"
    INVALID_HEX = "invalid_hex"
    KEY_FORMAT_ERROR = "key_format_error"
    ALGORITHM_KEY_MISMATCH = "algorithm_key_mismatch"
    KEY_MISMATCH = "key_mismatch"
    SIGNATURE_MISMATCH = "signature_mismatch"


class VerificationState(str, Enum):
    """Pipeline states of a single verification request."""
    RECEIVED = "received"
    PARSED = "parsed"
    DECODED = "decoded"
    KEY_RESOLVED = "key_resolved"
    CANONICALIZED = "canonicalized"
    VERIFIED = "verified"
    FAILED = "failed"


class AlgorithmSpec(BaseModel):
    """A supported JWA signature algorithm."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="JWA identifier, e.g. 'ES256'.")
    family: AlgorithmFamily
    key_type: KeyType
    digest_bits: Optional[int] = Field(
        None,
        description="Digest size in bits (None for EdDSA, where the curve fixes it)."
    )
    curves: Tuple[str, ...] = Field(
        (),
        description="Permitted curve names for EC/OKP keys."
    )

    @property
    def is_symmetric(self) -> bool:
        return self.family is AlgorithmFamily.SYMMETRIC


class ProtectedHeader(BaseModel):
    """Decoded JWS protected header.

    Schema version 1 recognizes ``alg``, ``kid``, ``typ``, ``cty``, ``jwk`` and
    ``x5c``. Unknown members are retained but carry no meaning. ``crit`` and
    ``b64`` are refused since no extension is understood.
    """
    model_config = ConfigDict(extra="allow")

    SCHEMA_VERSION: ClassVar[int] = 1

    alg: str = Field(..., min_length=1, description="Signature algorithm identifier.")
    kid: Optional[str] = Field(None, description="Key identifier hint.")
    typ: Optional[str] = None
    cty: Optional[str] = None
    jwk: Optional[Dict[str, Any]] = Field(
        None,
        description="Embedded public key in JWK form."
    )
    x5c: Optional[List[str]] = Field(
        None,
        min_length=1,
        description="Certificate path, leaf first, standard base64 DER."
    )

    @field_validator("x5c")
    @classmethod
    def validate_x5c_entries(cls, v):
        if v is not None and any(not entry for entry in v):
            raise ValueError("x5c entries must be non-empty strings")
        return v

    def unknown_members(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class CertificateInfo(BaseModel):
    """Display-oriented summary of an X.509 certificate."""
    subject: str
    issuer: str
    serial_number: str = Field(..., description="Serial number in hexadecimal.")
    not_before: datetime
    not_after: datetime
    public_key_algorithm: str
    sha256_fingerprint: str

    def __str__(self) -> str:
        return (
            f"Issuer: {self.issuer}\n"
            f"Serial number: {self.serial_number}\n"
            f"Subject: {self.subject}\n"
            f"Valid from: {self.not_before.isoformat()}\n"
            f"Valid to: {self.not_after.isoformat()}\n"
            f"Public key: {self.public_key_algorithm}\n"
            f"SHA256 fingerprint: {self.sha256_fingerprint}"
        )


class SignatureContainer(BaseModel):
    """Decoded content of the signature property."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    protected_header_raw: str = Field(
        ...,
        description="Base64url header segment exactly as it appeared."
    )
    protected_header: ProtectedHeader
    algorithm: AlgorithmSpec
    signature_raw: str
    signature_bytes: bytes
    certificate_path: Optional[List[Any]] = Field(
        None,
        description="cryptography x509.Certificate objects, leaf first."
    )
    header_public_key: Optional[Any] = Field(
        None,
        description="Public key embedded through 'jwk' or the leaf of 'x5c'."
    )


class VerificationResult(BaseModel):
    """Outcome of the cryptographic verification step."""
    ok: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    canonical_payload: Optional[bytes] = None
    signing_input: Optional[bytes] = None


class VerificationReport(BaseModel):
    """Everything a presentation layer needs to render a validation request."""
    is_valid: bool
    state: VerificationState = Field(
        ...,
        description="Terminal state: VERIFIED or FAILED."
    )
    completed_state: VerificationState = Field(
        ...,
        description="Last pipeline stage completed before the terminal state."
    )
    failure_reason: Optional[FailureReason] = None
    message: str = ""
    signature_label: str
    algorithm: Optional[str] = None
    key_format: Optional[str] = Field(
        None,
        description="'hex', 'jwk' or 'pem' depending on the validation key material."
    )
    header_schema_version: int = ProtectedHeader.SCHEMA_VERSION
    protected_header: Optional[Dict[str, Any]] = None
    canonical_payload: Optional[bytes] = None
    signing_input: Optional[bytes] = None
    standard_jws: Optional[str] = Field(
        None,
        description="The same signature expressed as a non-detached compact JWS."
    )
    certificate_path: Optional[List[CertificateInfo]] = None

    def to_display_dict(self) -> Dict[str, Any]:
        """JSON-friendly view with byte fields decoded as UTF-8/ASCII."""
        data = self.model_dump(mode="json", exclude={"canonical_payload", "signing_input"})
        data["canonical_payload"] = (
            self.canonical_payload.decode("utf-8") if self.canonical_payload is not None else None
        )
        data["signing_input"] = (
            self.signing_input.decode("ascii") if self.signing_input is not None else None
        )
        return data
