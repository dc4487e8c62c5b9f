"""
Detached JWS/JCS signature verification.

The signed payload is the JSON object with its signature property removed,
serialized with RFC 8785 canonicalization. The JWS signing input is
``header_raw + "." + BASE64URL(canonical payload)``.
"""

import logging
from typing import Any, Dict, Optional, Union

from jws_jcs.config import VerifierConfig
from jws_jcs.core.canonicalization import canonicalize
from jws_jcs.core.crypto import (
    b64url_encode,
    certificate_info,
    public_key_fingerprint,
    verify_signature,
)
from jws_jcs.core.decoder import decode
from jws_jcs.core.errors import JwsJcsError, KeyMismatch, ParseError
from jws_jcs.core.json_model import JsonValue, parse, remove_property
from jws_jcs.core.keys import (
    AsymmetricPublicKey,
    SymmetricSecret,
    VerificationKey,
    resolve_verification_key,
)
from jws_jcs.core.models import (
    AlgorithmFamily,
    AlgorithmSpec,
    FailureReason,
    SignatureContainer,
    VerificationReport,
    VerificationResult,
    VerificationState,
)

logger = logging.getLogger(__name__)


def signing_input(header_raw: str, canonical_payload: bytes) -> bytes:
    """Assemble the exact bytes covered by the signature."""
    return f"{header_raw}.{b64url_encode(canonical_payload)}".encode("ascii")


def _document_bytes(signed_json: Union[str, bytes]) -> bytes:
    if isinstance(signed_json, str):
        try:
            return signed_json.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ParseError("Input is not valid UTF-8 text") from e
    return bytes(signed_json)


def _key_matches_algorithm(algorithm: AlgorithmSpec, key: VerificationKey) -> bool:
    if algorithm.family is AlgorithmFamily.SYMMETRIC:
        return isinstance(key, SymmetricSecret)
    if algorithm.family is AlgorithmFamily.ASYMMETRIC:
        return (
            isinstance(key, AsymmetricPublicKey)
            and key.key_type is algorithm.key_type
            and (not algorithm.curves or key.curve in algorithm.curves)
        )
    raise ValueError(f"Unhandled algorithm family: {algorithm.family}")


def _primitive_key(key: VerificationKey) -> Any:
    if isinstance(key, SymmetricSecret):
        return key.secret
    if isinstance(key, AsymmetricPublicKey):
        return key.public_key
    raise ValueError(f"Unhandled key variant: {type(key).__name__}")


def _check_embedded_key(container: SignatureContainer, key: VerificationKey) -> None:
    if container.header_public_key is None:
        return
    supplied = public_key_fingerprint(_primitive_key(key))
    if supplied != public_key_fingerprint(container.header_public_key):
        raise KeyMismatch("Supplied public key differs from the one in the JWS header")


def verify(
    original_document: Dict[str, Any],
    container: SignatureContainer,
    key: VerificationKey,
    signature_label: str,
) -> VerificationResult:
    """
    Verify the detached signature of ``original_document``.

    The document is not modified; the signature property is removed from a
    copy before canonicalization.

    Returns:
        VerificationResult: ``ok`` on success, otherwise the failure reason.
        The canonical payload is included whenever it was computed.

    Raises:
        PropertyNotFoundError: The signature property is absent
        CanonicalizationError: The remainder cannot be canonicalized
    """
    algorithm = container.algorithm
    if not _key_matches_algorithm(algorithm, key):
        return VerificationResult(
            ok=False,
            reason=FailureReason.ALGORITHM_KEY_MISMATCH,
            message=f"{type(key).__name__} cannot verify {algorithm.name}",
        )

    payload = canonicalize(remove_property(original_document, signature_label))
    to_verify = signing_input(container.protected_header_raw, payload)
    logger.debug("Canonical payload is %d bytes", len(payload))

    try:
        _check_embedded_key(container, key)
    except KeyMismatch as e:
        return VerificationResult(
            ok=False,
            reason=e.reason,
            message=str(e),
            canonical_payload=payload,
            signing_input=to_verify,
        )

    if not verify_signature(algorithm, _primitive_key(key), to_verify, container.signature_bytes):
        return VerificationResult(
            ok=False,
            reason=FailureReason.SIGNATURE_MISMATCH,
            message="Signature does not match the canonicalized data",
            canonical_payload=payload,
            signing_input=to_verify,
        )
    return VerificationResult(
        ok=True,
        message="Signature successfully validated",
        canonical_payload=payload,
        signing_input=to_verify,
    )


def validate(
    signed_json: Union[str, bytes],
    validation_key: str,
    signature_label: str,
    config: Optional[VerifierConfig] = None,
) -> VerificationReport:
    """
    Validate a JSON object carrying an embedded detached JWS.

    Runs the full pipeline (parse, decode, resolve key, canonicalize, verify)
    and never raises for bad input: every failure is reported through the
    returned ``VerificationReport``.

    Args:
        signed_json: The signed JSON object as text or UTF-8 bytes
        validation_key: Hex secret, PEM public key or JWK
        signature_label: Name of the property holding the signature
        config: Optional limits and algorithm allow-list

    Returns:
        VerificationReport: outcome plus the artefacts derived on the way
    """
    config = config or VerifierConfig()
    logger.info("JSON signature verification entered")
    report: Dict[str, Any] = {
        "completed_state": VerificationState.RECEIVED,
        "signature_label": signature_label,
    }

    def failed(error: JwsJcsError) -> VerificationReport:
        logger.warning(
            "Verification failed after %s: %s", report["completed_state"].value, error
        )
        return VerificationReport(
            is_valid=False,
            state=VerificationState.FAILED,
            failure_reason=error.reason,
            message=str(error),
            **report,
        )

    try:
        raw = _document_bytes(signed_json)
        if len(raw) > config.max_document_bytes:
            raise ParseError(
                f"Document is {len(raw)} bytes, limit is {config.max_document_bytes}"
            )
        document: JsonValue = parse(raw, max_depth=config.max_nesting_depth)
        report["completed_state"] = VerificationState.PARSED

        container = decode(document, signature_label, config.allowed_algorithms)
        report["completed_state"] = VerificationState.DECODED
        report["algorithm"] = container.algorithm.name
        report["protected_header"] = container.protected_header.model_dump(exclude_none=True)
        if container.certificate_path is not None:
            report["certificate_path"] = [
                certificate_info(certificate) for certificate in container.certificate_path
            ]

        key = resolve_verification_key(validation_key, container.algorithm)
        report["completed_state"] = VerificationState.KEY_RESOLVED
        report["key_format"] = key.key_format

        result = verify(document, container, key, signature_label)
    except JwsJcsError as e:
        return failed(e)

    if result.canonical_payload is not None:
        report["completed_state"] = VerificationState.CANONICALIZED
        report["canonical_payload"] = result.canonical_payload
        report["signing_input"] = result.signing_input
        report["standard_jws"] = (
            f"{result.signing_input.decode('ascii')}.{container.signature_raw}"
        )

    if not result.ok:
        logger.warning("Verification failed: %s", result.message)
        return VerificationReport(
            is_valid=False,
            failure_reason=result.reason,
            message=result.message,
            state=VerificationState.FAILED,
            **report,
        )

    logger.info("Signature successfully validated (%s)", container.algorithm.name)
    return VerificationReport(
        is_valid=True,
        message=result.message,
        state=VerificationState.VERIFIED,
        **report,
    )
