"""Error taxonomy for the verification pipeline.

Each error names the ``FailureReason`` it maps to so that ``validate()`` can
turn any raised error into a structured report.
"""

from jws_jcs.core.models import FailureReason


class JwsJcsError(ValueError):
    """Base class for all verification pipeline errors."""

    reason = FailureReason.DECODE_ERROR


class ParseError(JwsJcsError):
    """Malformed JSON input."""

    reason = FailureReason.PARSE_ERROR


class PropertyNotFoundError(JwsJcsError):
    """A property to be removed does not exist in the object."""

    reason = FailureReason.PROPERTY_MISSING


class DecodeError(JwsJcsError):
    """The signature property is structurally invalid."""

    reason = FailureReason.DECODE_ERROR


class PropertyMissing(DecodeError):
    """The signature property is absent from the top-level object."""

    reason = FailureReason.PROPERTY_MISSING


class UnsupportedAlgorithm(DecodeError):
    """The declared algorithm is not in the registry."""

    reason = FailureReason.UNSUPPORTED_ALGORITHM


class MalformedCertificate(DecodeError):
    """An entry of the embedded certificate path could not be decoded."""

    reason = FailureReason.MALFORMED_CERTIFICATE


class KeyFormatError(JwsJcsError):
    """Validation key material is unusable for the declared algorithm."""

    reason = FailureReason.KEY_FORMAT_ERROR


class InvalidHex(KeyFormatError):
    """A symmetric secret is not a valid hexadecimal string."""

    reason = FailureReason.INVALID_HEX


class AlgorithmKeyMismatch(JwsJcsError):
    """The key family does not match the algorithm family."""

    reason = FailureReason.ALGORITHM_KEY_MISMATCH


class KeyMismatch(JwsJcsError):
    """The supplied key differs from the key embedded in the header."""

    reason = FailureReason.KEY_MISMATCH
