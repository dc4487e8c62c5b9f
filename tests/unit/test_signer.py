"""Unit tests for creating signed documents."""

import json

import pytest
from conftest import HMAC_KEY_HEX, private_pem, public_pem
from cryptography.hazmat.primitives.asymmetric import ec

from jws_jcs.core.algorithms import get_algorithm
from jws_jcs.core.crypto import b64url_decode
from jws_jcs.core.errors import InvalidHex, KeyFormatError, UnsupportedAlgorithm
from jws_jcs.core.signer import load_signing_key, sign_document
from jws_jcs.core.verifier import validate


def _header(signed: dict, label: str = "signature") -> dict:
    return json.loads(b64url_decode(signed[label].split(".")[0]))


def test_sign_hmac() -> None:
    document = {"z": 1, "a": [True, None]}
    signed = sign_document(document, HMAC_KEY_HEX, "HS384", "signature", kid="hmac-1")

    assert list(signed) == ["z", "a", "signature"]
    assert "signature" not in document
    assert signed["signature"].count(".") == 2
    assert ".." in signed["signature"]
    assert _header(signed) == {"alg": "HS384", "kid": "hmac-1"}
    assert validate(json.dumps(signed), HMAC_KEY_HEX, "signature").is_valid


def test_header_is_canonical(rsa_key) -> None:
    signed = sign_document({"a": 1}, private_pem(rsa_key), "RS256", "signature", kid="k")
    header_json = b64url_decode(signed["signature"].split(".")[0])
    assert header_json == b'{"alg":"RS256","kid":"k"}'


def test_embed_jwk(ec_key) -> None:
    signed = sign_document({"a": 1}, private_pem(ec_key), "ES256", "signature", embed_jwk=True)
    jwk = _header(signed)["jwk"]
    assert jwk["kty"] == "EC"
    assert jwk["crv"] == "P-256"
    assert "d" not in jwk


def test_embed_jwk_ignored_for_hmac() -> None:
    signed = sign_document({"a": 1}, HMAC_KEY_HEX, "HS256", "signature", embed_jwk=True)
    assert "jwk" not in _header(signed)


def test_certificate_path(ec_key, certificate_chain) -> None:
    signed = sign_document(
        {"a": 1}, private_pem(ec_key), "ES256", "signature", certificate_path=certificate_chain
    )
    assert len(_header(signed)["x5c"]) == 2


def test_jwk_and_certificates_are_exclusive(ec_key, certificate_chain) -> None:
    with pytest.raises(ValueError, match="not both"):
        sign_document(
            {"a": 1}, private_pem(ec_key), "ES256", "signature",
            embed_jwk=True, certificate_path=certificate_chain,
        )


def test_existing_label_rejected() -> None:
    with pytest.raises(ValueError, match="already"):
        sign_document({"signature": "x"}, HMAC_KEY_HEX, "HS256", "signature")


def test_non_object_rejected() -> None:
    with pytest.raises(ValueError, match="JSON objects"):
        sign_document([1, 2], HMAC_KEY_HEX, "HS256", "signature")


def test_unknown_algorithm() -> None:
    with pytest.raises(UnsupportedAlgorithm):
        sign_document({"a": 1}, HMAC_KEY_HEX, "HS1024", "signature")


def test_load_signing_key_errors(rsa_key, ec384_key) -> None:
    with pytest.raises(InvalidHex):
        load_signing_key("nothex", get_algorithm("HS256"))
    with pytest.raises(KeyFormatError, match="requires a EC key"):
        load_signing_key(private_pem(rsa_key), get_algorithm("ES256"))
    with pytest.raises(KeyFormatError, match="curve"):
        load_signing_key(private_pem(ec384_key), get_algorithm("ES512"))
    with pytest.raises(KeyFormatError):
        load_signing_key(public_pem(rsa_key), get_algorithm("RS256"))
    with pytest.raises(KeyFormatError):
        load_signing_key('{"kty": "EC", "crv": "P-256"}', get_algorithm("ES256"))


def test_signatures_differ_per_key() -> None:
    first = sign_document({"a": 1}, private_pem(ec.generate_private_key(ec.SECP256R1())), "ES256", "s")
    second = sign_document({"a": 1}, private_pem(ec.generate_private_key(ec.SECP256R1())), "ES256", "s")
    assert first["s"] != second["s"]
