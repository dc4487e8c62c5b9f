"""Shared fixtures: key pairs, certificates and small JWS helpers."""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.x509.oid import NameOID

HMAC_KEY_HEX = "00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff"


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def detached_jws(header: dict, signature: bytes = b"\x01\x02\x03\x04") -> str:
    """Build a detached JWS string from a header dict (no real signature)."""
    return f"{b64url(json.dumps(header).encode('utf-8'))}..{b64url(signature)}"


def private_pem(key) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def public_pem(key) -> str:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def _certificate(subject: str, issuer: str, public_key, signing_key, is_ca: bool) -> x509.Certificate:
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, subject)]))
        .issuer_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, issuer)]))
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .sign(signing_key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec384_key():
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ed25519_key():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def certificate_chain(ec_key):
    """Leaf certificate for ``ec_key`` followed by its issuing CA."""
    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca = _certificate("Test Root CA", "Test Root CA", ca_key.public_key(), ca_key, True)
    leaf = _certificate("Test Signer", "Test Root CA", ec_key.public_key(), ca_key, False)
    return [leaf, ca]
