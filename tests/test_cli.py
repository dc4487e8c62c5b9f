"""Tests for the jws-jcs command line interface."""

import json

import pytest
from click.testing import CliRunner
from conftest import HMAC_KEY_HEX, private_pem, public_pem

from jws_jcs.cli.main import cli
from jws_jcs.core.signer import sign_document


@pytest.fixture
def runner(monkeypatch):
    for name in ("SIGNATURE_LABEL", "MAX_DOCUMENT_BYTES", "MAX_NESTING_DEPTH", "ALLOWED_ALGORITHMS"):
        monkeypatch.delenv(f"JWS_JCS_{name}", raising=False)
    return CliRunner()


@pytest.fixture
def hmac_files(tmp_path):
    signed = sign_document({"message": "hi", "n": 1.50}, HMAC_KEY_HEX, "HS256", "signature")
    signed_file = tmp_path / "signed.json"
    signed_file.write_text(json.dumps(signed), encoding="utf-8")
    key_file = tmp_path / "secret.hex"
    key_file.write_text(HMAC_KEY_HEX + "\n", encoding="utf-8")
    return signed_file, key_file


def test_validate_success(runner, hmac_files) -> None:
    signed_file, key_file = hmac_files
    result = runner.invoke(cli, ["validate", str(signed_file), "--key", str(key_file)])

    assert result.exit_code == 0, result.output
    assert "Signature successfully validated" in result.output
    assert "Algorithm: HS256" in result.output
    assert '{"message":"hi","n":1.5}' in result.output


def test_validate_json_report(runner, hmac_files) -> None:
    signed_file, key_file = hmac_files
    result = runner.invoke(cli, ["validate", str(signed_file), "-k", str(key_file), "--json"])

    assert result.exit_code == 0
    report = json.loads(result.output)
    assert report["is_valid"] is True
    assert report["key_format"] == "hex"


def test_validate_failure(runner, hmac_files, tmp_path) -> None:
    signed_file, _ = hmac_files
    wrong_key = tmp_path / "wrong.hex"
    wrong_key.write_text("ab" * 32, encoding="utf-8")

    result = runner.invoke(cli, ["validate", str(signed_file), "--key", str(wrong_key)])
    assert result.exit_code == 1
    assert "signature_mismatch" in result.output


def test_validate_label_from_environment(runner, hmac_files) -> None:
    signed_file, key_file = hmac_files
    result = runner.invoke(
        cli,
        ["validate", str(signed_file), "--key", str(key_file), "--json"],
        env={"JWS_JCS_SIGNATURE_LABEL": "proof"},
    )
    assert result.exit_code == 1
    assert json.loads(result.output)["failure_reason"] == "property_missing"


def test_validate_missing_file(runner, tmp_path) -> None:
    result = runner.invoke(cli, ["validate", str(tmp_path / "nope.json"), "--key", str(tmp_path / "k")])
    assert result.exit_code == 1


def test_canonicalize(runner, tmp_path) -> None:
    source = tmp_path / "data.json"
    source.write_text('{"b": 1.0, "a": [1E3, "x"]}', encoding="utf-8")

    result = runner.invoke(cli, ["canonicalize", str(source)])
    assert result.exit_code == 0
    assert result.output.strip() == '{"a":[1000,"x"],"b":1}'

    pretty = runner.invoke(cli, ["canonicalize", "--pretty", str(source)])
    assert pretty.output.index('"b"') < pretty.output.index('"a"')


def test_canonicalize_rejects_duplicates(runner, tmp_path) -> None:
    source = tmp_path / "dup.json"
    source.write_text('{"a": 1, "a": 2}', encoding="utf-8")
    result = runner.invoke(cli, ["canonicalize", str(source)])
    assert result.exit_code == 1


def test_sign_then_validate(runner, tmp_path, ec_key, certificate_chain) -> None:
    from cryptography.hazmat.primitives import serialization

    data = tmp_path / "data.json"
    data.write_text('{"order": 42, "items": ["a", "b"]}', encoding="utf-8")
    private_key = tmp_path / "private.pem"
    private_key.write_text(private_pem(ec_key), encoding="utf-8")
    public_key = tmp_path / "public.pem"
    public_key.write_text(public_pem(ec_key), encoding="utf-8")
    certificate = tmp_path / "leaf.pem"
    certificate.write_bytes(certificate_chain[0].public_bytes(serialization.Encoding.PEM))
    output = tmp_path / "signed.json"

    result = runner.invoke(cli, [
        "sign", str(data), "--key", str(private_key), "--algorithm", "ES256",
        "--label", "proof", "--kid", "leaf", "--certificate", str(certificate),
        "--output", str(output),
    ])
    assert result.exit_code == 0, result.output
    assert "proof" in json.loads(output.read_text(encoding="utf-8"))

    result = runner.invoke(cli, ["validate", str(output), "--key", str(public_key), "--label", "proof"])
    assert result.exit_code == 0, result.output
    assert "Certificate 0:" in result.output
    assert "CN=Test Signer" in result.output


def test_sign_with_wrong_key(runner, tmp_path, rsa_key) -> None:
    data = tmp_path / "data.json"
    data.write_text('{"a": 1}', encoding="utf-8")
    key = tmp_path / "rsa.pem"
    key.write_text(private_pem(rsa_key), encoding="utf-8")

    result = runner.invoke(cli, ["sign", str(data), "-k", str(key), "-a", "EdDSA"])
    assert result.exit_code == 1
    assert "Error signing document" in result.output


def test_validate_non_utf8_file(runner, tmp_path) -> None:
    signed_file = tmp_path / "latin1.json"
    signed_file.write_bytes(b'{"name": "\xe9"}')
    key_file = tmp_path / "secret.hex"
    key_file.write_text(HMAC_KEY_HEX, encoding="utf-8")

    result = runner.invoke(cli, ["validate", str(signed_file), "--key", str(key_file)])
    assert result.exit_code == 1
    assert "Error reading" in result.output
