import pytest

from totp_engine import uri
from totp_engine.errors import InvalidDigitsError, InvalidParameterError, InvalidSecretError


def test_full_uri(rfc_secret):
    assert uri.build(rfc_secret, "a@b.com", "MyApp") == (
        "otpauth://totp/MyApp:a%40b.com?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
        "&issuer=MyApp&algorithm=SHA1&digits=6&period=30"
    )


def test_required_substrings(rfc_secret):
    built = uri.build(rfc_secret, "a@b.com", "MyApp")
    assert "otpauth://totp/" in built
    assert "secret=" in built
    assert "issuer=MyApp" in built


def test_percent_encoding_like_encode_uri_component(rfc_secret):
    built = uri.build(rfc_secret, "test@example.com", "Test Service")
    assert built.startswith("otpauth://totp/Test%20Service:test%40example.com?")
    assert "issuer=Test%20Service" in built

    built = uri.build(rfc_secret, "a:b&c=d", "x/y")
    assert built.startswith("otpauth://totp/x%2Fy:a%3Ab%26c%3Dd?")


def test_custom_digits_and_period(rfc_secret):
    built = uri.build(rfc_secret, "alice", "MyApp", step_seconds=60, digits=8)
    assert built.endswith("&algorithm=SHA1&digits=8&period=60")


def test_empty_issuer_omits_prefix_and_parameter(rfc_secret):
    built = uri.build(rfc_secret, "alice", "")
    assert built.startswith("otpauth://totp/alice?secret=")
    assert "issuer=" not in built


def test_empty_account(rfc_secret):
    with pytest.raises(InvalidParameterError):
        uri.build(rfc_secret, "", "MyApp")


def test_empty_secret():
    with pytest.raises(InvalidSecretError):
        uri.build(b"", "alice", "MyApp")


def test_bad_digits_and_period(rfc_secret):
    with pytest.raises(InvalidDigitsError):
        uri.build(rfc_secret, "alice", "MyApp", digits=4)
    with pytest.raises(InvalidParameterError):
        uri.build(rfc_secret, "alice", "MyApp", step_seconds=0)
