import re
from datetime import timedelta

from src.app.services.secret_tokens import (
    EMAIL_VERIFICATION_ALPHABET,
    codes_match,
    generate_email_verification_code,
    generate_password_reset_token,
    hash_token,
    is_within_expiration_date,
)
from src.domain.base import utc_now


def test_email_verification_code_uses_digits_and_upper_case_letters():
    codes = [generate_email_verification_code() for _ in range(50)]

    for code in codes:
        assert len(code) == 8
        assert set(code) <= set(EMAIL_VERIFICATION_ALPHABET)
    assert len(set(codes)) == 50


def test_email_verification_code_length_is_configurable():
    assert len(generate_email_verification_code(6)) == 6


def test_password_reset_token_is_lower_case_base32():
    token = generate_password_reset_token()

    assert re.fullmatch(r"[a-z2-7]{40}", token)
    assert generate_password_reset_token() != token


def test_hash_token_is_sha256_hex():
    assert hash_token("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_codes_match_ignores_case_and_surrounding_whitespace():
    assert codes_match("AB12CD34", " ab12cd34\n") is True


def test_codes_match_rejects_different_code():
    assert codes_match("AB12CD34", "AB12CD35") is False
    assert codes_match("AB12CD34", "") is False


def test_expiration_boundary_is_inclusive():
    now = utc_now()

    assert is_within_expiration_date(now, now=now) is True
    assert is_within_expiration_date(now - timedelta(microseconds=1), now=now) is False
    assert is_within_expiration_date(now + timedelta(minutes=15)) is True
