"""
gauth package
=============

Google Authenticator compatible one-time passwords: TOTP (RFC 6238) on top of
HOTP (RFC 4226), HMAC-SHA1, 30-second steps, 6 digits.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- Secret: Base32 string (A-Z, 2-7). create_secret(16) -> 16 characters,
  5 bits each (80 bits). The length is in characters, not bytes.

- Code: HOTP with counter = floor(unix_time / 30)
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^6

- Verification: every step in [now - discrepancy, now + discrepancy] is tried
  with a constant-time comparison. Default discrepancy 1 -> +-30 seconds.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from gauth import create_secret, get_code, verify_code, qr_code_url
>>> secret = create_secret()
>>> url = qr_code_url("alice@example.com", secret, "MyService")  # show as <img>
>>> verify_code(secret, get_code(secret))
True

The library never stores secrets; keep them in your own user table.
"""
from gauth.authenticator import Authenticator
from gauth.base32 import decode as base32_decode, encode as base32_encode
from gauth.errors import (
    AuthenticatorError,
    InsecureRandomUnavailable,
    InvalidArgument,
    InvalidEncoding,
)
from gauth.otp import (
    DEFAULT_CODE_LENGTH,
    DEFAULT_DISCREPANCY,
    TIME_STEP,
    get_code,
    hotp,
    time_step_for,
    totp,
    verify_code,
)
from gauth.qr import otpauth_uri, qr_code_url
from gauth.secret import create_secret

__version__ = "1.0.0"

__all__ = [
    "Authenticator",
    "AuthenticatorError",
    "InsecureRandomUnavailable",
    "InvalidArgument",
    "InvalidEncoding",
    "DEFAULT_CODE_LENGTH",
    "DEFAULT_DISCREPANCY",
    "TIME_STEP",
    "base32_decode",
    "base32_encode",
    "create_secret",
    "get_code",
    "hotp",
    "otpauth_uri",
    "qr_code_url",
    "time_step_for",
    "totp",
    "verify_code",
]
