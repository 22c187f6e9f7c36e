"""
errors.py — Exceptions raised by the gauth library.

All of them derive from ValueError (through AuthenticatorError), so callers that
already wrap OTP calls in `except ValueError` keep working.
"""


class AuthenticatorError(ValueError):
    """Base class for every error raised by gauth."""


class InvalidArgument(AuthenticatorError):
    """A parameter is outside its allowed range (secret length, code length, ...)."""


class InvalidEncoding(AuthenticatorError):
    """Base32 input has bad padding or characters outside the alphabet."""


class InsecureRandomUnavailable(AuthenticatorError, RuntimeError):
    """The platform offers no cryptographically secure random source."""
