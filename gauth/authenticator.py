"""
authenticator.py — Object API over the free functions.

Authenticator is frozen: code length is fixed per instance, so one instance can be
shared between threads. with_code_length() returns a new instance.
"""

from dataclasses import dataclass, replace
from typing import Optional

from gauth import otp, qr, secret
from gauth.otp import DEFAULT_CODE_LENGTH, DEFAULT_DISCREPANCY, MAX_CODE_LENGTH, MIN_CODE_LENGTH
from gauth.errors import InvalidArgument


@dataclass(frozen=True)
class Authenticator:
    code_length: int = DEFAULT_CODE_LENGTH

    def __post_init__(self):
        if not MIN_CODE_LENGTH <= self.code_length <= MAX_CODE_LENGTH:
            raise InvalidArgument(
                f"Code length must be {MIN_CODE_LENGTH}..{MAX_CODE_LENGTH}, got {self.code_length}"
            )

    def with_code_length(self, length: int) -> "Authenticator":
        return replace(self, code_length=length)

    def create_secret(self, length: int = secret.DEFAULT_SECRET_LENGTH) -> str:
        return secret.create_secret(length)

    def get_code(self, secret_b32: str, time_step: Optional[int] = None) -> str:
        return otp.get_code(secret_b32, time_step, self.code_length)

    def verify_code(
        self,
        secret_b32: str,
        code: str,
        discrepancy: int = DEFAULT_DISCREPANCY,
        time_step: Optional[int] = None,
    ) -> bool:
        return otp.verify_code(secret_b32, code, discrepancy, time_step, self.code_length)

    def get_qr_code_url(self, name: str, secret_b32: str, title: Optional[str] = None, **params) -> str:
        """QR image URL; `params` accepts width, height and level."""
        return qr.qr_code_url(name, secret_b32, title, **params)
