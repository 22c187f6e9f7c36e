"""
otp.py — Code derivation (HOTP/TOTP) and verification.

Core algorithm
- HOTP (RFC 4226):
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits
- TOTP (RFC 6238):
  HOTP with counter = floor(unix_time / 30)
- Dynamic Truncation:
  offset = last byte & 0x0F, take 4 bytes from offset, clear the sign bit.

Everything here is a pure function of its arguments; the clock is only read when
no time step is given.
"""

from typing import Optional, Tuple
import hashlib
import hmac
import logging
import struct
import time

from gauth.base32 import decode
from gauth.errors import InvalidArgument

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_CODE_LENGTH = 6     # Google Authenticator shows 6 digits
MIN_CODE_LENGTH = 6
MAX_CODE_LENGTH = 10        # truncated value is below 2^31, 10 digits at most
TIME_STEP = 30              # seconds per code
DEFAULT_DISCREPANCY = 1     # accept one step before/after (+-30s)


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Pack a counter into the 8-byte big-endian HMAC message.

    The high word is always zero and the low word is the counter truncated to
    32 bits, e.g. int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">II", 0, i & 0xFFFFFFFF)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation: 31-bit integer picked from the digest.

    Arguments:
        hmac_digest: HMAC-SHA1 digest (20 bytes)
    """
    offset = hmac_digest[-1] & 0x0F
    return struct.unpack(">I", hmac_digest[offset:offset + 4])[0] & 0x7FFFFFFF


def time_step_for(timestamp: float) -> int:
    """Time step (counter) for a unix timestamp: floor(timestamp / 30)."""
    return int(timestamp // TIME_STEP)


def current_time_step() -> int:
    return time_step_for(time.time())


def _check_code_length(code_length: int) -> None:
    if not MIN_CODE_LENGTH <= code_length <= MAX_CODE_LENGTH:
        raise InvalidArgument(
            f"Code length must be {MIN_CODE_LENGTH}..{MAX_CODE_LENGTH}, got {code_length}"
        )


def hotp(secret_b32: str, counter: int, code_length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    HOTP code for a counter.

    Steps:
    1. Base32-decode secret -> raw key bytes
    2. Message = 8-byte counter (big-endian, low 32 bits only)
    3. HMAC-SHA1(key, message)
    4. Dynamic truncate -> dbc
    5. otp = dbc % 10^code_length, zero-padded

    Arguments:
        secret_b32: Base32 secret
        counter: non-negative counter
        code_length: number of digits (6..10)

    Raises:
        InvalidEncoding: secret is not valid Base32
        InvalidArgument: negative counter or code_length outside 6..10
    """
    if counter < 0:
        raise InvalidArgument(f"Time step must be non-negative, got {counter}")
    _check_code_length(code_length)

    key = decode(secret_b32)
    digest = hmac.new(key, int_to_bytes(counter), hashlib.sha1).digest()
    dbc = dynamic_truncate(digest)
    return str(dbc % (10 ** code_length)).zfill(code_length)


def get_code(
    secret_b32: str,
    time_step: Optional[int] = None,
    code_length: int = DEFAULT_CODE_LENGTH,
) -> str:
    """
    Code for a secret at a given time step (default: now).

    Arguments:
        secret_b32: Base32 secret
        time_step: floor(unix_time / 30); None -> current step
        code_length: number of digits

    Returns:
        str: zero-padded code of exactly `code_length` digits
    """
    if time_step is None:
        time_step = current_time_step()
    return hotp(secret_b32, time_step, code_length)


def totp(
    secret_b32: str,
    timestamp: Optional[float] = None,
    code_length: int = DEFAULT_CODE_LENGTH,
) -> Tuple[str, int]:
    """
    Code for a unix timestamp plus the seconds it stays valid.

    Returns:
        (code, remaining_seconds)
    """
    if timestamp is None:
        timestamp = time.time()
    code = get_code(secret_b32, time_step_for(timestamp), code_length)
    remaining = int(TIME_STEP - (timestamp % TIME_STEP))
    return code, remaining


def timing_safe_equals(expected: str, given: str) -> bool:
    """Constant-time string comparison (no early exit on the first mismatch)."""
    return hmac.compare_digest(expected.encode("utf-8"), given.encode("utf-8"))


def verify_code(
    secret_b32: str,
    code: str,
    discrepancy: int = DEFAULT_DISCREPANCY,
    time_step: Optional[int] = None,
    code_length: int = DEFAULT_CODE_LENGTH,
) -> bool:
    """
    Check a user-supplied code.

    Accepts codes from `discrepancy` * 30 seconds ago up to `discrepancy` * 30
    seconds from now. A code whose length differs from `code_length` is rejected
    without computing anything, so "0780018" never matches "780018".

    Arguments:
        secret_b32: Base32 secret
        code: code typed by the user
        discrepancy: steps accepted on each side of the current one
        time_step: current step; None -> from the clock
        code_length: expected number of digits

    Returns:
        bool: True if any step in the window produces `code`

    Raises:
        InvalidEncoding: the secret (not the code) is not valid Base32
        InvalidArgument: negative discrepancy
    """
    if discrepancy < 0:
        raise InvalidArgument(f"Discrepancy must be >= 0, got {discrepancy}")
    if len(code) != code_length:
        return False

    if time_step is None:
        time_step = current_time_step()

    for offset in range(-discrepancy, discrepancy + 1):
        step = time_step + offset
        if step < 0:
            continue
        if timing_safe_equals(get_code(secret_b32, step, code_length), code):
            logger.debug("Code accepted at offset %+d", offset)
            return True
    return False
