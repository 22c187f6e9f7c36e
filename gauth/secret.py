"""
secret.py — Random shared secrets for Google Authenticator enrollment.
"""

import logging
import os

from gauth.base32 import ALPHABET
from gauth.errors import InsecureRandomUnavailable, InvalidArgument

logger = logging.getLogger(__name__)

DEFAULT_SECRET_LENGTH = 16
MIN_SECRET_LENGTH = 16       # 80 bits
MAX_SECRET_LENGTH = 128      # 640 bits


def _secure_random_bytes(count: int) -> bytes:
    # os.urandom is the OS CSPRNG; there is no weaker fallback on purpose
    try:
        return os.urandom(count)
    except (NotImplementedError, OSError) as e:
        raise InsecureRandomUnavailable("No source of secure random") from e


def create_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """
    Create a new random Base32 secret.

    NOTE: `length` is the number of Base32 *characters*, not bytes. Each character
    is picked as ALPHABET[random_byte & 31], so it carries 5 bits of entropy:
    create_secret(16) gives an 80-bit secret, create_secret(32) a 160-bit one.
    This matches secrets already enrolled with other Google Authenticator
    libraries; do not pass a byte count here.

    Arguments:
        length: number of characters, 16..128 (80 to 640 bits)

    Returns:
        str: `length` characters from A-Z2-7, no padding

    Raises:
        InvalidArgument: length outside 16..128
        InsecureRandomUnavailable: the OS has no secure random source
    """
    if not MIN_SECRET_LENGTH <= length <= MAX_SECRET_LENGTH:
        raise InvalidArgument(
            f"Bad secret length: {length} (must be {MIN_SECRET_LENGTH}..{MAX_SECRET_LENGTH})"
        )

    raw = _secure_random_bytes(length)
    secret = "".join(ALPHABET[b & 31] for b in raw)
    logger.debug("Generated %d-bit secret %s...", length * 5, secret[:4])
    return secret
