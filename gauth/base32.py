"""
base32.py — RFC 4648 Base32 codec used for shared secrets.

Alphabet: A-Z + 2-7 (index 0..31), '=' is padding only.

decode() is strict about the things authenticator apps get wrong:
- padding count must be 0, 1, 3, 4 or 6 (the only counts an 8-char block can have)
- padding must be trailing
- every data character must be in the alphabet (upper case only)
"""

import base64
import logging

from gauth.errors import InvalidEncoding

logger = logging.getLogger(__name__)

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
PADDING = "="
ALLOWED_PADDING = (0, 1, 3, 4, 6)

_LOOKUP = {char: index for index, char in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """
    Encode raw bytes to Base32 with '=' padding up to a multiple of 8 characters.

    Arguments:
        data: raw bytes (e.g. an HMAC key)

    Returns:
        str: upper-case Base32 text
    """
    return base64.b32encode(bytes(data)).decode("ascii")


def _check_padding(text: str) -> int:
    padding = text.count(PADDING)
    if padding not in ALLOWED_PADDING:
        raise InvalidEncoding(f"Invalid Base32 padding: {padding} '=' characters")
    if padding and not text.endswith(PADDING * padding):
        raise InvalidEncoding("Invalid Base32 padding: '=' must be trailing")
    return padding


def decode(text: str) -> bytes:
    """
    Decode Base32 text into raw bytes.

    Steps:
    1. Validate and strip the trailing padding
    2. Walk the data in groups of 8 characters, 5 bits per character
    3. Re-chunk the bit stream into bytes

    Padded input decodes exactly; bits that do not fill a byte are dropped.
    Unpadded input whose length is not a multiple of 8 (e.g. "SECRET") has its
    last group zero-filled to 40 bits, as Google Authenticator libraries do, so
    "SECRET" decodes to 5 bytes and long generated secrets keep the same key.

    Arguments:
        text: Base32 string, padded or not

    Returns:
        bytes: decoded data (b"" for empty input)

    Raises:
        InvalidEncoding: bad padding or a character outside the alphabet
    """
    if not text:
        return b""

    padding = _check_padding(text)
    data = text[: len(text) - padding]
    if not padding and len(data) % 8:
        logger.debug("Unpadded Base32 input, zero-filling the last group")
        data += ALPHABET[0] * (8 - len(data) % 8)

    out = bytearray()
    buffer = 0
    bits = 0
    for start in range(0, len(data), 8):
        for char in data[start:start + 8]:
            try:
                value = _LOOKUP[char]
            except KeyError:
                raise InvalidEncoding(f"Invalid Base32 character: {char!r}") from None
            buffer = (buffer << 5) | value
            bits += 5
            if bits >= 8:
                bits -= 8
                out.append((buffer >> bits) & 0xFF)
        # keep only the bits not yet emitted
        buffer &= (1 << bits) - 1

    return bytes(out)
