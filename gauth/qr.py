"""
qr.py — otpauth:// URIs and QR-code image URLs for enrollment.

Only builds strings; fetching the image is up to the caller.
"""

from typing import Optional
from urllib.parse import quote, quote_plus, urlencode

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"
DEFAULT_QR_SIZE = 200
QR_LEVELS = ("L", "M", "Q", "H")
DEFAULT_QR_LEVEL = "M"


def otpauth_uri(name: str, secret_b32: str, title: Optional[str] = None) -> str:
    """
    Key URI understood by Google Authenticator:
    otpauth://totp/{name}?secret={secret}[&issuer={title}]
    """
    uri = f"otpauth://totp/{quote(name, safe='@')}?secret={secret_b32}"
    if title is not None:
        uri += f"&issuer={quote_plus(title)}"
    return uri


def _positive_or_default(value, default: int) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def qr_code_url(
    name: str,
    secret_b32: str,
    title: Optional[str] = None,
    width: int = DEFAULT_QR_SIZE,
    height: int = DEFAULT_QR_SIZE,
    level: str = DEFAULT_QR_LEVEL,
) -> str:
    """
    URL of a QR-code image (api.qrserver.com) encoding the otpauth URI.

    Arguments:
        name: account label shown in the app (e.g. 'alice@example.com')
        secret_b32: Base32 secret
        title: issuer shown above the account, optional
        width, height: image size in pixels; non-positive values fall back to 200
        level: error correction L/M/Q/H; anything else falls back to M
    """
    width = _positive_or_default(width, DEFAULT_QR_SIZE)
    height = _positive_or_default(height, DEFAULT_QR_SIZE)
    if level not in QR_LEVELS:
        level = DEFAULT_QR_LEVEL

    query = urlencode({
        "data": otpauth_uri(name, secret_b32, title),
        "size": f"{width}x{height}",
        "ecc": level,
    })
    return f"{QR_SERVICE_URL}?{query}"
