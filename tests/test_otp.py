import hashlib
import hmac
import struct

import pyotp
import pytest

from gauth import otp
from gauth.errors import InvalidArgument, InvalidEncoding
from gauth.secret import create_secret

REFERENCE_SECRET = "SECRET"
# b"12345678901234567890", the RFC 4226 / RFC 6238 test key
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
CANONICAL_SECRET = "JBSWY3DPEHPK3PXP"


@pytest.mark.parametrize("time_step,code", [
    (0, "200470"),
    (1385909245, "780018"),
    (1378934578, "705013"),
])
def test_reference_vectors(time_step, code):
    assert otp.get_code(REFERENCE_SECRET, time_step) == code


# RFC 4226 Appendix D
@pytest.mark.parametrize("counter,code", list(enumerate([
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
])))
def test_rfc4226_vectors(counter, code):
    assert otp.hotp(RFC_SECRET, counter) == code


# RFC 6238 Appendix B, SHA1 column
@pytest.mark.parametrize("timestamp,code", [
    (59, "94287082"),
    (1111111109, "07081804"),
    (1111111111, "14050471"),
    (1234567890, "89005924"),
    (2000000000, "69279037"),
    (20000000000, "65353130"),
])
def test_rfc6238_vectors(timestamp, code):
    assert otp.get_code(RFC_SECRET, otp.time_step_for(timestamp), code_length=8) == code


def test_deterministic():
    assert otp.get_code(CANONICAL_SECRET, 123456) == otp.get_code(CANONICAL_SECRET, 123456)


@pytest.mark.parametrize("counter", [0, 1, 59, 47120, 2 ** 31, 2 ** 32 - 1])
def test_matches_pyotp_hotp(counter):
    assert otp.hotp(CANONICAL_SECRET, counter) == pyotp.HOTP(CANONICAL_SECRET).at(counter)


@pytest.mark.parametrize("timestamp", [29, 30, 1385909245, 1700000000])
def test_matches_pyotp_totp(timestamp):
    code, _ = otp.totp(CANONICAL_SECRET, timestamp)
    assert code == pyotp.TOTP(CANONICAL_SECRET).at(timestamp)


def test_default_time_step_uses_clock(monkeypatch):
    monkeypatch.setattr(otp.time, "time", lambda: 1385909245.7)
    assert otp.current_time_step() == 46196974
    assert otp.get_code(CANONICAL_SECRET) == otp.get_code(CANONICAL_SECRET, 46196974)


def test_counter_is_truncated_to_32_bits():
    assert otp.int_to_bytes(1) == b"\x00" * 7 + b"\x01"
    assert otp.int_to_bytes(2 ** 32 + 5) == otp.int_to_bytes(5)
    assert otp.get_code(CANONICAL_SECRET, 2 ** 32 + 5) == otp.get_code(CANONICAL_SECRET, 5)


def test_dynamic_truncate_clears_sign_bit():
    digest = bytes([0xFF] * 19 + [0x00])
    assert otp.dynamic_truncate(digest) == 0x7FFFFFFF
    digest = bytes(range(19)) + b"\x0a"
    assert otp.dynamic_truncate(digest) == 0x0A0B0C0D


def test_code_is_zero_padded(monkeypatch):
    monkeypatch.setattr(otp, "dynamic_truncate", lambda digest: 42)
    assert otp.hotp(CANONICAL_SECRET, 0) == "000042"
    assert otp.hotp(CANONICAL_SECRET, 0, code_length=8) == "00000042"


def test_negative_time_step():
    with pytest.raises(InvalidArgument):
        otp.get_code(CANONICAL_SECRET, -1)


def test_code_length_below_six():
    with pytest.raises(InvalidArgument):
        otp.get_code(CANONICAL_SECRET, 0, code_length=5)


def test_invalid_secret_propagates():
    with pytest.raises(InvalidEncoding):
        otp.get_code("SECRET==", 0)
    with pytest.raises(InvalidEncoding):
        otp.verify_code("not base32!", "123456", time_step=10)


def test_totp_remaining_seconds():
    assert otp.totp(CANONICAL_SECRET, 59)[1] == 1
    assert otp.totp(CANONICAL_SECRET, 60)[1] == 30
    assert otp.totp(CANONICAL_SECRET, 75)[1] == 15


def test_verify_current_code():
    code = otp.get_code(REFERENCE_SECRET)
    assert otp.verify_code(REFERENCE_SECRET, code)
    assert not otp.verify_code(REFERENCE_SECRET, "INVALIDCODE")


def test_verify_window():
    t = 46196974
    codes = {offset: otp.get_code(REFERENCE_SECRET, t + offset) for offset in range(-2, 3)}

    assert otp.verify_code(REFERENCE_SECRET, codes[-1], 1, t)
    assert otp.verify_code(REFERENCE_SECRET, codes[0], 1, t)
    assert otp.verify_code(REFERENCE_SECRET, codes[1], 1, t)
    assert not otp.verify_code(REFERENCE_SECRET, codes[2], 1, t)
    assert not otp.verify_code(REFERENCE_SECRET, codes[-2], 1, t)

    assert otp.verify_code(REFERENCE_SECRET, codes[2], 2, t)
    assert not otp.verify_code(REFERENCE_SECRET, codes[1], 0, t)


def test_verify_rejects_extra_leading_zero():
    code = otp.get_code(REFERENCE_SECRET, 1385909245)
    assert code == "780018"
    assert otp.verify_code(REFERENCE_SECRET, code, time_step=1385909245)
    assert not otp.verify_code(REFERENCE_SECRET, "0" + code, time_step=1385909245)


def test_verify_skips_length_mismatch_without_computing(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("code computed")

    monkeypatch.setattr(otp, "get_code", fail)
    assert not otp.verify_code(REFERENCE_SECRET, "12345", time_step=0)
    assert not otp.verify_code(REFERENCE_SECRET, "1234567", time_step=0)


def test_verify_never_raises_for_odd_codes():
    assert not otp.verify_code(REFERENCE_SECRET, "", time_step=0)
    assert not otp.verify_code(REFERENCE_SECRET, "abcdef", time_step=0)
    assert not otp.verify_code(REFERENCE_SECRET, "12345é", time_step=0)


def test_verify_near_epoch_skips_negative_steps():
    assert otp.verify_code(REFERENCE_SECRET, "200470", 1, 0)
    assert otp.verify_code(REFERENCE_SECRET, "200470", 1, 1)


def test_verify_with_eight_digits():
    code = otp.get_code(RFC_SECRET, 1, code_length=8)
    assert code == "94287082"
    assert otp.verify_code(RFC_SECRET, code, time_step=2, code_length=8)
    assert not otp.verify_code(RFC_SECRET, code[2:], time_step=2, code_length=8)


def test_negative_discrepancy():
    with pytest.raises(InvalidArgument):
        otp.verify_code(REFERENCE_SECRET, "200470", -1, 0)


def test_timing_safe_equals():
    assert otp.timing_safe_equals("123456", "123456")
    assert not otp.timing_safe_equals("123456", "123457")
    assert not otp.timing_safe_equals("123456", "1234567")


def _bitstring_decode(secret_b32):
    # Google Authenticator's group-by-group decoder: every 8-char group is
    # zero-filled to 40 bits before being split into bytes
    data = secret_b32.replace("=", "")
    out = bytearray()
    for start in range(0, len(data), 8):
        group = data[start:start + 8]
        bits = "".join(format("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567".index(c), "05b") for c in group)
        bits = bits.ljust(40, "0")
        out.extend(int(bits[i:i + 8], 2) for i in range(0, 40, 8))
    return bytes(out)


def _bitstring_code(secret_b32, time_step):
    digest = hmac.new(_bitstring_decode(secret_b32), struct.pack(">Q", time_step), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    value = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(value % 10 ** 6).zfill(6)


LONG_SECRET = ("JBSWY3DPEHPK3PXP" * 8)[:110]


def test_long_unpadded_secret_vector():
    assert otp.get_code(LONG_SECRET, 0) == "869819"


@pytest.mark.parametrize("length", [16, 17, 31, 103, 104, 105, 110, 117, 127, 128])
def test_matches_group_decoder_for_generated_lengths(length):
    secret_b32 = ("JBSWY3DPEHPK3PXP" * 8)[:length]
    for time_step in (0, 46196974):
        assert otp.get_code(secret_b32, time_step) == _bitstring_code(secret_b32, time_step)


def test_generated_long_secret_matches_group_decoder():
    for _ in range(20):
        secret_b32 = create_secret(110)
        assert otp.get_code(secret_b32, 1) == _bitstring_code(secret_b32, 1)


@pytest.mark.parametrize("code_length", [11, 10 ** 8])
def test_code_length_above_ten(code_length):
    with pytest.raises(InvalidArgument):
        otp.get_code(CANONICAL_SECRET, 0, code_length=code_length)


def test_code_length_ten():
    assert len(otp.get_code(CANONICAL_SECRET, 0, code_length=10)) == 10
