"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import pytest

from stacks.crypto import c32


HASH = "df0ba3e79792be7be5e50a370289accfc8c9e032"
ADDR = "SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159"


def test_c32_encode_decode(randBytes):
    assert c32.c32encode(b"") == ""
    assert c32.c32encode(b"\x00\x00\x01") == "001"
    assert c32.c32decode("001") == b"\x00\x00\x01"
    assert c32.c32encode(b"\x20") == "10"
    for _ in range(20):
        b = randBytes(low=1, high=40)
        assert c32.c32decode(c32.c32encode(b)) == b

    with pytest.raises(c32.C32Error):
        c32.c32decode("ABU")


def test_normalize():
    assert c32.normalize("oil") == "011"
    assert c32.c32decode("o1") == c32.c32decode("01")


def test_addresses():
    assert c32.c32address(22, bytes.fromhex(HASH)) == ADDR
    assert c32.c32addressDecode(ADDR) == (22, bytes.fromhex(HASH))
    assert c32.c32addressDecode(ADDR.lower()) == (22, bytes.fromhex(HASH))

    testnetHash = "e6c05355e0c990ffad19a5e9bda394a9c5003429"
    testnetAddr = "ST3KC0MTNW34S1ZXD36JYKFD3JJMWA01M55DSJ4JE"
    assert c32.c32address(26, bytes.fromhex(testnetHash)) == testnetAddr
    assert c32.c32addressDecode(testnetAddr) == (26, bytes.fromhex(testnetHash))

    version, data = c32.c32checkDecode(c32.c32checkEncode(5, b"hello"))
    assert version == 5
    assert data == b"hello"


def test_address_errors():
    with pytest.raises(c32.C32Error, match="invalid length"):
        c32.c32addressDecode("SP12")
    with pytest.raises(c32.C32Error, match="must start with 'S'"):
        c32.c32addressDecode("X" + ADDR[1:])
    # Checksum mismatch.
    with pytest.raises(c32.C32Error):
        c32.c32addressDecode(ADDR[:-1] + ("8" if ADDR[-1] != "8" else "9"))
    with pytest.raises(c32.C32Error):
        c32.c32address(32, bytes.fromhex(HASH))
    with pytest.raises(c32.C32Error):
        c32.c32address(22, b"\x00" * 19)
    with pytest.raises(c32.C32Error):
        c32.c32addressDecode("S" + c32.c32checkEncode(22, b"\x01" * 19))
