"""
Copyright (c) 2019-2020, the Decred developers
See LICENSE for details
"""

import pytest

from stacks import FormatError, StacksError
from stacks.util.encode import ByteArray, intFromBytes, intToBytes


class TestEncode:
    def test_ByteArray(self):
        makeA = lambda: ByteArray([0, 0, 255])
        makeB = lambda: ByteArray([0, 255, 0])
        zero = ByteArray([0, 0, 0])

        a = makeA()
        a |= makeB()
        assert a == bytearray([0, 255, 255])

        a = makeA()
        a.zero()
        assert a == zero
        assert a.iszero()
        assert not makeA().iszero()

        zero2 = ByteArray(zero)
        assert zero.b is not zero2.b
        assert zero == zero2

        zero2 = ByteArray(zero, copy=False)
        assert zero.b is zero2.b

        assert makeA() != makeB()
        assert makeA() != None  # noqa

        a = makeA()
        assert a[2] == 255
        assert a[1:] == bytearray([0, 255])

        z = ByteArray(zero)
        z[2] = 255
        assert makeA() == z
        with pytest.raises(StacksError):
            z[2] = ByteArray([1, 2])

        assert ByteArray(1, length=4) == bytearray([0, 0, 0, 1])
        assert ByteArray(0, length=1) == bytearray([0])
        assert ByteArray(length=2) == bytearray([0, 0])
        assert ByteArray("0102").hex() == "0102"
        assert ByteArray(b"\x01\x02") + "03" == bytearray([1, 2, 3])
        assert makeA().int() == 255
        assert makeA().bytes() == b"\x00\x00\xff"
        assert repr(makeA()) == "ByteArray(0000ff)"

        d = {makeA(): 1}
        assert d[makeA()] == 1

        with pytest.raises(TypeError):
            ByteArray(1.5)

    def test_pop(self):
        b = ByteArray("0102030405")
        assert b.pop(2) == bytearray([1, 2])
        assert len(b) == 3
        assert b.pop(0) == bytearray()
        assert b.pop(3) == bytearray([3, 4, 5])
        assert len(b) == 0
        with pytest.raises(FormatError):
            b.pop(1)

        b = ByteArray("01")
        with pytest.raises(FormatError, match="wanted 2 bytes, 1 remaining"):
            b.pop(2)

    def test_ints(self):
        assert intToBytes(0) == bytearray()
        assert intToBytes(256) == bytearray([1, 0])
        assert intToBytes(-1, signed=True) == bytearray([0xFF])
        assert intFromBytes(b"\x01\x00") == 256
        assert intFromBytes(b"\xff", signed=True) == -1
