"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import pytest

from stacks import ConstructionError
from stacks.crypto import c32
from stacks.crypto.crypto import PublicKey
from stacks.stx.addrlib import Address
from stacks.stx.constants import AddressVersion
from stacks.util.encode import ByteArray


ADDR = "SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159"
HASH = "df0ba3e79792be7be5e50a370289accfc8c9e032"


class TestAddress:
    def test_string(self):
        addr = Address.fromString(ADDR)
        assert addr.version == AddressVersion.MainnetSingleSig
        assert addr.hash160.hex() == HASH
        assert addr.string() == ADDR
        assert str(addr) == ADDR
        assert ADDR in repr(addr)
        assert Address.parse(ADDR) == addr
        assert Address.parse(addr) is addr
        # Case is normalized.
        assert Address.fromString(ADDR.lower()) == addr

        with pytest.raises(c32.C32Error):
            Address.fromString("SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ158")
        with pytest.raises(ConstructionError):
            Address.parse(12)

    def test_fromPublicKey(self):
        pub = PublicKey("02215340da140268f8a472af9c2b67952fe0a68337665482dae84886adea0945c1")
        addr = Address.fromPublicKey(pub, AddressVersion.TestnetSingleSig)
        assert addr.string() == "ST3KC0MTNW34S1ZXD36JYKFD3JJMWA01M55DSJ4JE"

    def test_serialize(self):
        addr = Address.fromString(ADDR)
        b = addr.serialize()
        assert b.hex() == "16" + HASH
        reAddr = Address.deserialize(b)
        assert reAddr == addr
        assert len(b) == 0
        assert hash(reAddr) == hash(addr)

    def test_equality(self):
        a = Address(22, HASH)
        assert a == Address(22, ByteArray(HASH))
        assert a != Address(26, HASH)
        assert a != ADDR

    def test_invalid(self):
        with pytest.raises(ConstructionError):
            Address(22, HASH[:-2])
        with pytest.raises(ConstructionError):
            Address(32, HASH)
