"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
See LICENSE for details

Stacks addresses.
"""

from stacks import ConstructionError
from stacks.crypto import c32
from stacks.crypto.crypto import RIPEMD160_SIZE, hash160
from stacks.util.encode import ByteArray


class Address:
    """
    A Stacks address is a version byte and a 20-byte hash. The c32check string
    is only a presentation of those bytes. Equality, hashing and serialization
    all work on the raw bytes.
    """

    def __init__(self, version, hash160):
        """
        Args:
            version (int): The address version byte.
            hash160 (ByteArray or bytes-like or str): The 20-byte hash.
        """
        hash160 = ByteArray(hash160)
        if len(hash160) != RIPEMD160_SIZE:
            raise ConstructionError(
                f"Address expected {RIPEMD160_SIZE} byte hash, got {len(hash160)}"
            )
        if version < 0 or version > c32.MAX_VERSION:
            raise ConstructionError(f"invalid address version {version}")
        self.version = int(version)
        self.hash160 = hash160

    @staticmethod
    def fromString(addr):
        """
        Decode the c32check address string. Malformed characters, checksums and
        versions raise a c32.C32Error.

        Args:
            addr (str): The address.

        Returns:
            Address: The decoded address.
        """
        version, h = c32.c32addressDecode(addr)
        return Address(version, h)

    @staticmethod
    def fromPublicKey(pubKey, version):
        """
        The single-sig address for the public key.

        Args:
            pubKey (PublicKey): The public key.
            version (int): The address version.

        Returns:
            Address: The address.
        """
        return Address(version, hash160(pubKey.serialize().b))

    @staticmethod
    def parse(addr):
        """
        Accept an Address or an address string.
        """
        if isinstance(addr, Address):
            return addr
        if isinstance(addr, str):
            return Address.fromString(addr)
        raise ConstructionError(f"cannot make an address from {type(addr)}")

    def string(self):
        """
        The c32check encoding of the address.

        Returns:
            str: The address string.
        """
        return c32.c32address(self.version, self.hash160.b)

    def serialize(self):
        """
        Returns:
            ByteArray: The version byte followed by the hash.
        """
        b = ByteArray(self.version, length=1)
        b += self.hash160
        return b

    @staticmethod
    def deserialize(b):
        """
        Args:
            b (ByteArray): The read buffer.

        Returns:
            Address: The address.
        """
        version = b.pop(1).int()
        return Address(version, b.pop(RIPEMD160_SIZE))

    def __eq__(self, a):
        if not isinstance(a, Address):
            return False
        return self.version == a.version and self.hash160 == a.hash160

    def __hash__(self):
        return hash((self.version, self.hash160))

    def __str__(self):
        return self.string()

    def __repr__(self):
        return f"Address({self.string()})"
