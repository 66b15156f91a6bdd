"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Principals and asset identifiers used by post-conditions.
"""

from stacks import FormatError
from stacks.stx.addrlib import Address
from stacks.stx.constants import PrincipalType
from stacks.stx.wire.wire import LengthPrefixedString, readEnum
from stacks.util.encode import ByteArray


class AssetInfo:
    """
    AssetInfo identifies a token by the contract that defines it and the
    asset's name within that contract.
    """

    def __init__(self, address, contractName, assetName):
        """
        Args:
            address (Address or str): The contract's deploying address.
            contractName (str): The contract name.
            assetName (str): The asset name.
        """
        self.address = Address.parse(address)
        self.contractName = LengthPrefixedString(str(contractName))
        self.assetName = LengthPrefixedString(str(assetName))

    def serialize(self):
        b = self.address.serialize()
        b += self.contractName.serialize()
        b += self.assetName.serialize()
        return b

    @staticmethod
    def deserialize(b):
        address = Address.deserialize(b)
        contractName = LengthPrefixedString.deserialize(b)
        assetName = LengthPrefixedString.deserialize(b)
        return AssetInfo(address, contractName, assetName)

    def __eq__(self, other):
        return (
            isinstance(other, AssetInfo)
            and self.address == other.address
            and self.contractName == other.contractName
            and self.assetName == other.assetName
        )

    def __repr__(self):
        return f"AssetInfo({self.address}.{self.contractName}::{self.assetName})"


class Principal:
    """
    The parent class of the principal variants. The tag byte is fixed by the
    variant.
    """

    principalType = None

    def __init__(self, address):
        self.address = Address.parse(address)

    def serialize(self):
        b = ByteArray(self.principalType, length=1)
        b += self.address.serialize()
        return b

    @staticmethod
    def deserialize(b):
        """
        Decode the next principal in the buffer.

        Args:
            b (ByteArray): The read buffer.

        Returns:
            StandardPrincipal or ContractPrincipal: The principal.
        """
        principalType = readEnum(b, PrincipalType)
        if principalType == PrincipalType.Standard:
            return StandardPrincipal(Address.deserialize(b))
        if principalType == PrincipalType.Contract:
            address = Address.deserialize(b)
            return ContractPrincipal(address, LengthPrefixedString.deserialize(b))
        raise FormatError(f"unknown principal type {principalType}")

    def __eq__(self, other):
        return (
            isinstance(other, Principal)
            and self.principalType == other.principalType
            and self.serialize() == other.serialize()
        )


class StandardPrincipal(Principal):
    """
    A principal owned by a key or multi-sig address.
    """

    principalType = PrincipalType.Standard

    def __repr__(self):
        return f"StandardPrincipal({self.address})"


class ContractPrincipal(Principal):
    """
    A principal owned by a deployed contract.
    """

    principalType = PrincipalType.Contract

    def __init__(self, address, contractName):
        super().__init__(address)
        self.contractName = LengthPrefixedString(str(contractName))

    def serialize(self):
        b = super().serialize()
        b += self.contractName.serialize()
        return b

    def __repr__(self):
        return f"ContractPrincipal({self.address}.{self.contractName})"
