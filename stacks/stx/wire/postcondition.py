"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Post-conditions bound the assets a transaction may move. The network aborts a
transaction whose execution violates any of them.
"""

from stacks import ConstructionError, FormatError
from stacks.stx.constants import (
    FungibleConditionCode,
    NonFungibleConditionCode,
    PostConditionType,
)
from stacks.stx.wire.principal import AssetInfo, Principal
from stacks.stx.wire.wire import (
    LengthPrefixedString,
    checkEnum,
    readEnum,
    readUint,
    writeUint,
)
from stacks.util.encode import ByteArray


def _optionalEnum(v, enumType, fieldName):
    return checkEnum(v, enumType, fieldName) if v is not None else None


class PostCondition:
    """
    The parent class of the post-condition variants. The type is fixed by the
    variant and cannot be assigned.
    """

    _postConditionType = None
    # The fields the variant writes, in wire order.
    _fields = ()

    @property
    def postConditionType(self):
        return self._postConditionType

    def missingFields(self):
        """
        The names of the absent fields the variant requires.

        Returns:
            list(str): Field names.
        """
        return [k for k in self._fields if getattr(self, k) is None]

    def serialize(self):
        """
        Serialize the post-condition. Field order is type, principal, asset
        info, asset name, condition code, amount, with the fields the variant
        lacks left out.

        Returns:
            ByteArray: The encoded post-condition.
        """
        missing = self.missingFields()
        if missing:
            raise ConstructionError(
                f"{type(self).__name__} missing fields: {', '.join(missing)}"
            )
        b = ByteArray(self.postConditionType, length=1)
        for k in self._fields:
            if k == "conditionCode":
                b += ByteArray(self.conditionCode, length=1)
            elif k == "amount":
                b += writeUint(self.amount, 8)
            else:
                b += getattr(self, k).serialize()
        return b

    @staticmethod
    def deserialize(b):
        """
        Decode the next post-condition in the buffer.

        Args:
            b (ByteArray): The read buffer.

        Returns:
            PostCondition: The variant named by the type byte.
        """
        pcType = readEnum(b, PostConditionType)
        principal = Principal.deserialize(b)
        if pcType == PostConditionType.STX:
            code = readEnum(b, FungibleConditionCode)
            return STXPostCondition(principal, code, readUint(b, 8))
        if pcType == PostConditionType.Fungible:
            assetInfo = AssetInfo.deserialize(b)
            code = readEnum(b, FungibleConditionCode)
            return FungiblePostCondition(principal, code, readUint(b, 8), assetInfo)
        if pcType == PostConditionType.NonFungible:
            assetInfo = AssetInfo.deserialize(b)
            assetName = LengthPrefixedString.deserialize(b)
            code = readEnum(b, NonFungibleConditionCode)
            return NonFungiblePostCondition(principal, code, assetInfo, assetName)
        raise FormatError(f"unknown post-condition type {pcType}")

    def __eq__(self, other):
        return (
            isinstance(other, PostCondition)
            and self.postConditionType == other.postConditionType
            and self.serialize() == other.serialize()
        )

    def __repr__(self):
        return (
            f"{type(self).__name__}({self.principal!r}, {self.conditionCode!r}, "
            f"amount={self.amount})"
        )


class STXPostCondition(PostCondition):
    _postConditionType = PostConditionType.STX
    _fields = ("principal", "conditionCode", "amount")

    def __init__(self, principal, conditionCode, amount):
        """
        Args:
            principal (Principal): The principal whose STX balance is bounded.
            conditionCode (FungibleConditionCode): The comparison.
            amount (int): The amount in micro-STX.
        """
        self.principal = principal
        self.conditionCode = _optionalEnum(
            conditionCode, FungibleConditionCode, "fungible condition code"
        )
        self.amount = amount
        self.assetInfo = None
        self.assetName = None


class FungiblePostCondition(PostCondition):
    _postConditionType = PostConditionType.Fungible
    _fields = ("principal", "assetInfo", "conditionCode", "amount")

    def __init__(self, principal, conditionCode, amount, assetInfo):
        """
        Args:
            principal (Principal): The principal whose balance is bounded.
            conditionCode (FungibleConditionCode): The comparison.
            amount (int): The token amount.
            assetInfo (AssetInfo): The token.
        """
        self.principal = principal
        self.conditionCode = _optionalEnum(
            conditionCode, FungibleConditionCode, "fungible condition code"
        )
        self.amount = amount
        self.assetInfo = assetInfo
        self.assetName = None


class NonFungiblePostCondition(PostCondition):
    """
    A non-fungible post-condition asserts ownership of a single asset. It has
    no amount.
    """

    _postConditionType = PostConditionType.NonFungible
    _fields = ("principal", "assetInfo", "assetName", "conditionCode")

    def __init__(self, principal, conditionCode, assetInfo, assetName):
        """
        Args:
            principal (Principal): The principal.
            conditionCode (NonFungibleConditionCode): Owns or does not own.
            assetInfo (AssetInfo): The asset class.
            assetName (str): The specific asset.
        """
        self.principal = principal
        self.conditionCode = _optionalEnum(
            conditionCode, NonFungibleConditionCode, "non-fungible condition code"
        )
        self.amount = None
        self.assetInfo = assetInfo
        self.assetName = (
            LengthPrefixedString(str(assetName)) if assetName is not None else None
        )
