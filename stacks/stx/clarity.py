"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Clarity values, the typed arguments of a contract call. Each value is encoded
as a type byte followed by a type-specific body.
"""

from stacks import ConstructionError, FormatError
from stacks.stx.addrlib import Address
from stacks.stx.constants import CLARITY_INT_SIZE, ClarityType
from stacks.stx.wire.wire import LengthPrefixedString, readEnum, readUint, writeUint
from stacks.util.encode import ByteArray


INT_BYTES = CLARITY_INT_SIZE // 8
MAX_INT = (1 << (CLARITY_INT_SIZE - 1)) - 1
MIN_INT = -(1 << (CLARITY_INT_SIZE - 1))
MAX_UINT = (1 << CLARITY_INT_SIZE) - 1

# Buffers, strings and lists carry a 4-byte length.
LENGTH_BYTES = 4


class ClarityValue:
    """
    The parent class of all Clarity values. Child classes implement
    serializeBody and a static readBody, and are registered in
    ClarityValue.deserialize by type byte.
    """

    clarityType = None

    def serialize(self):
        """
        Returns:
            ByteArray: The type byte followed by the value body.
        """
        b = ByteArray(self.clarityType, length=1)
        b += self.serializeBody()
        return b

    def serializeBody(self):
        raise NotImplementedError("serializeBody must be implemented by child class")

    @staticmethod
    def deserialize(b):
        """
        Decode the next Clarity value in the buffer.

        Args:
            b (ByteArray): The read buffer.

        Returns:
            ClarityValue: The value.
        """
        clarityType = readEnum(b, ClarityType)
        return _readers[clarityType](b, clarityType)

    def __eq__(self, other):
        return (
            isinstance(other, ClarityValue)
            and self.clarityType == other.clarityType
            and self.serializeBody() == other.serializeBody()
        )

    def __hash__(self):
        return hash(self.serialize())


class IntCV(ClarityValue):
    clarityType = ClarityType.Int

    def __init__(self, value):
        if not isinstance(value, int) or value < MIN_INT or value > MAX_INT:
            raise ConstructionError(f"Clarity int {value!r} out of range")
        self.value = value

    def serializeBody(self):
        return ByteArray(self.value.to_bytes(INT_BYTES, "big", signed=True))

    @staticmethod
    def readBody(b, clarityType):
        return IntCV(int.from_bytes(b.pop(INT_BYTES).bytes(), "big", signed=True))

    def __repr__(self):
        return f"IntCV({self.value})"


class UIntCV(ClarityValue):
    clarityType = ClarityType.UInt

    def __init__(self, value):
        if not isinstance(value, int) or value < 0 or value > MAX_UINT:
            raise ConstructionError(f"Clarity uint {value!r} out of range")
        self.value = value

    def serializeBody(self):
        return writeUint(self.value, INT_BYTES)

    @staticmethod
    def readBody(b, clarityType):
        return UIntCV(readUint(b, INT_BYTES))

    def __repr__(self):
        return f"UIntCV({self.value})"


class BufferCV(ClarityValue):
    clarityType = ClarityType.Buffer

    def __init__(self, buffer):
        self.buffer = ByteArray(buffer)

    def serializeBody(self):
        b = writeUint(len(self.buffer), LENGTH_BYTES)
        b += self.buffer
        return b

    @staticmethod
    def readBody(b, clarityType):
        return BufferCV(b.pop(readUint(b, LENGTH_BYTES)))

    def __repr__(self):
        return f"BufferCV({self.buffer.hex()})"


class BooleanCV(ClarityValue):
    def __init__(self, value):
        self.value = bool(value)
        self.clarityType = ClarityType.BoolTrue if value else ClarityType.BoolFalse

    def serializeBody(self):
        return ByteArray(b"")

    @staticmethod
    def readBody(b, clarityType):
        return BooleanCV(clarityType == ClarityType.BoolTrue)

    def __repr__(self):
        return f"BooleanCV({self.value})"


class StandardPrincipalCV(ClarityValue):
    clarityType = ClarityType.PrincipalStandard

    def __init__(self, address):
        self.address = Address.parse(address)

    def serializeBody(self):
        return self.address.serialize()

    @staticmethod
    def readBody(b, clarityType):
        return StandardPrincipalCV(Address.deserialize(b))

    def __repr__(self):
        return f"StandardPrincipalCV({self.address})"


class ContractPrincipalCV(ClarityValue):
    clarityType = ClarityType.PrincipalContract

    def __init__(self, address, contractName):
        self.address = Address.parse(address)
        self.contractName = LengthPrefixedString(str(contractName))

    def serializeBody(self):
        b = self.address.serialize()
        b += self.contractName.serialize()
        return b

    @staticmethod
    def readBody(b, clarityType):
        address = Address.deserialize(b)
        return ContractPrincipalCV(address, LengthPrefixedString.deserialize(b))

    def __repr__(self):
        return f"ContractPrincipalCV({self.address}.{self.contractName})"


class ResponseCV(ClarityValue):
    """
    A response wraps a value as either ok or err.
    """

    def __init__(self, value, ok):
        self.value = value
        self.ok = ok
        self.clarityType = ClarityType.ResponseOk if ok else ClarityType.ResponseErr

    def serializeBody(self):
        return self.value.serialize()

    @staticmethod
    def readBody(b, clarityType):
        value = ClarityValue.deserialize(b)
        return ResponseCV(value, clarityType == ClarityType.ResponseOk)

    def __repr__(self):
        return f"ResponseCV({'ok' if self.ok else 'err'} {self.value!r})"


class OptionalCV(ClarityValue):
    """
    An optional value is either none or wraps a value.
    """

    def __init__(self, value=None):
        self.value = value
        self.clarityType = (
            ClarityType.OptionalNone if value is None else ClarityType.OptionalSome
        )

    def serializeBody(self):
        if self.value is None:
            return ByteArray(b"")
        return self.value.serialize()

    @staticmethod
    def readBody(b, clarityType):
        if clarityType == ClarityType.OptionalNone:
            return OptionalCV()
        return OptionalCV(ClarityValue.deserialize(b))

    def __repr__(self):
        return "OptionalCV(none)" if self.value is None else f"OptionalCV({self.value!r})"


class ListCV(ClarityValue):
    clarityType = ClarityType.List

    def __init__(self, values):
        self.values = list(values)

    def serializeBody(self):
        b = writeUint(len(self.values), LENGTH_BYTES)
        for v in self.values:
            b += v.serialize()
        return b

    @staticmethod
    def readBody(b, clarityType):
        count = readUint(b, LENGTH_BYTES)
        if count > len(b):
            raise FormatError(f"Clarity list count {count} exceeds buffer")
        return ListCV([ClarityValue.deserialize(b) for _ in range(count)])

    def __repr__(self):
        return f"ListCV({self.values!r})"


class TupleCV(ClarityValue):
    """
    A tuple maps names to values. Entries are encoded sorted by name.
    """

    clarityType = ClarityType.Tuple

    def __init__(self, data):
        self.data = dict(data)

    def serializeBody(self):
        b = writeUint(len(self.data), LENGTH_BYTES)
        for name in sorted(self.data):
            b += LengthPrefixedString(name).serialize()
            b += self.data[name].serialize()
        return b

    @staticmethod
    def readBody(b, clarityType):
        count = readUint(b, LENGTH_BYTES)
        if count > len(b):
            raise FormatError(f"Clarity tuple count {count} exceeds buffer")
        data = {}
        for _ in range(count):
            name = LengthPrefixedString.deserialize(b).content
            data[name] = ClarityValue.deserialize(b)
        return TupleCV(data)

    def __repr__(self):
        return f"TupleCV({self.data!r})"


class StringCV(ClarityValue):
    """
    An ASCII or UTF-8 string.
    """

    def __init__(self, data, encoding="ascii"):
        if encoding not in ("ascii", "utf-8"):
            raise ConstructionError(f"unknown Clarity string encoding {encoding}")
        try:
            data.encode(encoding)
        except UnicodeEncodeError:
            raise ConstructionError(f"string is not valid {encoding}: {data!r}")
        self.data = data
        self.encoding = encoding
        self.clarityType = (
            ClarityType.StringASCII if encoding == "ascii" else ClarityType.StringUTF8
        )

    def serializeBody(self):
        encoded = self.data.encode(self.encoding)
        b = writeUint(len(encoded), LENGTH_BYTES)
        b += encoded
        return b

    @staticmethod
    def readBody(b, clarityType):
        encoding = "ascii" if clarityType == ClarityType.StringASCII else "utf-8"
        raw = b.pop(readUint(b, LENGTH_BYTES)).bytes()
        try:
            return StringCV(raw.decode(encoding), encoding)
        except UnicodeDecodeError as e:
            raise FormatError(f"invalid Clarity {encoding} string: {e}")

    def __repr__(self):
        return f"StringCV({self.data!r}, {self.encoding})"


_readers = {
    ClarityType.Int: IntCV.readBody,
    ClarityType.UInt: UIntCV.readBody,
    ClarityType.Buffer: BufferCV.readBody,
    ClarityType.BoolTrue: BooleanCV.readBody,
    ClarityType.BoolFalse: BooleanCV.readBody,
    ClarityType.PrincipalStandard: StandardPrincipalCV.readBody,
    ClarityType.PrincipalContract: ContractPrincipalCV.readBody,
    ClarityType.ResponseOk: ResponseCV.readBody,
    ClarityType.ResponseErr: ResponseCV.readBody,
    ClarityType.OptionalNone: OptionalCV.readBody,
    ClarityType.OptionalSome: OptionalCV.readBody,
    ClarityType.List: ListCV.readBody,
    ClarityType.Tuple: TupleCV.readBody,
    ClarityType.StringASCII: StringCV.readBody,
    ClarityType.StringUTF8: StringCV.readBody,
}


def intCV(value):
    return IntCV(value)


def uintCV(value):
    return UIntCV(value)


def bufferCV(buffer):
    return BufferCV(buffer)


def trueCV():
    return BooleanCV(True)


def falseCV():
    return BooleanCV(False)


def boolCV(value):
    return BooleanCV(value)


def standardPrincipalCV(address):
    return StandardPrincipalCV(address)


def contractPrincipalCV(address, contractName):
    return ContractPrincipalCV(address, contractName)


def responseOkCV(value):
    return ResponseCV(value, True)


def responseErrorCV(value):
    return ResponseCV(value, False)


def noneCV():
    return OptionalCV()


def someCV(value):
    return OptionalCV(value)


def listCV(values):
    return ListCV(values)


def tupleCV(data):
    return TupleCV(data)


def stringAsciiCV(data):
    return StringCV(data, "ascii")


def stringUtf8CV(data):
    return StringCV(data, "utf-8")
