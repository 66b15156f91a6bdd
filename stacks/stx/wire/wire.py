"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
See LICENSE for details

Codec primitives shared by all Stacks wire messages. Every multi-byte integer
is big-endian.
"""

from stacks import ConstructionError, FormatError
from stacks.stx.constants import MAX_STRING_LENGTH_BYTES
from stacks.util.encode import ByteArray


# fmt: off
MaxUint8  = (1 << 8) - 1
MaxUint16 = (1 << 16) - 1
MaxUint32 = (1 << 32) - 1
MaxUint64 = (1 << 64) - 1
# fmt: on

# LIST_COUNT_BYTES is the width of a length-prefixed list's element count.
LIST_COUNT_BYTES = 4


def writeUint(val, size):
    """
    Encode an unsigned integer into exactly size bytes.

    Args:
        val (int): The value.
        size (int): The field width in bytes.

    Returns:
        ByteArray: The encoded integer.
    """
    if not isinstance(val, int):
        raise ConstructionError(f"cannot encode {val!r} as a {size}-byte integer")
    if val < 0 or val >= 1 << (8 * size):
        raise ConstructionError(f"value {val} does not fit in {size} bytes")
    return ByteArray(val.to_bytes(size, "big"))


def readUint(b, size):
    """
    Read an unsigned integer of exactly size bytes from the buffer.

    Args:
        b (ByteArray): The read buffer.
        size (int): The field width in bytes.

    Returns:
        int: The decoded integer.
    """
    return b.pop(size).int()


def readEnum(b, enumType):
    """
    Read a single-byte enumerated value.

    Args:
        b (ByteArray): The read buffer.
        enumType (IntEnum): The enumeration.

    Returns:
        IntEnum: The value.
    """
    v = b.pop(1).int()
    try:
        return enumType(v)
    except ValueError:
        raise FormatError(f"unknown {enumType.__name__} byte 0x{v:02x}")


def checkEnum(v, enumType, fieldName):
    """
    Coerce v to the enumeration, raising a ConstructionError if it is not a
    member.
    """
    try:
        return enumType(v)
    except ValueError:
        raise ConstructionError(f"invalid {fieldName} {v!r}")


class LengthPrefixedString:
    """
    A UTF-8 string preceded by its encoded byte length. The length prefix is a
    single byte unless otherwise specified. The maximum length is only
    enforced when the string is serialized.
    """

    def __init__(
        self, content, prefixBytes=1, maxLengthBytes=MAX_STRING_LENGTH_BYTES
    ):
        """
        Args:
            content (str): The string.
            prefixBytes (int): The width of the length prefix.
            maxLengthBytes (int): The maximum encoded length.
        """
        self.content = content
        self.prefixBytes = prefixBytes
        self.maxLengthBytes = maxLengthBytes

    def serialize(self):
        """
        Returns:
            ByteArray: The length prefix and the UTF-8 bytes.
        """
        encoded = self.content.encode("utf-8")
        if len(encoded) > self.maxLengthBytes:
            raise ConstructionError(
                f"String length exceeds maximum bytes {self.maxLengthBytes}"
            )
        b = writeUint(len(encoded), self.prefixBytes)
        b += encoded
        return b

    @staticmethod
    def deserialize(b, prefixBytes=1, maxLengthBytes=MAX_STRING_LENGTH_BYTES):
        """
        Args:
            b (ByteArray): The read buffer.
            prefixBytes (int): The width of the length prefix.
            maxLengthBytes (int): The maximum encoded length.

        Returns:
            LengthPrefixedString: The string.
        """
        strLen = readUint(b, prefixBytes)
        if strLen > maxLengthBytes:
            raise FormatError(
                f"String length {strLen} exceeds maximum bytes {maxLengthBytes}"
            )
        try:
            content = b.pop(strLen).bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"invalid UTF-8 string: {e}")
        return LengthPrefixedString(content, prefixBytes, maxLengthBytes)

    def __eq__(self, other):
        if isinstance(other, LengthPrefixedString):
            return self.content == other.content
        if isinstance(other, str):
            return self.content == other
        return False

    def __hash__(self):
        return hash(self.content)

    def __len__(self):
        return len(self.content.encode("utf-8"))

    def __str__(self):
        return self.content

    def __repr__(self):
        return f"LengthPrefixedString({self.content!r})"


class LengthPrefixedList(list):
    """
    An ordered list of messages preceded by a 4-byte element count.
    """

    def serialize(self):
        """
        Returns:
            ByteArray: The count followed by each element's serialization.
        """
        b = writeUint(len(self), LIST_COUNT_BYTES)
        for item in self:
            b += item.serialize()
        return b

    @staticmethod
    def deserialize(b, elementClass):
        """
        Args:
            b (ByteArray): The read buffer.
            elementClass (class): A type with a static deserialize(b) method.

        Returns:
            LengthPrefixedList: The decoded elements, in order.
        """
        count = readUint(b, LIST_COUNT_BYTES)
        # Every element is at least one byte, so a count larger than the
        # remaining buffer cannot be valid.
        if count > len(b):
            raise FormatError(
                f"list count {count} exceeds remaining buffer length {len(b)}"
            )
        return LengthPrefixedList(elementClass.deserialize(b) for _ in range(count))
