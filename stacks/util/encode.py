"""
Copyright (c) 2020, Brian Stafford
Copyright (c) 2020, the Decred developers
See LICENSE for details

A class that wraps bytearray and provides some convenient operators. A
ByteArray doubles as the read cursor for every deserializer in the package:
deserializers pop the bytes they consume from the front of the buffer.
"""

from stacks import FormatError, StacksError


def intToBytes(i, signed=False):
    """
    Encodes an integer to bytes.

    Args:
        i (int): The integer.
        signed (bool): Whether to encode as a signed integer.

    Returns:
        bytearray: The encoded integer.
    """
    length = ((i + ((i * signed) < 0)).bit_length() + 7 + signed) // 8
    return bytearray(i.to_bytes(length, byteorder="big", signed=signed))


def intFromBytes(b, signed=False):
    """
    Decodes an integer from bytes.

    Args:
        b (bytes-like): The encoded integer.
        signed (bool): Whether to decode as a signed integer.

    Returns:
        int: The decoded integer.
    """
    return int.from_bytes(b, "big", signed=signed)


def decodeBA(b, copy=False):
    """
    Decode into a bytearray.

    Args:
        b (str, bytes-like, ByteArray, int, list(int)): The value to decode to
            a bytearray. Strings are interpreted as hexadecimal. Integers are
            minimally encoded to an unsigned integer.

    Returns:
        bytearray: The decoded bytes.
    """
    if isinstance(b, ByteArray):
        return bytearray(b.b) if copy else b.b
    if isinstance(b, bytearray):
        return bytearray(b) if copy else b
    if isinstance(b, bytes):
        return bytearray(b)
    if isinstance(b, int):
        return intToBytes(b) if b else bytearray([0])
    if isinstance(b, str):
        return bytearray.fromhex(b)
    if hasattr(b, "__iter__"):
        return bytearray(b)
    raise TypeError("decodeBA: unknown type %s" % type(b))


class ByteArray:
    """
    ByteArray is a bytearray manager. It implements a subset of bytearray's
    operators and provides some convenience decodings on the fly, so
    operations work with various types of input. An important difference
    between ByteArray and bytearray is that an integer argument to the
    ByteArray constructor will result in the shortest possible byte
    representation of the integer, where for bytearray an int argument results
    in a zero-valued bytearray of said length. To get a zero-valued or
    zero-padded ByteArray of length n, use the `length` keyword argument.
    """

    def __init__(self, b=b"", copy=True, length=None):
        """
        Set copy to False if you want to share the memory with another
        bytearray/ByteArray. If the type of b is not bytearray or ByteArray,
        copy has no effect.
        """
        if length:
            self.b = decodeBA(ByteArray(bytearray(length)) | b, copy=False)
        else:
            self.b = decodeBA(b, copy=copy)

    def comp(self, a):
        """
        comp gets the underlying bytearray and length of both this ByteArray
        and a.

        Args:
            a (ByteArray): The other ByteArray.

        Returns:
            bytearray: The other ByteArray's bytearray.
            int: The other ByteArray's length.
            bytearray: This ByteArray's bytearray.
            int: This ByteArray's length.
        """
        a = decodeBA(a)
        aLen, bLen = len(a), len(self.b)
        if aLen > bLen:
            raise StacksError("decode: invalid length %i > %i" % (aLen, bLen))
        return a, aLen, self.b, bLen

    def __eq__(self, a):
        try:
            return bytearray.__eq__(self.b, decodeBA(a))
        except Exception:
            return False

    def __ne__(self, a):
        return not self.__eq__(a)

    def __repr__(self):
        return "ByteArray(" + self.hex() + ")"

    def __len__(self):
        return len(self.b)

    def __or__(self, a):
        a, aLen, b, bLen = self.comp(a)
        b = ByteArray(b)
        for i in range(bLen):
            b[bLen - i - 1] |= a[aLen - i - 1] if i < aLen else 0
        return b

    def __add__(self, a):
        return self.__iadd__(a)

    def __iadd__(self, a):
        """append the bytes and return a new ByteArray"""
        a = decodeBA(a)
        return ByteArray(self.b + a)

    def __getitem__(self, k):
        if isinstance(k, slice):
            return ByteArray(self.b[k.start : k.stop : k.step], copy=False)
        return self.b[k]

    def __setitem__(self, i, v):
        v = decodeBA(v, copy=False)
        if i + len(v) > len(self.b):
            raise StacksError("source bytes too long")
        for j in range(len(v)):
            self.b[i + j] = v[j]

    def __hash__(self):
        """Enables ByteArray to be a dict key."""
        return hash(bytes(self.b))

    def hex(self):
        """
        A hexadecimal string representation of the bytes.

        Returns:
            str: The hex bytes.
        """
        return self.b.hex()

    def zero(self):
        """
        Sets the bytes of the underlying bytearray to zero. The benefit of
        zeroing is that the info is destroyed immediately, rather than relying
        on the garbage collector.
        """
        for i in range(len(self.b)):
            self.b[i] = 0

    def iszero(self):
        """
        True if all bytes are zero.
        """
        return all((v == 0 for v in self.b))

    def int(self):
        """The bytes as an integer."""
        return intFromBytes(self.b)

    def bytes(self):
        """The bytes as Python `bytes`."""
        return bytes(self.b)

    def copy(self):
        """A copy of the ByteArray."""
        return ByteArray(self.b)

    def pop(self, n):
        """
        Remove n bytes from the beginning of the ByteArray, returning the bytes.

        Args:
            n (int): The number of bytes to consume.

        Returns:
            ByteArray: The consumed bytes.

        Raises:
            FormatError: Fewer than n bytes remain.
        """
        if n > len(self.b):
            raise FormatError(
                "unexpected end of buffer: wanted %d bytes, %d remaining"
                % (n, len(self.b))
            )
        b = self[:n]
        self.b = self.b[n:]
        return b
