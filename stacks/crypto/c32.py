"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

c32check encoding. c32 is a base-32 encoding using Crockford's alphabet, and
c32check appends a 4-byte double-SHA256 checksum that covers a version byte.
Stacks addresses are the letter S followed by the c32check encoding of the
address version and the 20-byte hash160.
"""

import hashlib

from stacks import StacksError


C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
CHECKSUM_LEN = 4
HASH160_LEN = 20
ADDRESS_PREFIX = "S"
MAX_VERSION = 31


class C32Error(StacksError):
    """
    A string could not be decoded as c32, or a value cannot be encoded.
    """

    pass


def normalize(s):
    """
    Upper-case the string and replace the letters that Crockford's alphabet
    treats as aliases (O for 0, I and L for 1).

    Args:
        s (str): A c32 string.

    Returns:
        str: The normalized string.
    """
    return s.upper().replace("O", "0").replace("L", "1").replace("I", "1")


def c32encode(b):
    """
    Encode the bytes as c32. Every leading zero byte is encoded as a leading
    zero character.

    Args:
        b (bytes-like): The bytes to encode.

    Returns:
        str: The c32 string.
    """
    b = bytes(b)
    num = int.from_bytes(b, "big")
    chars = []
    while num > 0:
        num, rem = divmod(num, 32)
        chars.append(C32_ALPHABET[rem])
    leadingZeros = len(b) - len(b.lstrip(b"\x00"))
    chars.extend(C32_ALPHABET[0] * leadingZeros)
    return "".join(reversed(chars))


def c32decode(s):
    """
    Decode the c32 string. Every leading zero character is decoded as a leading
    zero byte.

    Args:
        s (str): The c32 string.

    Returns:
        bytes: The decoded bytes.
    """
    s = normalize(s)
    num = 0
    for ch in s:
        idx = C32_ALPHABET.find(ch)
        if idx < 0:
            raise C32Error(f"not a c32-encoded string: {s!r}")
        num = num * 32 + idx
    leadingZeros = len(s) - len(s.lstrip(C32_ALPHABET[0]))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big")
    return b"\x00" * leadingZeros + body


def c32checksum(b):
    """
    The first four bytes of the double-SHA256 of the input.

    Args:
        b (bytes-like): The versioned data.

    Returns:
        bytes: The checksum.
    """
    return hashlib.sha256(hashlib.sha256(bytes(b)).digest()).digest()[:CHECKSUM_LEN]


def c32checkEncode(version, data):
    """
    Encode the version and data with a checksum.

    Args:
        version (int): The version, 0 to 31.
        data (bytes-like): The data.

    Returns:
        str: The version character followed by the c32 encoding of the data
            and checksum.
    """
    if version < 0 or version > MAX_VERSION:
        raise C32Error(f"invalid c32check version {version}")
    data = bytes(data)
    checksum = c32checksum(bytes([version]) + data)
    return C32_ALPHABET[version] + c32encode(data + checksum)


def c32checkDecode(s):
    """
    Decode and verify a c32check string.

    Args:
        s (str): The c32check string.

    Returns:
        int: The version.
        bytes: The data.
    """
    s = normalize(s)
    if len(s) < 2:
        raise C32Error(f"c32check string too short: {s!r}")
    version = C32_ALPHABET.find(s[0])
    if version < 0:
        raise C32Error(f"invalid c32check version character {s[0]!r}")
    decoded = c32decode(s[1:])
    if len(decoded) < CHECKSUM_LEN:
        raise C32Error(f"c32check string too short: {s!r}")
    data, checksum = decoded[:-CHECKSUM_LEN], decoded[-CHECKSUM_LEN:]
    if c32checksum(bytes([version]) + data) != checksum:
        raise C32Error("invalid c32check string: checksum mismatch")
    return version, data


def c32address(version, hash160):
    """
    Encode a Stacks address.

    Args:
        version (int): The address version.
        hash160 (bytes-like): The 20-byte hash.

    Returns:
        str: The address.
    """
    hash160 = bytes(hash160)
    if len(hash160) != HASH160_LEN:
        raise C32Error(
            f"address hash must be {HASH160_LEN} bytes, got {len(hash160)}"
        )
    return ADDRESS_PREFIX + c32checkEncode(version, hash160)


def c32addressDecode(address):
    """
    Decode a Stacks address.

    Args:
        address (str): The address.

    Returns:
        int: The address version.
        bytes: The 20-byte hash160.
    """
    if len(address) <= 5:
        raise C32Error(f"invalid c32 address {address!r}: invalid length")
    if address[0].upper() != ADDRESS_PREFIX:
        raise C32Error(f"invalid c32 address {address!r}: must start with 'S'")
    version, data = c32checkDecode(address[1:])
    if len(data) != HASH160_LEN:
        raise C32Error(
            f"invalid c32 address {address!r}: hash length {len(data)} != {HASH160_LEN}"
        )
    return version, data
