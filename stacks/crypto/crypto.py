"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
See LICENSE for details

Cryptographic functions.
"""

import hashlib

import coincurve

from stacks import StacksError
from stacks.util.encode import ByteArray


SHA256_SIZE = 32
SHA512_256_SIZE = 32
RIPEMD160_SIZE = 20
PRIVKEY_SIZE = 32
PUBKEY_COMPRESSED_LEN = 33
PUBKEY_LEN = 65
RECOVERABLE_SIG_LEN = 65

# A private key serialized with this suffix byte derives a compressed public
# key.
COMPRESSED_SUFFIX = 0x01


class KeyLengthError(StacksError):
    """
    A KeyLengthError indicates a key or hash input that is of an unexpected
    length.
    """

    pass


def sha256(b):
    """
    The SHA-256 digest of the input.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 32-byte hash.
    """
    return ByteArray(hashlib.sha256(bytes(b)).digest())


def sha512_256(b):
    """
    The SHA-512/256 digest of the input. This is the hash that identifies
    transactions and drives the signature hash chain.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 32-byte hash.
    """
    return ByteArray(hashlib.new("sha512_256", bytes(b)).digest())


def hash160(b):
    """
    A RIPEMD160 hash of the sha256 hash of the input.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 20-byte hash.
    """
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(bytes(b)).digest())
    return ByteArray(h.digest())


def txidFromData(b):
    """
    The transaction ID of the serialized transaction.

    Args:
        b (byte-like): The serialized transaction.

    Returns:
        str: The hex-encoded SHA-512/256 digest.
    """
    return sha512_256(b).hex()


class PublicKey:
    """
    A secp256k1 public key in either SEC encoding. The encoding that was
    provided is retained, since it is part of what gets hashed into an address
    and what gets signalled in a spending condition.
    """

    def __init__(self, b):
        """
        Args:
            b (byte-like or str): A 33-byte compressed or 65-byte uncompressed
                SEC-encoded key. Strings are interpreted as hexadecimal.
        """
        b = ByteArray(b)
        if len(b) not in (PUBKEY_COMPRESSED_LEN, PUBKEY_LEN):
            raise KeyLengthError(f"invalid public key length {len(b)}")
        try:
            self.key = coincurve.PublicKey(b.bytes())
        except ValueError as e:
            raise StacksError(f"invalid public key {b.hex()}: {e}")
        self.data = b

    @staticmethod
    def fromPrivateKey(privKey):
        """
        Derive the public key for the private key. A hex string or bytes
        private key with the compression suffix yields a compressed key.

        Args:
            privKey (PrivateKey or str or byte-like): The private key.

        Returns:
            PublicKey: The public key.
        """
        if not isinstance(privKey, PrivateKey):
            privKey = PrivateKey(privKey)
        return privKey.pub()

    def compressed(self):
        """
        Whether the key is SEC compressed.

        Returns:
            bool: True for a 33-byte key.
        """
        return len(self.data) == PUBKEY_COMPRESSED_LEN

    def serialize(self):
        """
        The SEC-encoded public key.

        Returns:
            ByteArray: The key bytes.
        """
        return self.data.copy()

    @staticmethod
    def deserialize(b):
        """
        Read a SEC-encoded public key from the front of the buffer. The prefix
        byte determines the length.

        Args:
            b (ByteArray): The buffer.

        Returns:
            PublicKey: The key.
        """
        prefix = b[0] if len(b) else None
        keyLen = PUBKEY_LEN if prefix == 0x04 else PUBKEY_COMPRESSED_LEN
        return PublicKey(b.pop(keyLen))

    def hash160(self):
        """
        The hash160 of the encoded key.

        Returns:
            ByteArray: A 20-byte hash.
        """
        return hash160(self.data.b)

    def hex(self):
        return self.data.hex()

    def __str__(self):
        return self.hex()

    def __repr__(self):
        return f"PublicKey({self.hex()})"

    def __eq__(self, other):
        return isinstance(other, PublicKey) and self.data == other.data

    def __hash__(self):
        return hash(self.data)

    def __deepcopy__(self, memo):
        return PublicKey(self.data.copy())


class PrivateKey:
    """
    A secp256k1 private key. A 33-byte encoding with a trailing 0x01 indicates
    that the corresponding public key is used in compressed form.
    """

    def __init__(self, b):
        """
        Args:
            b (byte-like or str): The 32-byte key, optionally followed by the
                compression suffix. Strings are interpreted as hexadecimal.
        """
        b = ByteArray(b)
        if len(b) == PRIVKEY_SIZE + 1:
            if b[PRIVKEY_SIZE] != COMPRESSED_SUFFIX:
                raise KeyLengthError(
                    f"invalid private key compression suffix {b[PRIVKEY_SIZE]:02x}"
                )
            self.compressed = True
        elif len(b) == PRIVKEY_SIZE:
            self.compressed = False
        else:
            raise KeyLengthError(f"invalid private key length {len(b)}")
        self.data = b
        try:
            self.key = coincurve.PrivateKey(b[:PRIVKEY_SIZE].bytes())
        except ValueError as e:
            raise StacksError(f"invalid private key: {e}")

    @staticmethod
    def makeRandom(compressed=True):
        """
        Generate a new random private key.

        Args:
            compressed (bool): Whether the public key should be compressed.

        Returns:
            PrivateKey: The new key.
        """
        b = ByteArray(coincurve.PrivateKey().secret)
        if compressed:
            b += bytes([COMPRESSED_SUFFIX])
        return PrivateKey(b)

    def pub(self):
        """
        The public key, compressed if the private key carries the compression
        suffix.

        Returns:
            PublicKey: The public key.
        """
        return PublicKey(self.key.public_key.format(compressed=self.compressed))

    def sign(self, inHash):
        """
        Create a recoverable ECDSA signature over the 32-byte hash. The nonce
        is derived deterministically (RFC 6979) and S is normalized to the
        lower half of the curve order.

        Args:
            inHash (byte-like or str): The 32-byte digest to sign.

        Returns:
            ByteArray: 65 bytes, recovery ID followed by R and S.
        """
        inHash = ByteArray(inHash)
        if len(inHash) != SHA512_256_SIZE:
            raise KeyLengthError(f"can only sign 32-byte digests, got {len(inHash)}")
        sig = self.key.sign_recoverable(inHash.bytes(), hasher=None)
        # coincurve orders the recovery ID last.
        return ByteArray(sig[64:]) + sig[:64]

    def hex(self):
        return self.data.hex()

    def __str__(self):
        return self.hex()

    def __repr__(self):
        # Don't print the secret.
        return f"PrivateKey(compressed={self.compressed})"


def recoverPublicKey(inHash, signature, compressed=True):
    """
    Recover the public key that produced a recoverable signature.

    Args:
        inHash (byte-like): The 32-byte digest that was signed.
        signature (byte-like): 65 bytes, recovery ID followed by R and S.
        compressed (bool): The encoding of the returned key.

    Returns:
        PublicKey: The signing key.
    """
    signature = ByteArray(signature)
    if len(signature) != RECOVERABLE_SIG_LEN:
        raise KeyLengthError(f"invalid signature length {len(signature)}")
    sig = signature[1:].bytes() + signature[:1].bytes()
    try:
        key = coincurve.PublicKey.from_signature_and_message(
            sig, ByteArray(inHash).bytes(), hasher=None
        )
    except Exception as e:
        raise StacksError(f"signature recovery failed: {e}")
    return PublicKey(key.format(compressed=compressed))
