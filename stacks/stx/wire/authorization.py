"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Spending conditions, authorizations, and the signature hash chain.

Every signer signs a hash that commits to the signatures before it. Signing
starts from the hash of the transaction with its authorization cleared, and
each signature advances the hash:

    preSign = SHA512/256(curSigHash || authType || feeRate || nonce)
    nextSigHash = SHA512/256(preSign || keyEncoding || signature)

The origin signs first. A sponsor then signs over the origin's final hash.
"""

import copy

from stacks import ConstructionError, FormatError, SigningPreconditionError
from stacks.crypto import crypto
from stacks.stx.constants import (
    HASH160_LENGTH_BYTES,
    MULTI_SIG_HASH_MODES,
    RECOVERABLE_ECDSA_SIG_LENGTH_BYTES,
    SINGLE_SIG_HASH_MODES,
    AddressHashMode,
    AuthFieldType,
    AuthType,
    PubKeyEncoding,
)
from stacks.stx.wire.wire import (
    LengthPrefixedList,
    checkEnum,
    readEnum,
    readUint,
    writeUint,
)
from stacks.util import helpers
from stacks.util.encode import ByteArray


log = helpers.getLogger("AUTH")

# Width of a multi-sig condition's required signature count.
SIGS_REQUIRED_BYTES = 2


class MessageSignature:
    """
    A 65-byte recoverable secp256k1 signature, recovery ID first.
    """

    def __init__(self, data):
        """
        Args:
            data (bytes-like or str): The signature bytes.
        """
        data = ByteArray(data)
        if len(data) != RECOVERABLE_ECDSA_SIG_LENGTH_BYTES:
            raise ConstructionError(
                f"message signature must be {RECOVERABLE_ECDSA_SIG_LENGTH_BYTES}"
                f" bytes, got {len(data)}"
            )
        self.data = data

    @staticmethod
    def empty():
        """
        The all-zero placeholder carried by an unsigned condition.
        """
        return MessageSignature(ByteArray(length=RECOVERABLE_ECDSA_SIG_LENGTH_BYTES))

    def isEmpty(self):
        return self.data.iszero()

    def serialize(self):
        return self.data.copy()

    @staticmethod
    def deserialize(b):
        return MessageSignature(b.pop(RECOVERABLE_ECDSA_SIG_LENGTH_BYTES))

    def hex(self):
        return self.data.hex()

    def __eq__(self, other):
        return isinstance(other, MessageSignature) and self.data == other.data

    def __repr__(self):
        return f"MessageSignature({self.hex()})"


def keyEncodingFor(pubKey):
    """
    The wire encoding flag of the public key.

    Args:
        pubKey (crypto.PublicKey): The key.

    Returns:
        PubKeyEncoding: The encoding.
    """
    if pubKey.compressed():
        return PubKeyEncoding.Compressed
    return PubKeyEncoding.Uncompressed


def signerHash(hashMode, pubKey):
    """
    The signer hash a single-sig spending condition commits to.

    Args:
        hashMode (AddressHashMode): A single-sig hash mode.
        pubKey (crypto.PublicKey): The signing key.

    Returns:
        ByteArray: The 20-byte signer hash.
    """
    keyHash = pubKey.hash160()
    if hashMode == AddressHashMode.SerializeP2PKH:
        return keyHash
    if hashMode == AddressHashMode.SerializeP2WPKH:
        # Hash of the version 0 witness program for the key hash.
        return crypto.hash160((ByteArray("0014") + keyHash).b)
    raise ConstructionError(f"hash mode {hashMode!r} is not a single-sig mode")


class TransactionAuthField:
    """
    One entry of a multi-sig spending condition. Each field is either a public
    key that did not sign, or a signature from which the key is recovered.
    """

    def __init__(self, fieldType, data):
        """
        Args:
            fieldType (AuthFieldType): The field type.
            data (crypto.PublicKey or MessageSignature): The field content.
        """
        self.fieldType = checkEnum(fieldType, AuthFieldType, "auth field type")
        if self.isPublicKey() and not isinstance(data, crypto.PublicKey):
            raise ConstructionError("public key auth field requires a PublicKey")
        if not self.isPublicKey() and not isinstance(data, MessageSignature):
            raise ConstructionError("signature auth field requires a MessageSignature")
        self.data = data

    @staticmethod
    def fromPublicKey(pubKey):
        fieldType = (
            AuthFieldType.PublicKeyCompressed
            if pubKey.compressed()
            else AuthFieldType.PublicKeyUncompressed
        )
        return TransactionAuthField(fieldType, pubKey)

    @staticmethod
    def fromSignature(signature, keyEncoding):
        fieldType = (
            AuthFieldType.SignatureCompressed
            if keyEncoding == PubKeyEncoding.Compressed
            else AuthFieldType.SignatureUncompressed
        )
        return TransactionAuthField(fieldType, signature)

    def isPublicKey(self):
        return self.fieldType in (
            AuthFieldType.PublicKeyCompressed,
            AuthFieldType.PublicKeyUncompressed,
        )

    def keyEncoding(self):
        if self.fieldType in (
            AuthFieldType.PublicKeyCompressed,
            AuthFieldType.SignatureCompressed,
        ):
            return PubKeyEncoding.Compressed
        return PubKeyEncoding.Uncompressed

    def serialize(self):
        b = ByteArray(self.fieldType, length=1)
        b += self.data.serialize()
        return b

    @staticmethod
    def deserialize(b):
        fieldType = readEnum(b, AuthFieldType)
        if fieldType == AuthFieldType.PublicKeyCompressed:
            data = crypto.PublicKey(b.pop(crypto.PUBKEY_COMPRESSED_LEN))
        elif fieldType == AuthFieldType.PublicKeyUncompressed:
            data = crypto.PublicKey(b.pop(crypto.PUBKEY_LEN))
        else:
            data = MessageSignature.deserialize(b)
        return TransactionAuthField(fieldType, data)

    def __eq__(self, other):
        return (
            isinstance(other, TransactionAuthField)
            and self.fieldType == other.fieldType
            and self.data == other.data
        )

    def __repr__(self):
        return f"TransactionAuthField({self.fieldType.name}, {self.data})"


def makeSigHashPreSign(curSigHash, authType, feeRate, nonce):
    """
    Bind the current signature hash to the signer's authorization type, fee
    rate and nonce.

    Args:
        curSigHash (ByteArray): The current signature hash.
        authType (AuthType): Standard for the origin, Sponsored for the sponsor.
        feeRate (int): The condition's fee rate.
        nonce (int): The condition's nonce.

    Returns:
        ByteArray: The 32-byte hash to be signed.
    """
    b = ByteArray(curSigHash)
    b += ByteArray(authType, length=1)
    b += writeUint(feeRate, 8)
    b += writeUint(nonce, 8)
    return crypto.sha512_256(b.b)


def makeSigHashPostSign(preSignHash, pubKey, signature):
    """
    Fold a signature into the hash chain.

    Args:
        preSignHash (ByteArray): The hash that was signed.
        pubKey (crypto.PublicKey): The signing key, whose encoding is committed.
        signature (MessageSignature): The signature.

    Returns:
        ByteArray: The next signature hash.
    """
    b = ByteArray(preSignHash)
    b += ByteArray(keyEncodingFor(pubKey), length=1)
    b += signature.data
    return crypto.sha512_256(b.b)


def nextSignature(curSigHash, authType, feeRate, nonce, privateKey):
    """
    Sign the next link in the hash chain.

    Args:
        curSigHash (ByteArray): The current signature hash.
        authType (AuthType): The signer's authorization type flag.
        feeRate (int): The condition's fee rate.
        nonce (int): The condition's nonce.
        privateKey (crypto.PrivateKey): The signing key.

    Returns:
        MessageSignature: The signature.
        ByteArray: The next signature hash.
    """
    preSign = makeSigHashPreSign(curSigHash, authType, feeRate, nonce)
    signature = MessageSignature(privateKey.sign(preSign))
    nextSigHash = makeSigHashPostSign(preSign, privateKey.pub(), signature)
    log.debug(f"signed {preSign.hex()}, next sighash {nextSigHash.hex()}")
    return signature, nextSigHash


def nextVerification(curSigHash, authType, feeRate, nonce, keyEncoding, signature):
    """
    Recover the key that signed the next link in the hash chain.

    Args:
        curSigHash (ByteArray): The current signature hash.
        authType (AuthType): The signer's authorization type flag.
        feeRate (int): The condition's fee rate.
        nonce (int): The condition's nonce.
        keyEncoding (PubKeyEncoding): The encoding of the signing key.
        signature (MessageSignature): The signature.

    Returns:
        crypto.PublicKey: The recovered key.
        ByteArray: The next signature hash.
    """
    preSign = makeSigHashPreSign(curSigHash, authType, feeRate, nonce)
    pubKey = crypto.recoverPublicKey(
        preSign, signature.data, compressed=keyEncoding == PubKeyEncoding.Compressed
    )
    return pubKey, makeSigHashPostSign(preSign, pubKey, signature)


class SpendingCondition:
    """
    The parent class of the spending conditions. A spending condition names
    the signer hash, and carries the nonce, fee rate and signature(s) that
    authorize the spend.
    """

    def __init__(self, hashMode, signer, nonce, feeRate):
        signer = ByteArray(signer)
        if len(signer) != HASH160_LENGTH_BYTES:
            raise ConstructionError(
                f"signer hash must be {HASH160_LENGTH_BYTES} bytes, got {len(signer)}"
            )
        self.hashMode = checkEnum(hashMode, AddressHashMode, "address hash mode")
        self.signer = signer
        self.nonce = nonce
        self.feeRate = feeRate

    def setFeeRate(self, feeRate):
        self.feeRate = feeRate

    def setNonce(self, nonce):
        self.nonce = nonce

    def missingFields(self):
        """
        The names of the fields that must be set before the condition can be
        serialized or signed.

        Returns:
            list(str): The missing field names.
        """
        return [k for k in ("nonce", "feeRate") if getattr(self, k) is None]

    def serializeHeader(self):
        missing = self.missingFields()
        if missing:
            raise ConstructionError(
                f"spending condition missing fields: {', '.join(missing)}"
            )
        b = ByteArray(self.hashMode, length=1)
        b += self.signer
        b += writeUint(self.nonce, 8)
        b += writeUint(self.feeRate, 8)
        return b

    @staticmethod
    def deserialize(b):
        """
        Decode the next spending condition in the buffer. The hash mode
        determines whether it is single-sig or multi-sig.

        Args:
            b (ByteArray): The read buffer.

        Returns:
            SpendingCondition: The condition.
        """
        hashMode = readEnum(b, AddressHashMode)
        signer = b.pop(HASH160_LENGTH_BYTES)
        nonce = readUint(b, 8)
        feeRate = readUint(b, 8)
        if hashMode in SINGLE_SIG_HASH_MODES:
            keyEncoding = readEnum(b, PubKeyEncoding)
            signature = MessageSignature.deserialize(b)
            return SingleSigSpendingCondition(
                hashMode, signer, nonce, feeRate, keyEncoding, signature
            )
        if hashMode in MULTI_SIG_HASH_MODES:
            fields = LengthPrefixedList.deserialize(b, TransactionAuthField)
            signaturesRequired = readUint(b, SIGS_REQUIRED_BYTES)
            return MultiSigSpendingCondition(
                hashMode, signer, nonce, feeRate, fields, signaturesRequired
            )
        raise FormatError(f"unhandled hash mode {hashMode!r}")

    def __eq__(self, other):
        return isinstance(other, SpendingCondition) and self.serialize() == other.serialize()


class SingleSigSpendingCondition(SpendingCondition):
    """
    A spending condition authorized by one key.
    """

    def __init__(
        self,
        hashMode,
        signer,
        nonce,
        feeRate,
        keyEncoding=PubKeyEncoding.Compressed,
        signature=None,
    ):
        """
        Args:
            hashMode (AddressHashMode): P2PKH or P2WPKH.
            signer (bytes-like): The 20-byte signer hash.
            nonce (int): The account nonce.
            feeRate (int): The fee rate.
            keyEncoding (PubKeyEncoding): The encoding of the signing key.
            signature (MessageSignature): The signature. Empty if not provided.
        """
        super().__init__(hashMode, signer, nonce, feeRate)
        if self.hashMode not in SINGLE_SIG_HASH_MODES:
            raise ConstructionError(
                f"hash mode {self.hashMode!r} is not a single-sig mode"
            )
        self.keyEncoding = checkEnum(keyEncoding, PubKeyEncoding, "key encoding")
        self.signature = signature if signature else MessageSignature.empty()

    @staticmethod
    def fromPublicKey(hashMode, pubKey, nonce, feeRate):
        """
        Create an unsigned condition for the public key.

        Args:
            hashMode (AddressHashMode): P2PKH or P2WPKH.
            pubKey (crypto.PublicKey or str): The signing key.
            nonce (int): The account nonce.
            feeRate (int): The fee rate.

        Returns:
            SingleSigSpendingCondition: The condition.
        """
        if not isinstance(pubKey, crypto.PublicKey):
            pubKey = crypto.PublicKey(pubKey)
        return SingleSigSpendingCondition(
            hashMode,
            signerHash(hashMode, pubKey),
            nonce,
            feeRate,
            keyEncodingFor(pubKey),
        )

    def isSigned(self):
        return not self.signature.isEmpty()

    def clear(self):
        """
        A copy with the nonce, fee rate and signature zeroed, as committed to
        by the initial signature hash.

        Returns:
            SingleSigSpendingCondition: The cleared condition.
        """
        return SingleSigSpendingCondition(
            self.hashMode, self.signer, 0, 0, self.keyEncoding, MessageSignature.empty()
        )

    def appendSignature(self, signature, pubKey):
        if signerHash(self.hashMode, pubKey) != self.signer:
            raise SigningPreconditionError(
                f"signing key {pubKey} does not match signer {self.signer.hex()}"
            )
        self.keyEncoding = keyEncodingFor(pubKey)
        self.signature = signature

    def verify(self, curSigHash, authType):
        """
        Check the signature against the signer hash.

        Args:
            curSigHash (ByteArray): The signature hash before this condition.
            authType (AuthType): The authorization type flag this condition
                was signed with.

        Returns:
            ByteArray: The next signature hash.
        """
        if not self.isSigned():
            raise SigningPreconditionError("spending condition is not signed")
        pubKey, nextSigHash = nextVerification(
            curSigHash,
            authType,
            self.feeRate,
            self.nonce,
            self.keyEncoding,
            self.signature,
        )
        if signerHash(self.hashMode, pubKey) != self.signer:
            raise SigningPreconditionError(
                f"signature does not match signer {self.signer.hex()}"
            )
        return nextSigHash

    def serialize(self):
        b = self.serializeHeader()
        b += ByteArray(self.keyEncoding, length=1)
        b += self.signature.serialize()
        return b

    def __repr__(self):
        return (
            f"SingleSigSpendingCondition({self.hashMode.name}, {self.signer.hex()}, "
            f"nonce={self.nonce}, feeRate={self.feeRate}, signed={self.isSigned()})"
        )


class MultiSigSpendingCondition(SpendingCondition):
    """
    A spending condition authorized by a threshold of keys. The fields list
    each key in order, either as a signature or, for keys that did not sign,
    as the public key itself.
    """

    def __init__(
        self, hashMode, signer, nonce, feeRate, fields=None, signaturesRequired=1
    ):
        super().__init__(hashMode, signer, nonce, feeRate)
        if self.hashMode not in MULTI_SIG_HASH_MODES:
            raise ConstructionError(
                f"hash mode {self.hashMode!r} is not a multi-sig mode"
            )
        self.fields = LengthPrefixedList(fields or [])
        self.signaturesRequired = signaturesRequired

    def signatureCount(self):
        return sum(1 for f in self.fields if not f.isPublicKey())

    def isSigned(self):
        return self.signatureCount() >= self.signaturesRequired

    def clear(self):
        return MultiSigSpendingCondition(
            self.hashMode, self.signer, 0, 0, [], self.signaturesRequired
        )

    def appendSignature(self, signature, pubKey):
        self.fields.append(
            TransactionAuthField.fromSignature(signature, keyEncodingFor(pubKey))
        )

    def appendPublicKey(self, pubKey):
        self.fields.append(TransactionAuthField.fromPublicKey(pubKey))

    def verify(self, curSigHash, authType):
        """
        Walk the fields, advancing the signature hash over each signature, and
        check that enough signatures are present.

        Args:
            curSigHash (ByteArray): The signature hash before this condition.
            authType (AuthType): The authorization type flag.

        Returns:
            ByteArray: The signature hash after the last signature.
        """
        sigHash = curSigHash
        for field in self.fields:
            if field.isPublicKey():
                continue
            _, sigHash = nextVerification(
                sigHash,
                authType,
                self.feeRate,
                self.nonce,
                field.keyEncoding(),
                field.data,
            )
        if not self.isSigned():
            raise SigningPreconditionError(
                f"multi-sig condition has {self.signatureCount()} of "
                f"{self.signaturesRequired} required signatures"
            )
        return sigHash

    def serialize(self):
        b = self.serializeHeader()
        b += self.fields.serialize()
        b += writeUint(self.signaturesRequired, SIGS_REQUIRED_BYTES)
        return b

    def __repr__(self):
        return (
            f"MultiSigSpendingCondition({self.hashMode.name}, {self.signer.hex()}, "
            f"nonce={self.nonce}, feeRate={self.feeRate}, "
            f"signatures={self.signatureCount()}/{self.signaturesRequired})"
        )


def emptySponsorCondition():
    """
    The sponsor placeholder committed to by the initial signature hash of a
    sponsored transaction.
    """
    return SingleSigSpendingCondition(
        AddressHashMode.SerializeP2PKH,
        ByteArray(length=HASH160_LENGTH_BYTES),
        0,
        0,
        PubKeyEncoding.Compressed,
        MessageSignature.empty(),
    )


class Authorization:
    """
    The parent class of the authorization variants.
    """

    authType = None

    def conditions(self):
        raise NotImplementedError("conditions must be implemented by child class")

    def missingFields(self):
        missing = []
        for name, cond in self.conditions():
            if cond is None:
                missing.append(name)
                continue
            missing.extend(f"{name}.{k}" for k in cond.missingFields())
        return missing

    def serialize(self):
        """
        Returns:
            ByteArray: The auth type byte followed by the spending conditions.
        """
        missing = self.missingFields()
        if missing:
            raise ConstructionError(f"authorization missing fields: {', '.join(missing)}")
        b = ByteArray(self.authType, length=1)
        for _, cond in self.conditions():
            b += cond.serialize()
        return b

    @staticmethod
    def deserialize(b):
        authType = readEnum(b, AuthType)
        if authType == AuthType.Standard:
            return StandardAuthorization(SpendingCondition.deserialize(b))
        if authType == AuthType.Sponsored:
            origin = SpendingCondition.deserialize(b)
            return SponsoredAuthorization(origin, SpendingCondition.deserialize(b))
        raise FormatError(f"unhandled auth type {authType!r}")

    def copy(self):
        return copy.deepcopy(self)

    def __eq__(self, other):
        return (
            isinstance(other, Authorization)
            and self.authType == other.authType
            and self.conditions() == other.conditions()
        )


class StandardAuthorization(Authorization):
    """
    The origin pays its own fee.
    """

    authType = AuthType.Standard

    def __init__(self, spendingCondition):
        self.spendingCondition = spendingCondition

    def conditions(self):
        return [("spendingCondition", self.spendingCondition)]

    def intoInitialSighashAuth(self):
        if self.spendingCondition is None:
            raise SigningPreconditionError("authorization has no spending condition")
        return StandardAuthorization(self.spendingCondition.clear())

    def __repr__(self):
        return f"StandardAuthorization({self.spendingCondition!r})"


class SponsoredAuthorization(Authorization):
    """
    A sponsor pays the fee on behalf of the origin. The sponsor condition may
    be set after the origin has signed.
    """

    authType = AuthType.Sponsored

    def __init__(self, spendingCondition, sponsorSpendingCondition=None):
        self.spendingCondition = spendingCondition
        self.sponsorSpendingCondition = sponsorSpendingCondition

    def conditions(self):
        return [
            ("spendingCondition", self.spendingCondition),
            ("sponsorSpendingCondition", self.sponsorSpendingCondition),
        ]

    def setSponsor(self, sponsorSpendingCondition):
        self.sponsorSpendingCondition = sponsorSpendingCondition

    def intoInitialSighashAuth(self):
        if self.spendingCondition is None:
            raise SigningPreconditionError("authorization has no spending condition")
        return SponsoredAuthorization(
            self.spendingCondition.clear(), emptySponsorCondition()
        )

    def __repr__(self):
        return (
            f"SponsoredAuthorization({self.spendingCondition!r}, "
            f"{self.sponsorSpendingCondition!r})"
        )
