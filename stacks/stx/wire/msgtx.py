"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
See LICENSE for details

The Stacks transaction and its signing steps.
"""

import copy

from stacks import ConstructionError, SigningPreconditionError
from stacks.crypto import crypto
from stacks.stx.constants import (
    DEFAULT_CHAIN_ID,
    AnchorMode,
    AuthType,
    PostConditionMode,
    TransactionVersion,
)
from stacks.stx.wire.authorization import (
    Authorization,
    MultiSigSpendingCondition,
    SponsoredAuthorization,
    nextSignature,
)
from stacks.stx.wire.payload import Payload
from stacks.stx.wire.postcondition import PostCondition
from stacks.stx.wire.wire import (
    LengthPrefixedList,
    checkEnum,
    readEnum,
    readUint,
    writeUint,
)
from stacks.util import helpers
from stacks.util.encode import ByteArray


log = helpers.getLogger("MSGTX")

CHAIN_ID_BYTES = 4


class StacksTransaction:
    """
    StacksTransaction is a Stacks transaction. It is constructed from a version,
    an authorization and a payload, and signed in place by the origin and then,
    for a sponsored authorization, by the sponsor.
    """

    def __init__(
        self,
        version,
        auth,
        payload,
        chainId=DEFAULT_CHAIN_ID,
        postConditionMode=PostConditionMode.Deny,
        anchorMode=None,
        postConditions=None,
    ):
        """
        Args:
            version (TransactionVersion): Mainnet or Testnet.
            auth (Authorization): The authorization.
            payload (Payload): The payload.
            chainId (int): The 4-byte chain ID.
            postConditionMode (PostConditionMode): Whether asset transfers not
                covered by a post-condition are allowed.
            anchorMode (AnchorMode): Where the transaction may be mined. If not
                provided, the payload's default is used.
            postConditions (list(PostCondition)): The post-conditions.
        """
        self.version = (
            checkEnum(version, TransactionVersion, "transaction version")
            if version is not None
            else None
        )
        self.chainId = chainId
        self.auth = auth
        self.payload = payload
        if anchorMode is None and payload is not None:
            anchorMode = payload.defaultAnchorMode()
        self.anchorMode = (
            checkEnum(anchorMode, AnchorMode, "anchor mode")
            if anchorMode is not None
            else None
        )
        self.postConditionMode = (
            checkEnum(postConditionMode, PostConditionMode, "post-condition mode")
            if postConditionMode is not None
            else None
        )
        self.postConditions = LengthPrefixedList(postConditions or [])

    def addPostCondition(self, postCondition):
        self.postConditions.append(postCondition)

    def setFeeRate(self, feeRate):
        self.originCondition().setFeeRate(feeRate)

    def setNonce(self, nonce):
        self.originCondition().setNonce(nonce)

    def setSponsor(self, sponsorSpendingCondition):
        """
        Set the sponsor's spending condition. The authorization must be
        sponsored.

        Args:
            sponsorSpendingCondition (SpendingCondition): The sponsor's
                condition.
        """
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningPreconditionError("cannot set sponsor on non-sponsored transaction")
        self.auth.setSponsor(sponsorSpendingCondition)

    def originCondition(self):
        if self.auth is None or self.auth.spendingCondition is None:
            raise SigningPreconditionError("transaction has no origin spending condition")
        return self.auth.spendingCondition

    def missingFields(self):
        """
        The names of the absent fields that prevent serialization.

        Returns:
            list(str): Field names.
        """
        missing = [
            k
            for k in (
                "version",
                "chainId",
                "auth",
                "anchorMode",
                "postConditionMode",
                "payload",
            )
            if getattr(self, k) is None
        ]
        if self.auth is not None:
            missing.extend(f"auth.{k}" for k in self.auth.missingFields())
        for i, pc in enumerate(self.postConditions):
            missing.extend(f"postConditions[{i}].{k}" for k in pc.missingFields())
        return missing

    def serialize(self):
        """
        Serialize the transaction. Field order is version, chain ID,
        authorization, anchor mode, post-condition mode, post-conditions and
        payload.

        Returns:
            ByteArray: The serialized transaction.
        """
        missing = self.missingFields()
        if missing:
            raise ConstructionError(
                f"transaction missing fields: {', '.join(missing)}"
            )
        b = ByteArray(self.version, length=1)
        b += writeUint(self.chainId, CHAIN_ID_BYTES)
        b += self.auth.serialize()
        b += ByteArray(self.anchorMode, length=1)
        b += ByteArray(self.postConditionMode, length=1)
        b += self.postConditions.serialize()
        b += self.payload.serialize()
        return b

    @staticmethod
    def deserialize(b):
        """
        Decode a transaction. A ByteArray is consumed in place; other inputs
        are converted first.

        Args:
            b (ByteArray or bytes-like or str): The serialized transaction.
                Strings are interpreted as hexadecimal.

        Returns:
            StacksTransaction: The transaction.
        """
        if not isinstance(b, ByteArray):
            b = ByteArray(b)
        version = readEnum(b, TransactionVersion)
        chainId = readUint(b, CHAIN_ID_BYTES)
        auth = Authorization.deserialize(b)
        anchorMode = readEnum(b, AnchorMode)
        postConditionMode = readEnum(b, PostConditionMode)
        postConditions = LengthPrefixedList.deserialize(b, PostCondition)
        payload = Payload.deserialize(b)
        return StacksTransaction(
            version,
            auth,
            payload,
            chainId=chainId,
            postConditionMode=postConditionMode,
            anchorMode=anchorMode,
            postConditions=postConditions,
        )

    def copy(self):
        return copy.deepcopy(self)

    def initialSighashBytes(self):
        """
        The serialization of a copy of the transaction with its authorization
        cleared. The transaction is not modified.

        Returns:
            ByteArray: The bytes committed to by the initial signature hash.
        """
        if self.auth is None:
            raise SigningPreconditionError("transaction has no authorization")
        tx = copy.copy(self)
        tx.auth = self.auth.intoInitialSighashAuth()
        return tx.serialize()

    def signBegin(self):
        """
        The initial signature hash, where every signer's chain starts.

        Returns:
            ByteArray: The 32-byte hash.
        """
        sigHash = crypto.sha512_256(self.initialSighashBytes().b)
        log.debug(f"initial sighash {sigHash.hex()}")
        return sigHash

    def signNextOrigin(self, sigHash, privateKey):
        """
        Add the origin's next signature.

        Args:
            sigHash (ByteArray): The current signature hash.
            privateKey (crypto.PrivateKey): The origin's key.

        Returns:
            ByteArray: The next signature hash.
        """
        return self.signAndAppend(
            self.originCondition(), sigHash, AuthType.Standard, privateKey
        )

    def signNextSponsor(self, sigHash, privateKey):
        """
        Add the sponsor's next signature. The origin must have signed.

        Args:
            sigHash (ByteArray): The origin's final signature hash.
            privateKey (crypto.PrivateKey): The sponsor's key.

        Returns:
            ByteArray: The next signature hash.
        """
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningPreconditionError("cannot sign sponsor on non-sponsored transaction")
        if self.auth.sponsorSpendingCondition is None:
            raise SigningPreconditionError("transaction has no sponsor spending condition")
        if not self.originCondition().isSigned():
            raise SigningPreconditionError("origin must sign before the sponsor")
        return self.signAndAppend(
            self.auth.sponsorSpendingCondition, sigHash, AuthType.Sponsored, privateKey
        )

    def signAndAppend(self, condition, curSigHash, authType, privateKey):
        """
        Sign the next link of the hash chain and store the signature in the
        condition.

        Args:
            condition (SpendingCondition): The condition being signed.
            curSigHash (ByteArray): The current signature hash.
            authType (AuthType): The authorization type flag to sign with.
            privateKey (crypto.PrivateKey): The signing key.

        Returns:
            ByteArray: The next signature hash.
        """
        missing = condition.missingFields()
        if missing:
            raise SigningPreconditionError(
                f"cannot sign spending condition missing {', '.join(missing)}"
            )
        if condition.isSigned():
            raise SigningPreconditionError("spending condition is already fully signed")
        signature, nextSigHash = nextSignature(
            curSigHash, authType, condition.feeRate, condition.nonce, privateKey
        )
        condition.appendSignature(signature, privateKey.pub())
        return nextSigHash

    def appendNextOrigin(self, pubKey):
        """
        Record a multi-sig key that will not sign. The signature hash is not
        advanced.

        Args:
            pubKey (crypto.PublicKey): The public key.
        """
        condition = self.originCondition()
        if not isinstance(condition, MultiSigSpendingCondition):
            raise SigningPreconditionError("can only append public keys to multi-sig")
        condition.appendPublicKey(pubKey)

    def verifyOrigin(self):
        """
        Verify the origin's signatures.

        Returns:
            ByteArray: The origin's final signature hash.
        """
        return self.originCondition().verify(self.signBegin(), AuthType.Standard)

    def verifySponsor(self):
        """
        Verify the origin's and then the sponsor's signatures.

        Returns:
            ByteArray: The sponsor's final signature hash.
        """
        if not isinstance(self.auth, SponsoredAuthorization):
            raise SigningPreconditionError("transaction is not sponsored")
        if self.auth.sponsorSpendingCondition is None:
            raise SigningPreconditionError("transaction has no sponsor spending condition")
        sigHash = self.verifyOrigin()
        return self.auth.sponsorSpendingCondition.verify(sigHash, AuthType.Sponsored)

    def hash(self):
        """
        The SHA-512/256 hash of the serialized transaction.

        Returns:
            ByteArray: The transaction hash.
        """
        return crypto.sha512_256(self.serialize().b)

    def txid(self):
        """
        Hex encoded transaction hash.
        """
        return crypto.txidFromData(self.serialize().b)

    def txHex(self):
        return self.serialize().hex()

    def __eq__(self, other):
        return isinstance(other, StacksTransaction) and self.serialize() == other.serialize()

    def __repr__(self):
        return (
            f"StacksTransaction(version={self.version!r}, chainId={self.chainId}, "
            f"auth={self.auth!r}, anchorMode={self.anchorMode!r}, "
            f"postConditionMode={self.postConditionMode!r}, "
            f"postConditions={list(self.postConditions)!r}, payload={self.payload!r})"
        )
