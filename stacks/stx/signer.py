"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

TransactionSigner walks a transaction through its signing states, carrying the
signature hash from one signer to the next.
"""

from enum import IntEnum

from stacks import SigningPreconditionError
from stacks.crypto.crypto import PrivateKey, PublicKey
from stacks.util import helpers


log = helpers.getLogger("SIGNER")


class SignerState(IntEnum):
    Unsigned = 0
    # A multi-sig origin with some, but not enough, signatures.
    OriginSigning = 1
    OriginSigned = 2
    SponsorSigned = 3


class TransactionSigner:
    """
    Signs a StacksTransaction in place. The origin signs first. A sponsored
    transaction is then signed by the sponsor, possibly by a different party
    using TransactionSigner.forSponsor.
    """

    def __init__(self, transaction):
        """
        Args:
            transaction (StacksTransaction): The transaction to sign.
        """
        self.transaction = transaction
        self.sigHash = transaction.signBegin()
        self.state = SignerState.Unsigned

    @staticmethod
    def forSponsor(transaction, sponsorSpendingCondition):
        """
        Resume signing an origin-signed transaction as the sponsor. The
        origin's signatures are verified to recover the signature hash the
        sponsor signs over.

        Args:
            transaction (StacksTransaction): An origin-signed sponsored
                transaction.
            sponsorSpendingCondition (SpendingCondition): The sponsor's
                condition.

        Returns:
            TransactionSigner: A signer ready for signSponsor.
        """
        transaction.setSponsor(sponsorSpendingCondition)
        signer = TransactionSigner(transaction)
        signer.sigHash = transaction.verifyOrigin()
        signer.state = SignerState.OriginSigned
        return signer

    def _originStep(self):
        if self.state not in (SignerState.Unsigned, SignerState.OriginSigning):
            raise SigningPreconditionError(
                f"cannot add an origin signature in state {self.state.name}"
            )

    def _originDone(self):
        if self.transaction.originCondition().isSigned():
            self.state = SignerState.OriginSigned
        else:
            self.state = SignerState.OriginSigning

    def signOrigin(self, privateKey):
        """
        Add an origin signature.

        Args:
            privateKey (PrivateKey or str or bytes-like): The signing key.
        """
        self._originStep()
        if not isinstance(privateKey, PrivateKey):
            privateKey = PrivateKey(privateKey)
        self.sigHash = self.transaction.signNextOrigin(self.sigHash, privateKey)
        self._originDone()
        log.debug(f"origin signed, state {self.state.name}")

    def appendOrigin(self, publicKey):
        """
        Record a multi-sig origin key that does not sign.

        Args:
            publicKey (PublicKey or str or bytes-like): The public key.
        """
        if self.state == SignerState.SponsorSigned:
            raise SigningPreconditionError("cannot append an origin key after the sponsor signed")
        if not isinstance(publicKey, PublicKey):
            publicKey = PublicKey(publicKey)
        self.transaction.appendNextOrigin(publicKey)
        self._originDone()

    def signSponsor(self, privateKey):
        """
        Add the sponsor's signature. The origin must be fully signed.

        Args:
            privateKey (PrivateKey or str or bytes-like): The sponsor's key.
        """
        if self.state != SignerState.OriginSigned:
            raise SigningPreconditionError(
                f"cannot add the sponsor signature in state {self.state.name}"
            )
        if not isinstance(privateKey, PrivateKey):
            privateKey = PrivateKey(privateKey)
        self.sigHash = self.transaction.signNextSponsor(self.sigHash, privateKey)
        self.state = SignerState.SponsorSigned
        log.debug("sponsor signed")

    def getTxInComplete(self):
        """
        A copy of the transaction in its current signing state.

        Returns:
            StacksTransaction: The copy.
        """
        return self.transaction.copy()
