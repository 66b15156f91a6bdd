"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import unittest

from stacks import ConstructionError, FormatError, SigningPreconditionError
from stacks.crypto import crypto
from stacks.stx.constants import (
    AddressHashMode,
    AuthFieldType,
    AuthType,
    PubKeyEncoding,
)
from stacks.stx.wire import authorization as auth
from stacks.util.encode import ByteArray


SECRET_KEY = "edf9aee84d9b7abc145504dde6726c64f369d37ee34ded868fabd876c26570bc01"
PUB_KEY = "03ef788b3830c00abe8f64f62dc32fc863bc0b2cafeb073b6c8e1c7657d9c2c3ab"
PUB_KEY_HASH = "15c31b8c1c11c515e244b75806bac48d1399c775"

# The initial signature hash of the mainnet "test memo" token transfer, the
# hash its origin signed, the signature, and the resulting next hash.
INITIAL_SIGHASH = "65c380798bc26827b885b34fd6c152ab3768198ff8d4c96c0836d6e0ccde7841"
PRESIGN_HASH = "c88555ae6340252b8a291891e6a9f858ebfa4db17b57dddebe5a0f37900f629a"
SIGNATURE = (
    "0004ae1e7a04089e596377ab4a0f74dfbae05c615a8223f1896df0f28fc334dc794f6faed38"
    "abdbc611a0f1816738016afa25b4478e607b4d2a58c3d07925f8e04"
)
NEXT_SIGHASH = "17239301e8d6ee512145f93605f12a97da32d5b1fa87d5173fa1ba3cfceb9730"


def singleSig(nonce=0, feeRate=0):
    return auth.SingleSigSpendingCondition.fromPublicKey(
        AddressHashMode.SerializeP2PKH, PUB_KEY, nonce, feeRate
    )


class TestMessageSignature(unittest.TestCase):
    def test_signature(self):
        empty = auth.MessageSignature.empty()
        self.assertTrue(empty.isEmpty())
        self.assertEqual(empty.hex(), "00" * 65)
        sig = auth.MessageSignature(SIGNATURE)
        self.assertFalse(sig.isEmpty())
        b = sig.serialize()
        self.assertEqual(auth.MessageSignature.deserialize(b), sig)
        with self.assertRaises(ConstructionError):
            auth.MessageSignature("00" * 64)


class TestSpendingCondition(unittest.TestCase):
    def test_single_sig(self):
        cond = singleSig(nonce=1, feeRate=2)
        self.assertEqual(cond.signer.hex(), PUB_KEY_HASH)
        self.assertEqual(cond.keyEncoding, PubKeyEncoding.Compressed)
        self.assertFalse(cond.isSigned())
        b = cond.serialize()
        self.assertEqual(
            b.hex(),
            "00"
            + PUB_KEY_HASH
            + "0000000000000001"
            + "0000000000000002"
            + "00"
            + "00" * 65,
        )
        reCond = auth.SpendingCondition.deserialize(b)
        self.assertEqual(len(b), 0)
        self.assertIsInstance(reCond, auth.SingleSigSpendingCondition)
        self.assertEqual(reCond.hashMode, AddressHashMode.SerializeP2PKH)
        self.assertEqual(reCond.nonce, 1)
        self.assertEqual(reCond.feeRate, 2)
        self.assertTrue(reCond.signature.isEmpty())
        self.assertEqual(reCond, cond)

    def test_uncompressed(self):
        pub = crypto.PrivateKey(SECRET_KEY[:64]).pub()
        cond = auth.SingleSigSpendingCondition.fromPublicKey(
            AddressHashMode.SerializeP2PKH, pub, 0, 0
        )
        self.assertEqual(cond.keyEncoding, PubKeyEncoding.Uncompressed)
        self.assertEqual(cond.signer, pub.hash160())

    def test_p2wpkh(self):
        cond = auth.SingleSigSpendingCondition.fromPublicKey(
            AddressHashMode.SerializeP2WPKH, PUB_KEY, 0, 0
        )
        expSigner = crypto.hash160((ByteArray("0014") + PUB_KEY_HASH).b)
        self.assertEqual(cond.signer, expSigner)
        reCond = auth.SpendingCondition.deserialize(cond.serialize())
        self.assertEqual(reCond.hashMode, AddressHashMode.SerializeP2WPKH)

    def test_clear(self):
        cond = singleSig(nonce=5, feeRate=6)
        cond.signature = auth.MessageSignature(SIGNATURE)
        cleared = cond.clear()
        self.assertEqual(cleared.nonce, 0)
        self.assertEqual(cleared.feeRate, 0)
        self.assertTrue(cleared.signature.isEmpty())
        self.assertEqual(cleared.signer, cond.signer)
        # The original is untouched.
        self.assertEqual(cond.nonce, 5)
        self.assertTrue(cond.isSigned())

    def test_multi_sig(self):
        pub = crypto.PublicKey(PUB_KEY)
        cond = auth.MultiSigSpendingCondition(
            AddressHashMode.SerializeP2SH, "01" * 20, 3, 4, signaturesRequired=2
        )
        cond.appendSignature(auth.MessageSignature(SIGNATURE), pub)
        cond.appendPublicKey(pub)
        self.assertEqual(cond.signatureCount(), 1)
        self.assertFalse(cond.isSigned())
        b = cond.serialize()
        self.assertEqual(b[-2:].hex(), "0002")
        reCond = auth.SpendingCondition.deserialize(b)
        self.assertEqual(len(b), 0)
        self.assertIsInstance(reCond, auth.MultiSigSpendingCondition)
        self.assertEqual(reCond.signaturesRequired, 2)
        self.assertEqual(reCond.fields[0].fieldType, AuthFieldType.SignatureCompressed)
        self.assertEqual(reCond.fields[1].fieldType, AuthFieldType.PublicKeyCompressed)
        self.assertEqual(reCond.fields[1].data, pub)
        self.assertEqual(reCond, cond)

        cleared = cond.clear()
        self.assertEqual(len(cleared.fields), 0)
        self.assertEqual(cleared.signaturesRequired, 2)

    def test_hash_mode_mismatch(self):
        with self.assertRaises(ConstructionError):
            auth.SingleSigSpendingCondition(
                AddressHashMode.SerializeP2SH, PUB_KEY_HASH, 0, 0
            )
        with self.assertRaises(ConstructionError):
            auth.MultiSigSpendingCondition(
                AddressHashMode.SerializeP2PKH, PUB_KEY_HASH, 0, 0
            )
        with self.assertRaises(ConstructionError):
            auth.SingleSigSpendingCondition(9, PUB_KEY_HASH, 0, 0)
        with self.assertRaises(ConstructionError):
            auth.SingleSigSpendingCondition(
                AddressHashMode.SerializeP2PKH, PUB_KEY_HASH[:-2], 0, 0
            )

    def test_missing_fields(self):
        cond = singleSig(nonce=None, feeRate=None)
        self.assertEqual(cond.missingFields(), ["nonce", "feeRate"])
        with self.assertRaises(ConstructionError):
            cond.serialize()

    def test_bad_input(self):
        b = singleSig().serialize()
        b[0] = 0x07
        with self.assertRaises(FormatError):
            auth.SpendingCondition.deserialize(b)
        with self.assertRaises(FormatError):
            auth.SpendingCondition.deserialize(singleSig().serialize()[:-1])


class TestSigHash(unittest.TestCase):
    def test_presign(self):
        zeroHash = ByteArray(length=32)
        self.assertEqual(
            auth.makeSigHashPreSign(zeroHash, AuthType.Standard, 0, 0).hex(),
            "864fc924dcc85eff7205d6dfe62e53bba05d0857b2881ec4ded1f8484a17f523",
        )
        self.assertNotEqual(
            auth.makeSigHashPreSign(zeroHash, AuthType.Sponsored, 0, 0),
            auth.makeSigHashPreSign(zeroHash, AuthType.Standard, 0, 0),
        )

    def test_chain(self):
        preSign = auth.makeSigHashPreSign(
            ByteArray(INITIAL_SIGHASH), AuthType.Standard, 0, 0
        )
        self.assertEqual(preSign.hex(), PRESIGN_HASH)
        sig = auth.MessageSignature(SIGNATURE)
        postSign = auth.makeSigHashPostSign(preSign, crypto.PublicKey(PUB_KEY), sig)
        self.assertEqual(postSign.hex(), NEXT_SIGHASH)

        priv = crypto.PrivateKey(SECRET_KEY)
        nextSig, nextHash = auth.nextSignature(
            ByteArray(INITIAL_SIGHASH), AuthType.Standard, 0, 0, priv
        )
        self.assertEqual(nextSig, sig)
        self.assertEqual(nextHash.hex(), NEXT_SIGHASH)

        pubKey, verifiedHash = auth.nextVerification(
            ByteArray(INITIAL_SIGHASH),
            AuthType.Standard,
            0,
            0,
            PubKeyEncoding.Compressed,
            sig,
        )
        self.assertEqual(pubKey.hex(), PUB_KEY)
        self.assertEqual(verifiedHash.hex(), NEXT_SIGHASH)

    def test_verify(self):
        cond = singleSig()
        cond.signature = auth.MessageSignature(SIGNATURE)
        self.assertEqual(
            cond.verify(ByteArray(INITIAL_SIGHASH), AuthType.Standard).hex(),
            NEXT_SIGHASH,
        )
        # Verifying over the wrong hash recovers a different key.
        with self.assertRaises(SigningPreconditionError):
            cond.verify(ByteArray(length=32), AuthType.Standard)
        with self.assertRaises(SigningPreconditionError):
            singleSig().verify(ByteArray(INITIAL_SIGHASH), AuthType.Standard)

    def test_wrong_key(self):
        cond = singleSig()
        other = crypto.PrivateKey.makeRandom()
        sig, _ = auth.nextSignature(ByteArray(INITIAL_SIGHASH), AuthType.Standard, 0, 0, other)
        with self.assertRaises(SigningPreconditionError):
            cond.appendSignature(sig, other.pub())


class TestAuthorization(unittest.TestCase):
    def test_standard(self):
        a = auth.StandardAuthorization(singleSig(nonce=1))
        b = a.serialize()
        self.assertEqual(b[0], AuthType.Standard)
        reAuth = auth.Authorization.deserialize(b)
        self.assertEqual(len(b), 0)
        self.assertIsInstance(reAuth, auth.StandardAuthorization)
        self.assertEqual(reAuth, a)

        initial = a.intoInitialSighashAuth()
        self.assertEqual(initial.spendingCondition.nonce, 0)
        self.assertEqual(a.spendingCondition.nonce, 1)

    def test_sponsored(self):
        sponsor = auth.SingleSigSpendingCondition.fromPublicKey(
            AddressHashMode.SerializeP2PKH,
            crypto.PrivateKey.makeRandom().pub(),
            7,
            1000,
        )
        a = auth.SponsoredAuthorization(singleSig())
        self.assertEqual(a.missingFields(), ["sponsorSpendingCondition"])
        with self.assertRaises(ConstructionError):
            a.serialize()

        initial = a.intoInitialSighashAuth()
        self.assertTrue(initial.sponsorSpendingCondition.signer.iszero())
        self.assertEqual(initial.sponsorSpendingCondition.nonce, 0)
        self.assertEqual(
            initial.sponsorSpendingCondition.hashMode, AddressHashMode.SerializeP2PKH
        )

        a.setSponsor(sponsor)
        b = a.serialize()
        self.assertEqual(b[0], AuthType.Sponsored)
        reAuth = auth.Authorization.deserialize(b)
        self.assertIsInstance(reAuth, auth.SponsoredAuthorization)
        self.assertEqual(reAuth.sponsorSpendingCondition.nonce, 7)
        self.assertEqual(reAuth.sponsorSpendingCondition.feeRate, 1000)
        self.assertEqual(reAuth, a)
        # The sponsor is replaced by the placeholder regardless.
        self.assertTrue(
            a.intoInitialSighashAuth().sponsorSpendingCondition.signer.iszero()
        )

    def test_bad_type(self):
        b = auth.StandardAuthorization(singleSig()).serialize()
        b[0] = 0x06
        with self.assertRaises(FormatError):
            auth.Authorization.deserialize(b)
