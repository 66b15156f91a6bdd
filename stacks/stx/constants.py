"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Wire constants for Stacks transactions. Every enumerated field is encoded as a
single byte.
"""

from enum import IntEnum


MAX_STRING_LENGTH_BYTES = 128
CLARITY_INT_SIZE = 128
COINBASE_BUFFER_LENGTH_BYTES = 32
RECOVERABLE_ECDSA_SIG_LENGTH_BYTES = 65
COMPRESSED_PUBKEY_LENGTH_BYTES = 33
UNCOMPRESSED_PUBKEY_LENGTH_BYTES = 65
MEMO_MAX_LENGTH_BYTES = 34
MAX_CODE_BODY_LENGTH_BYTES = 100000
HASH160_LENGTH_BYTES = 20
SIGHASH_LENGTH_BYTES = 32
MICROBLOCK_HASH_LENGTH_BYTES = 32

# DEFAULT_CHAIN_ID is the 4-byte chain ID a transaction carries unless one is
# specified.
DEFAULT_CHAIN_ID = 0x00000000


class TransactionVersion(IntEnum):
    Mainnet = 0x00
    Testnet = 0x80


class PayloadType(IntEnum):
    TokenTransfer = 0x00
    SmartContract = 0x01
    ContractCall = 0x02
    PoisonMicroblock = 0x03
    Coinbase = 0x04


class AnchorMode(IntEnum):
    OnChainOnly = 0x01
    OffChainOnly = 0x02
    Any = 0x03


class PostConditionMode(IntEnum):
    Allow = 0x01
    Deny = 0x02


class PostConditionType(IntEnum):
    STX = 0x00
    Fungible = 0x01
    NonFungible = 0x02


class AuthType(IntEnum):
    Standard = 0x04
    Sponsored = 0x05


class AddressHashMode(IntEnum):
    # Single-sig modes.
    SerializeP2PKH = 0x00
    SerializeP2WPKH = 0x02
    # Multi-sig modes.
    SerializeP2SH = 0x01
    SerializeP2WSH = 0x03


SINGLE_SIG_HASH_MODES = (AddressHashMode.SerializeP2PKH, AddressHashMode.SerializeP2WPKH)
MULTI_SIG_HASH_MODES = (AddressHashMode.SerializeP2SH, AddressHashMode.SerializeP2WSH)


class AddressVersion(IntEnum):
    MainnetSingleSig = 22
    MainnetMultiSig = 20
    TestnetSingleSig = 26
    TestnetMultiSig = 21


class PubKeyEncoding(IntEnum):
    Compressed = 0x00
    Uncompressed = 0x01


class AuthFieldType(IntEnum):
    PublicKeyCompressed = 0x00
    PublicKeyUncompressed = 0x01
    SignatureCompressed = 0x02
    SignatureUncompressed = 0x03


class PrincipalType(IntEnum):
    Standard = 0x02
    Contract = 0x03


class FungibleConditionCode(IntEnum):
    Equal = 0x01
    Greater = 0x02
    GreaterEqual = 0x03
    Less = 0x04
    LessEqual = 0x05


class NonFungibleConditionCode(IntEnum):
    DoesNotOwn = 0x10
    Owns = 0x11


class ClarityType(IntEnum):
    Int = 0x00
    UInt = 0x01
    Buffer = 0x02
    BoolTrue = 0x03
    BoolFalse = 0x04
    PrincipalStandard = 0x05
    PrincipalContract = 0x06
    ResponseOk = 0x07
    ResponseErr = 0x08
    OptionalNone = 0x09
    OptionalSome = 0x0A
    List = 0x0B
    Tuple = 0x0C
    StringASCII = 0x0D
    StringUTF8 = 0x0E
