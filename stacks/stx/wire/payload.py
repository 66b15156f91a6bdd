"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Transaction payloads. A payload is a tag byte followed by the variant's
fields. Every transaction carries exactly one.
"""

from stacks import ConstructionError, FormatError
from stacks.stx.addrlib import Address
from stacks.stx.clarity import ClarityValue
from stacks.stx.constants import (
    COINBASE_BUFFER_LENGTH_BYTES,
    MAX_CODE_BODY_LENGTH_BYTES,
    MEMO_MAX_LENGTH_BYTES,
    MICROBLOCK_HASH_LENGTH_BYTES,
    RECOVERABLE_ECDSA_SIG_LENGTH_BYTES,
    AnchorMode,
    PayloadType,
)
from stacks.stx.wire.wire import (
    LengthPrefixedList,
    LengthPrefixedString,
    readEnum,
    readUint,
    writeUint,
)
from stacks.util.encode import ByteArray


# The code body of a smart contract has a 4-byte length prefix.
CODE_BODY_PREFIX_BYTES = 4


def padBuffer(b, size, fieldName):
    """
    Zero-pad the bytes on the right to exactly size bytes.

    Args:
        b (bytes-like or str): The content. Strings are UTF-8 encoded.
        size (int): The padded length.
        fieldName (str): Used in the error message.

    Returns:
        ByteArray: The padded bytes.
    """
    if isinstance(b, str):
        b = b.encode("utf-8")
    b = ByteArray(b).bytes()
    if len(b) > size:
        raise ConstructionError(f"{fieldName} of {len(b)} bytes exceeds {size} bytes")
    return ByteArray(b + bytes(size - len(b)))


class Payload:
    """
    The parent class of the payload variants.
    """

    payloadType = None

    def serialize(self):
        """
        Returns:
            ByteArray: The tag byte followed by the variant's fields.
        """
        b = ByteArray(self.payloadType, length=1)
        b += self.serializeBody()
        return b

    def serializeBody(self):
        raise NotImplementedError("serializeBody must be implemented by child class")

    def defaultAnchorMode(self):
        """
        The anchor mode a transaction with this payload takes unless one is
        specified.

        Returns:
            AnchorMode: OnChainOnly for coinbase and poison payloads, Any
                otherwise.
        """
        if self.payloadType in (PayloadType.Coinbase, PayloadType.PoisonMicroblock):
            return AnchorMode.OnChainOnly
        return AnchorMode.Any

    @staticmethod
    def deserialize(b):
        """
        Decode the next payload in the buffer.

        Args:
            b (ByteArray): The read buffer.

        Returns:
            Payload: The payload variant named by the tag byte.
        """
        payloadType = readEnum(b, PayloadType)
        reader = _readers.get(payloadType)
        if reader is None:
            raise FormatError(f"unknown payload type {payloadType}")
        return reader(b)

    def __eq__(self, other):
        return (
            isinstance(other, Payload)
            and self.payloadType == other.payloadType
            and self.serializeBody() == other.serializeBody()
        )


class TokenTransferPayload(Payload):
    """
    Moves STX from the origin to the recipient.
    """

    payloadType = PayloadType.TokenTransfer

    def __init__(self, recipient, amount, memo=""):
        """
        Args:
            recipient (Address or str): The recipient.
            amount (int): The amount in micro-STX.
            memo (str or bytes-like): An optional note, at most 34 bytes. The
                memo is zero padded to 34 bytes.
        """
        self.recipient = Address.parse(recipient)
        self.amount = amount
        self.memo = padBuffer(memo, MEMO_MAX_LENGTH_BYTES, "memo")

    def memoText(self):
        """
        The memo with the zero padding removed.

        Returns:
            str: The memo.
        """
        return self.memo.bytes().rstrip(b"\x00").decode("utf-8", errors="replace")

    def serializeBody(self):
        b = self.recipient.serialize()
        b += writeUint(self.amount, 8)
        b += self.memo
        return b

    @staticmethod
    def readBody(b):
        recipient = Address.deserialize(b)
        amount = readUint(b, 8)
        memo = b.pop(MEMO_MAX_LENGTH_BYTES)
        return TokenTransferPayload(recipient, amount, memo)

    def __repr__(self):
        return f"TokenTransferPayload({self.recipient}, {self.amount}, {self.memoText()!r})"


class ContractCallPayload(Payload):
    """
    Calls a public function of a deployed contract.
    """

    payloadType = PayloadType.ContractCall

    def __init__(self, contractAddress, contractName, functionName, functionArgs=None):
        """
        Args:
            contractAddress (Address or str): The contract's deploying address.
            contractName (str): The contract name.
            functionName (str): The function to call.
            functionArgs (list(ClarityValue)): The arguments, in order.
        """
        self.contractAddress = Address.parse(contractAddress)
        self.contractName = LengthPrefixedString(str(contractName))
        self.functionName = LengthPrefixedString(str(functionName))
        self.functionArgs = LengthPrefixedList(functionArgs or [])

    def serializeBody(self):
        b = self.contractAddress.serialize()
        b += self.contractName.serialize()
        b += self.functionName.serialize()
        b += self.functionArgs.serialize()
        return b

    @staticmethod
    def readBody(b):
        contractAddress = Address.deserialize(b)
        contractName = LengthPrefixedString.deserialize(b)
        functionName = LengthPrefixedString.deserialize(b)
        functionArgs = LengthPrefixedList.deserialize(b, ClarityValue)
        return ContractCallPayload(
            contractAddress, contractName, functionName, functionArgs
        )

    def __repr__(self):
        return (
            f"ContractCallPayload({self.contractAddress}.{self.contractName}"
            f"::{self.functionName}, {list(self.functionArgs)!r})"
        )


class SmartContractPayload(Payload):
    """
    Deploys a contract.
    """

    payloadType = PayloadType.SmartContract

    def __init__(self, contractName, codeBody):
        """
        Args:
            contractName (str): The contract name.
            codeBody (str): The contract source.
        """
        self.contractName = LengthPrefixedString(str(contractName))
        self.codeBody = LengthPrefixedString(
            str(codeBody), CODE_BODY_PREFIX_BYTES, MAX_CODE_BODY_LENGTH_BYTES
        )

    def serializeBody(self):
        b = self.contractName.serialize()
        b += self.codeBody.serialize()
        return b

    @staticmethod
    def readBody(b):
        contractName = LengthPrefixedString.deserialize(b)
        codeBody = LengthPrefixedString.deserialize(
            b, CODE_BODY_PREFIX_BYTES, MAX_CODE_BODY_LENGTH_BYTES
        )
        return SmartContractPayload(contractName, codeBody)

    def __repr__(self):
        return f"SmartContractPayload({self.contractName}, {len(self.codeBody)} bytes)"


class MicroblockHeader:
    """
    A microblock header, as carried by a poison-microblock payload.
    """

    def __init__(self, version, sequence, prevBlock, txMerkleRoot, signature):
        """
        Args:
            version (int): The header version.
            sequence (int): The microblock sequence number.
            prevBlock (bytes-like): The 32-byte parent block hash.
            txMerkleRoot (bytes-like): The 32-byte transaction merkle root.
            signature (bytes-like): The 65-byte recoverable signature.
        """
        self.version = version
        self.sequence = sequence
        self.prevBlock = ByteArray(prevBlock)
        self.txMerkleRoot = ByteArray(txMerkleRoot)
        self.signature = ByteArray(signature)
        for name, v, size in (
            ("prevBlock", self.prevBlock, MICROBLOCK_HASH_LENGTH_BYTES),
            ("txMerkleRoot", self.txMerkleRoot, MICROBLOCK_HASH_LENGTH_BYTES),
            ("signature", self.signature, RECOVERABLE_ECDSA_SIG_LENGTH_BYTES),
        ):
            if len(v) != size:
                raise ConstructionError(
                    f"microblock header {name} must be {size} bytes, got {len(v)}"
                )

    def serialize(self):
        b = writeUint(self.version, 1)
        b += writeUint(self.sequence, 2)
        b += self.prevBlock
        b += self.txMerkleRoot
        b += self.signature
        return b

    @staticmethod
    def deserialize(b):
        version = readUint(b, 1)
        sequence = readUint(b, 2)
        prevBlock = b.pop(MICROBLOCK_HASH_LENGTH_BYTES)
        txMerkleRoot = b.pop(MICROBLOCK_HASH_LENGTH_BYTES)
        signature = b.pop(RECOVERABLE_ECDSA_SIG_LENGTH_BYTES)
        return MicroblockHeader(version, sequence, prevBlock, txMerkleRoot, signature)

    def __eq__(self, other):
        return isinstance(other, MicroblockHeader) and self.serialize() == other.serialize()


class PoisonPayload(Payload):
    """
    Reports two conflicting microblock headers from the same leader.
    """

    payloadType = PayloadType.PoisonMicroblock

    def __init__(self, header1, header2):
        self.header1 = header1
        self.header2 = header2

    def serializeBody(self):
        b = self.header1.serialize()
        b += self.header2.serialize()
        return b

    @staticmethod
    def readBody(b):
        header1 = MicroblockHeader.deserialize(b)
        header2 = MicroblockHeader.deserialize(b)
        return PoisonPayload(header1, header2)


class CoinbasePayload(Payload):
    """
    A miner's coinbase. The buffer is exactly 32 bytes on the wire.
    """

    payloadType = PayloadType.Coinbase

    def __init__(self, coinbaseBuffer):
        """
        Args:
            coinbaseBuffer (bytes-like or str): At most 32 bytes. Shorter input
                is zero padded.
        """
        self.coinbaseBuffer = padBuffer(
            coinbaseBuffer, COINBASE_BUFFER_LENGTH_BYTES, "coinbase buffer"
        )

    def serializeBody(self):
        return self.coinbaseBuffer.copy()

    @staticmethod
    def readBody(b):
        return CoinbasePayload(b.pop(COINBASE_BUFFER_LENGTH_BYTES))

    def __repr__(self):
        return f"CoinbasePayload({self.coinbaseBuffer.hex()})"


_readers = {
    PayloadType.TokenTransfer: TokenTransferPayload.readBody,
    PayloadType.SmartContract: SmartContractPayload.readBody,
    PayloadType.ContractCall: ContractCallPayload.readBody,
    PayloadType.PoisonMicroblock: PoisonPayload.readBody,
    PayloadType.Coinbase: CoinbasePayload.readBody,
}
