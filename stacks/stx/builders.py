"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Convenience constructors for signed single-sig transactions.
"""

from stacks.crypto.crypto import PrivateKey
from stacks.stx.constants import (
    DEFAULT_CHAIN_ID,
    AddressHashMode,
    PostConditionMode,
    TransactionVersion,
)
from stacks.stx.signer import TransactionSigner
from stacks.stx.wire.authorization import (
    SingleSigSpendingCondition,
    SponsoredAuthorization,
    StandardAuthorization,
)
from stacks.stx.wire.msgtx import StacksTransaction
from stacks.stx.wire.payload import (
    ContractCallPayload,
    SmartContractPayload,
    TokenTransferPayload,
)
from stacks.util import helpers


log = helpers.getLogger("BUILDERS")


def _privateKey(k):
    return k if isinstance(k, PrivateKey) else PrivateKey(k)


def _buildAndSign(
    payload,
    feeRate,
    nonce,
    senderKey,
    version,
    chainId,
    postConditionMode,
    postConditions,
    anchorMode,
    sponsored,
):
    privKey = _privateKey(senderKey)
    condition = SingleSigSpendingCondition.fromPublicKey(
        AddressHashMode.SerializeP2PKH, privKey.pub(), nonce, feeRate
    )
    if sponsored:
        auth = SponsoredAuthorization(condition)
    else:
        auth = StandardAuthorization(condition)
    tx = StacksTransaction(
        version,
        auth,
        payload,
        chainId=chainId,
        postConditionMode=postConditionMode,
        anchorMode=anchorMode,
        postConditions=postConditions,
    )
    TransactionSigner(tx).signOrigin(privKey)
    log.debug(f"built {type(payload).__name__} transaction")
    return tx


def makeSTXTokenTransfer(
    recipient,
    amount,
    feeRate,
    nonce,
    senderKey,
    version=TransactionVersion.Mainnet,
    memo="",
    postConditionMode=PostConditionMode.Deny,
    postConditions=None,
    anchorMode=None,
    chainId=DEFAULT_CHAIN_ID,
    sponsored=False,
):
    """
    Create a signed STX transfer.

    Args:
        recipient (Address or str): The recipient.
        amount (int): The amount in micro-STX.
        feeRate (int): The fee rate.
        nonce (int): The sender's nonce.
        senderKey (PrivateKey or str): The sender's private key.
        version (TransactionVersion): Mainnet or Testnet.
        memo (str): An optional memo of up to 34 bytes.
        postConditionMode (PostConditionMode): The post-condition mode.
        postConditions (list(PostCondition)): The post-conditions.
        anchorMode (AnchorMode): The anchor mode. Defaults to the payload's.
        chainId (int): The chain ID.
        sponsored (bool): Whether the fee will be paid by a sponsor. A
            sponsored transaction is signed by the origin only, and must be
            completed with sponsorTransaction.

    Returns:
        StacksTransaction: The signed transaction.
    """
    payload = TokenTransferPayload(recipient, amount, memo)
    return _buildAndSign(
        payload,
        feeRate,
        nonce,
        senderKey,
        version,
        chainId,
        postConditionMode,
        postConditions,
        anchorMode,
        sponsored,
    )


def makeSmartContractDeploy(
    contractName,
    codeBody,
    feeRate,
    nonce,
    senderKey,
    version=TransactionVersion.Mainnet,
    postConditionMode=PostConditionMode.Deny,
    postConditions=None,
    anchorMode=None,
    chainId=DEFAULT_CHAIN_ID,
    sponsored=False,
):
    """
    Create a signed contract deployment. See makeSTXTokenTransfer for the
    common arguments.

    Args:
        contractName (str): The contract name.
        codeBody (str): The contract source.

    Returns:
        StacksTransaction: The signed transaction.
    """
    payload = SmartContractPayload(contractName, codeBody)
    return _buildAndSign(
        payload,
        feeRate,
        nonce,
        senderKey,
        version,
        chainId,
        postConditionMode,
        postConditions,
        anchorMode,
        sponsored,
    )


def makeContractCall(
    contractAddress,
    contractName,
    functionName,
    functionArgs,
    feeRate,
    nonce,
    senderKey,
    version=TransactionVersion.Mainnet,
    postConditionMode=PostConditionMode.Deny,
    postConditions=None,
    anchorMode=None,
    chainId=DEFAULT_CHAIN_ID,
    sponsored=False,
):
    """
    Create a signed contract call. See makeSTXTokenTransfer for the common
    arguments.

    Args:
        contractAddress (Address or str): The contract's deploying address.
        contractName (str): The contract name.
        functionName (str): The function name.
        functionArgs (list(ClarityValue)): The function arguments.

    Returns:
        StacksTransaction: The signed transaction.
    """
    payload = ContractCallPayload(
        contractAddress, contractName, functionName, functionArgs
    )
    return _buildAndSign(
        payload,
        feeRate,
        nonce,
        senderKey,
        version,
        chainId,
        postConditionMode,
        postConditions,
        anchorMode,
        sponsored,
    )


def sponsorTransaction(transaction, sponsorKey, feeRate, nonce):
    """
    Add a sponsor's single-sig condition and signature to an origin-signed
    sponsored transaction. The transaction is modified in place.

    Args:
        transaction (StacksTransaction): The origin-signed transaction.
        sponsorKey (PrivateKey or str): The sponsor's private key.
        feeRate (int): The fee rate the sponsor pays.
        nonce (int): The sponsor's nonce.

    Returns:
        StacksTransaction: The transaction.
    """
    privKey = _privateKey(sponsorKey)
    condition = SingleSigSpendingCondition.fromPublicKey(
        AddressHashMode.SerializeP2PKH, privKey.pub(), nonce, feeRate
    )
    signer = TransactionSigner.forSponsor(transaction, condition)
    signer.signSponsor(privKey)
    return transaction
