"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

testnet holds testnet parameters.
"""

from stacks.stx.constants import AddressVersion, TransactionVersion


Name = "testnet"
TxVersion = TransactionVersion.Testnet
ChainID = 0x80000000
AddressVersionSingleSig = AddressVersion.TestnetSingleSig
AddressVersionMultiSig = AddressVersion.TestnetMultiSig
