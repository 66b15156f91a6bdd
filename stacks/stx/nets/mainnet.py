"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

mainnet holds mainnet parameters.
"""

from stacks.stx.constants import AddressVersion, TransactionVersion


Name = "mainnet"
TxVersion = TransactionVersion.Mainnet
ChainID = 0x00000001
AddressVersionSingleSig = AddressVersion.MainnetSingleSig
AddressVersionMultiSig = AddressVersion.MainnetMultiSig
