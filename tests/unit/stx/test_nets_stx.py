"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import pytest

from stacks import StacksError
from stacks.stx import nets
from stacks.stx.constants import AddressVersion, TransactionVersion


def test_nets():
    assert nets.parse("mainnet") is nets.mainnet
    assert nets.parse("testnet") is nets.testnet

    with pytest.raises(StacksError):
        nets.parse("nonet")

    assert nets.fromVersion(TransactionVersion.Mainnet) is nets.mainnet
    assert nets.fromVersion(TransactionVersion.Testnet) is nets.testnet
    with pytest.raises(StacksError):
        nets.fromVersion(0x01)

    assert nets.fromAddressVersion(AddressVersion.MainnetMultiSig) is nets.mainnet
    assert nets.fromAddressVersion(26) is nets.testnet
    with pytest.raises(StacksError):
        nets.fromAddressVersion(0)
