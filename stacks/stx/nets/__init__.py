"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

from stacks import StacksError

from . import mainnet, testnet


the_nets = {n.Name: n for n in (mainnet, testnet)}


def parse(name):
    """
    Get the network parameters based on the network name.
    """
    try:
        return the_nets[name]
    except KeyError:
        raise StacksError(f"unrecognized network name {name}")


def fromVersion(txVersion):
    """
    Get the network parameters for the transaction version.

    Args:
        txVersion (TransactionVersion): The transaction version.

    Returns:
        module: The network parameters.
    """
    for net in the_nets.values():
        if net.TxVersion == txVersion:
            return net
    raise StacksError(f"unrecognized transaction version {txVersion}")


def fromAddressVersion(addrVersion):
    """
    Get the network parameters for the address version.

    Args:
        addrVersion (int): The address version.

    Returns:
        module: The network parameters.
    """
    for net in the_nets.values():
        if addrVersion in (net.AddressVersionSingleSig, net.AddressVersionMultiSig):
            return net
    raise StacksError(f"unrecognized address version {addrVersion}")
