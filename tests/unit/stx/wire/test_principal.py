"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import pytest

from stacks import FormatError
from stacks.stx.addrlib import Address
from stacks.stx.constants import PrincipalType
from stacks.stx.wire.principal import (
    AssetInfo,
    ContractPrincipal,
    Principal,
    StandardPrincipal,
)
from stacks.util.encode import ByteArray


ADDRESS = "SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B"
ASSET_ADDRESS = "SP2ZP4GJDZJ1FDHTQ963F0292PE9J9752TZJ68F21"


def test_asset_info():
    info = AssetInfo(ASSET_ADDRESS, "contract_name", "asset_name")
    b = info.serialize()
    assert len(b) == 21 + 1 + len("contract_name") + 1 + len("asset_name")
    reInfo = AssetInfo.deserialize(b)
    assert len(b) == 0
    assert reInfo == info
    assert reInfo.address.string() == ASSET_ADDRESS
    assert str(reInfo.contractName) == "contract_name"
    assert str(reInfo.assetName) == "asset_name"


def test_standard_principal():
    p = StandardPrincipal(ADDRESS)
    b = p.serialize()
    assert b[0] == PrincipalType.Standard
    assert len(b) == 22
    reP = Principal.deserialize(b)
    assert isinstance(reP, StandardPrincipal)
    assert reP.principalType == PrincipalType.Standard
    assert reP.address.string() == ADDRESS
    assert reP == p


def test_contract_principal():
    p = ContractPrincipal(Address.fromString(ADDRESS), "principal-contract-name")
    b = p.serialize()
    assert b[0] == PrincipalType.Contract
    reP = Principal.deserialize(b)
    assert isinstance(reP, ContractPrincipal)
    assert reP.principalType == PrincipalType.Contract
    assert reP.address.string() == ADDRESS
    assert str(reP.contractName) == "principal-contract-name"
    assert reP == p
    assert reP != StandardPrincipal(ADDRESS)


def test_unknown_tag():
    b = StandardPrincipal(ADDRESS).serialize()
    b[0] = 0x04
    with pytest.raises(FormatError):
        Principal.deserialize(b)
    with pytest.raises(FormatError):
        Principal.deserialize(ByteArray("02"))
