"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import pytest

from stacks import ConstructionError, FormatError
from stacks.stx import clarity
from stacks.stx.constants import ClarityType
from stacks.util.encode import ByteArray


ADDRESS = "SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B"


def roundTrip(cv):
    b = cv.serialize()
    reCV = clarity.ClarityValue.deserialize(b)
    assert len(b) == 0
    assert reCV == cv
    return reCV


def test_simple_values():
    assert clarity.trueCV().serialize().hex() == "03"
    assert clarity.falseCV().serialize().hex() == "04"
    assert clarity.boolCV(0) == clarity.falseCV()
    assert clarity.noneCV().serialize().hex() == "09"
    assert clarity.bufferCV(b"foo").serialize().hex() == "0200000003666f6f"
    assert clarity.someCV(clarity.trueCV()).serialize().hex() == "0a03"
    assert clarity.responseOkCV(clarity.trueCV()).serialize().hex() == "0703"
    assert clarity.responseErrorCV(clarity.falseCV()).serialize().hex() == "0804"

    for cv in (
        clarity.trueCV(),
        clarity.falseCV(),
        clarity.noneCV(),
        clarity.bufferCV(b"foo"),
        clarity.someCV(clarity.uintCV(7)),
        clarity.responseOkCV(clarity.intCV(-1)),
        clarity.responseErrorCV(clarity.uintCV(1)),
    ):
        roundTrip(cv)


def test_ints():
    assert clarity.intCV(-1).serialize().hex() == "00" + "ff" * 16
    assert clarity.uintCV(1).serialize().hex() == "01" + "00" * 15 + "01"
    assert roundTrip(clarity.intCV(clarity.MIN_INT)).value == clarity.MIN_INT
    assert roundTrip(clarity.intCV(clarity.MAX_INT)).value == clarity.MAX_INT
    assert roundTrip(clarity.uintCV(clarity.MAX_UINT)).value == clarity.MAX_UINT
    with pytest.raises(ConstructionError):
        clarity.intCV(clarity.MAX_INT + 1)
    with pytest.raises(ConstructionError):
        clarity.uintCV(-1)
    with pytest.raises(ConstructionError):
        clarity.uintCV(None)
    with pytest.raises(ConstructionError):
        clarity.intCV(None)
    assert clarity.intCV(1) != clarity.uintCV(1)


def test_principals():
    cv = roundTrip(clarity.standardPrincipalCV(ADDRESS))
    assert cv.serialize()[0] == ClarityType.PrincipalStandard
    assert cv.address.string() == ADDRESS

    cv = roundTrip(clarity.contractPrincipalCV(ADDRESS, "a-contract"))
    assert cv.serialize()[0] == ClarityType.PrincipalContract
    assert str(cv.contractName) == "a-contract"


def test_composites():
    lst = clarity.listCV([clarity.intCV(1), clarity.intCV(2)])
    assert lst.serialize()[:5].hex() == "0b00000002"
    roundTrip(lst)

    tup = clarity.tupleCV({"b": clarity.trueCV(), "a": clarity.falseCV()})
    # Entries are sorted by name.
    assert tup.serialize().hex() == "0c00000002" + "016104" + "016203"
    reTup = roundTrip(tup)
    assert set(reTup.data) == {"a", "b"}


def test_strings():
    cv = roundTrip(clarity.stringAsciiCV("hello"))
    assert cv.serialize().hex() == "0d00000005" + b"hello".hex()
    cv = roundTrip(clarity.stringUtf8CV("héllo"))
    assert cv.serialize()[:5].hex() == "0e00000006"
    with pytest.raises(ConstructionError):
        clarity.stringAsciiCV("héllo")


def test_bad_input():
    with pytest.raises(FormatError):
        clarity.ClarityValue.deserialize(ByteArray("0f"))
    with pytest.raises(FormatError):
        clarity.ClarityValue.deserialize(ByteArray("0200000003666f"))
    with pytest.raises(FormatError):
        clarity.ClarityValue.deserialize(ByteArray("0d00000001ff"))
