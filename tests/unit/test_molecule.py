"""
Unit tests for molecule packing and script hashing
"""

import pytest

from order_lock.chain.hashing import ckb_hash
from order_lock.chain.models import CellInput, OutPoint, Script
from order_lock.chain.molecule import (
    HashType,
    MoleculeError,
    UnknownHashTypeError,
    pack_script,
    unpack_script,
)


@pytest.mark.unit
def test_empty_hash_is_chain_blank_hash():
    assert ckb_hash(b"").hex() == "44f4c69744d5f8c55d642062949dcae49bc4e7ef43d388c5a12f42b5633d163e"


@pytest.mark.unit
def test_script_layout():
    packed = pack_script(bytes([0xAA]) * 32, HashType.TYPE, b"\x01\x02\x03")

    assert len(packed) == 56
    assert packed[0:4] == (56).to_bytes(4, "little")
    assert packed[4:8] == (16).to_bytes(4, "little")
    assert packed[8:12] == (48).to_bytes(4, "little")
    assert packed[12:16] == (49).to_bytes(4, "little")
    assert packed[16:48] == bytes([0xAA]) * 32
    assert packed[48] == 1
    assert packed[49:53] == (3).to_bytes(4, "little")
    assert packed[53:] == b"\x01\x02\x03"


@pytest.mark.unit
@pytest.mark.parametrize("hash_type,byte", [
    (HashType.DATA, 0),
    (HashType.TYPE, 1),
    (HashType.DATA1, 2),
    (HashType.DATA2, 4),
])
def test_hash_type_bytes(hash_type, byte):
    assert hash_type.to_byte() == byte
    assert HashType.from_byte(byte) is hash_type


@pytest.mark.unit
def test_unpack_recovers_fields():
    packed = pack_script(bytes(32), HashType.DATA1, bytes(20))
    assert unpack_script(packed) == (bytes(32), HashType.DATA1, bytes(20))


@pytest.mark.unit
def test_unknown_hash_type():
    packed = bytearray(pack_script(bytes(32), HashType.TYPE, b""))
    packed[48] = 3

    with pytest.raises(UnknownHashTypeError) as exc_info:
        unpack_script(bytes(packed))

    assert exc_info.value.value == 3


@pytest.mark.unit
@pytest.mark.parametrize("mutate", [
    lambda b: b[:3],                                  # no total size
    lambda b: b[:-1],                                 # total size mismatch
    lambda b: b + b"\x00",                            # trailing byte
    lambda b: (20).to_bytes(4, "little") + b[4:20],   # header only
    lambda b: b[:4] + (20).to_bytes(4, "little") + b[8:],  # wrong field count
    lambda b: b[:49] + (5).to_bytes(4, "little") + b[53:],  # args length mismatch
])
def test_malformed_script_rejected(mutate):
    packed = pack_script(bytes(32), HashType.TYPE, bytes(4))

    with pytest.raises(MoleculeError):
        unpack_script(mutate(packed))


@pytest.mark.unit
def test_script_hash_depends_on_every_field():
    base = Script(code_hash=bytes(32), hash_type=HashType.TYPE, args=b"\x01")
    variants = [
        Script(code_hash=bytes([1]) + bytes(31), hash_type=HashType.TYPE, args=b"\x01"),
        Script(code_hash=bytes(32), hash_type=HashType.DATA, args=b"\x01"),
        Script(code_hash=bytes(32), hash_type=HashType.TYPE, args=b"\x02"),
    ]

    assert all(variant.calc_hash() != base.calc_hash() for variant in variants)
    assert len(base.calc_hash()) == 32


@pytest.mark.unit
def test_cell_input_identity():
    cell_input = CellInput(previous_output=OutPoint(tx_hash=bytes([7]) * 32, index=2), since=1)

    packed = cell_input.pack()

    assert len(packed) == 44
    assert packed[:8] == (1).to_bytes(8, "little")
    assert packed[8:40] == bytes([7]) * 32
    assert packed[40:] == (2).to_bytes(4, "little")
