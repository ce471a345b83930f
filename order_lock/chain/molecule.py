"""
Molecule Serialization

Minimal codec for the two chain structures the order lock reads:

Script (table, 3 fields):
    total_size u32 | offset u32 x 3 | code_hash [32] | hash_type u8 | args fixvec

    args fixvec = length u32 | bytes

CellInput (struct, 44 bytes):
    since u64 | tx_hash [32] | index u32

All integers are little endian. The packed CellInput is the input's raw
identity; the packed Script is what its hash is taken over.
"""

from enum import Enum

SCRIPT_FIELD_COUNT = 3
SCRIPT_HEADER_LEN = 4 * (1 + SCRIPT_FIELD_COUNT)
CODE_HASH_LEN = 32
CELL_INPUT_LEN = 8 + 32 + 4
_U32 = 4


class MoleculeError(ValueError):
    """Malformed molecule bytes"""
    pass


class UnknownHashTypeError(MoleculeError):
    """hash_type byte outside the known set"""

    def __init__(self, value: int):
        super().__init__(f"unknown hash_type byte {value}")
        self.value = value


class HashType(str, Enum):
    """How a script's code_hash refers to its code"""

    DATA = "data"
    TYPE = "type"
    DATA1 = "data1"
    DATA2 = "data2"

    def to_byte(self) -> int:
        return _HASH_TYPE_BYTES[self]

    @classmethod
    def from_byte(cls, value: int) -> "HashType":
        for hash_type, byte in _HASH_TYPE_BYTES.items():
            if byte == value:
                return hash_type
        raise UnknownHashTypeError(value)


_HASH_TYPE_BYTES = {
    HashType.DATA: 0,
    HashType.TYPE: 1,
    HashType.DATA1: 2,
    HashType.DATA2: 4,
}


def _u32(value: int) -> bytes:
    return value.to_bytes(_U32, "little")


def _read_u32(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + _U32], "little")


def pack_script(code_hash: bytes, hash_type: HashType, args: bytes) -> bytes:
    """
    Pack a Script table

    Example:
        >>> len(pack_script(bytes(32), HashType.TYPE, bytes(20)))
        73
    """
    if len(code_hash) != CODE_HASH_LEN:
        raise MoleculeError(f"code_hash must be {CODE_HASH_LEN} bytes, got {len(code_hash)}")

    fields = [
        code_hash,
        bytes([hash_type.to_byte()]),
        _u32(len(args)) + args,
    ]

    offsets = []
    cursor = SCRIPT_HEADER_LEN
    for field in fields:
        offsets.append(cursor)
        cursor += len(field)

    header = _u32(cursor) + b"".join(_u32(offset) for offset in offsets)
    return header + b"".join(fields)


def unpack_script(data: bytes) -> tuple[bytes, HashType, bytes]:
    """
    Unpack a Script table

    Returns:
        (code_hash, hash_type, args)

    Raises:
        MoleculeError: sizes or offsets are inconsistent
        UnknownHashTypeError: hash_type byte is not data/type/data1/data2
    """
    if len(data) < _U32:
        raise MoleculeError("missing total size")

    total_size = _read_u32(data, 0)
    if total_size != len(data):
        raise MoleculeError(f"total size {total_size} != actual {len(data)}")

    if total_size < SCRIPT_HEADER_LEN:
        raise MoleculeError("header truncated")

    first_offset = _read_u32(data, _U32)
    if first_offset != SCRIPT_HEADER_LEN:
        raise MoleculeError(f"expected {SCRIPT_FIELD_COUNT} fields, header is {first_offset} bytes")

    offsets = [_read_u32(data, _U32 * (i + 1)) for i in range(SCRIPT_FIELD_COUNT)]
    offsets.append(total_size)
    if any(start > end for start, end in zip(offsets, offsets[1:])):
        raise MoleculeError("field offsets out of order")

    code_hash = data[offsets[0]:offsets[1]]
    if len(code_hash) != CODE_HASH_LEN:
        raise MoleculeError(f"code_hash is {len(code_hash)} bytes")

    hash_type_raw = data[offsets[1]:offsets[2]]
    if len(hash_type_raw) != 1:
        raise MoleculeError(f"hash_type is {len(hash_type_raw)} bytes")

    args_raw = data[offsets[2]:offsets[3]]
    if len(args_raw) < _U32:
        raise MoleculeError("args length missing")
    args_len = _read_u32(args_raw, 0)
    if args_len != len(args_raw) - _U32:
        raise MoleculeError(f"args length {args_len} != actual {len(args_raw) - _U32}")

    hash_type = HashType.from_byte(hash_type_raw[0])
    return bytes(code_hash), hash_type, bytes(args_raw[_U32:])


def pack_cell_input(since: int, tx_hash: bytes, index: int) -> bytes:
    """Pack a CellInput struct (44 bytes)"""
    if len(tx_hash) != 32:
        raise MoleculeError(f"tx_hash must be 32 bytes, got {len(tx_hash)}")
    return since.to_bytes(8, "little") + tx_hash + _u32(index)
