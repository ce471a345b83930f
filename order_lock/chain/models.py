"""
Host Transaction Models

Pydantic models for the transaction the host hands to the order lock.
Byte fields accept raw bytes or "0x"-prefixed hex strings, so a
transaction can be loaded straight from node JSON.
"""

from typing import Annotated, List, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

from order_lock.chain.hashing import ckb_hash
from order_lock.chain.molecule import CODE_HASH_LEN, HashType, pack_cell_input, pack_script, unpack_script


def _parse_hex(value):
    if isinstance(value, str):
        text = value[2:] if value.startswith("0x") else value
        try:
            return bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"invalid hex string: {value!r}") from None
    return value


HexBytes = Annotated[
    bytes,
    BeforeValidator(_parse_hex),
    PlainSerializer(lambda value: "0x" + value.hex(), return_type=str),
]


class Script(BaseModel):
    """Lock or type script"""
    code_hash: HexBytes
    hash_type: HashType
    args: HexBytes = b""

    model_config = ConfigDict(frozen=True)

    @field_validator("code_hash")
    @classmethod
    def validate_code_hash(cls, v: bytes) -> bytes:
        if len(v) != CODE_HASH_LEN:
            raise ValueError(f"code_hash must be {CODE_HASH_LEN} bytes")
        return v

    def pack(self) -> bytes:
        return pack_script(self.code_hash, self.hash_type, self.args)

    def calc_hash(self) -> bytes:
        """Script hash: the identity used for lock/type comparisons"""
        return ckb_hash(self.pack())

    @classmethod
    def unpack(cls, data: bytes) -> "Script":
        """
        Raises:
            MoleculeError: malformed table
            UnknownHashTypeError: unknown hash_type byte
        """
        code_hash, hash_type, args = unpack_script(data)
        return cls(code_hash=code_hash, hash_type=hash_type, args=args)


class OutPoint(BaseModel):
    tx_hash: HexBytes
    index: int = Field(..., ge=0, lt=2**32)

    @field_validator("tx_hash")
    @classmethod
    def validate_tx_hash(cls, v: bytes) -> bytes:
        if len(v) != 32:
            raise ValueError("tx_hash must be 32 bytes")
        return v


class CellInput(BaseModel):
    previous_output: OutPoint
    since: int = Field(0, ge=0, lt=2**64)

    def pack(self) -> bytes:
        """Raw input identity"""
        return pack_cell_input(self.since, self.previous_output.tx_hash, self.previous_output.index)


class CellOutput(BaseModel):
    capacity: int = Field(..., ge=0, lt=2**64)  # shannons
    lock: Script
    type_: Optional[Script] = Field(None, alias="type")

    model_config = ConfigDict(populate_by_name=True)

    def lock_hash(self) -> bytes:
        return self.lock.calc_hash()

    def type_hash(self) -> Optional[bytes]:
        if self.type_ is None:
            return None
        return self.type_.calc_hash()


class ResolvedInput(BaseModel):
    """Input together with the cell it spends"""
    input: CellInput
    output: CellOutput
    data: HexBytes = b""


class WitnessArgs(BaseModel):
    lock: Optional[HexBytes] = None
    input_type: Optional[HexBytes] = None
    output_type: Optional[HexBytes] = None


class Transaction(BaseModel):
    """
    Transaction under verification

    witnesses[i] is the witness of inputs[i]; missing or None entries mean
    the input carries no witness.
    """
    inputs: List[ResolvedInput]
    outputs: List[CellOutput]
    outputs_data: List[HexBytes]
    witnesses: List[Optional[WitnessArgs]] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_outputs_data(self) -> "Transaction":
        if len(self.outputs_data) != len(self.outputs):
            raise ValueError(
                f"outputs_data has {len(self.outputs_data)} entries for {len(self.outputs)} outputs"
            )
        return self
