"""
Cell Snapshot

Read-only projection of one cell, taken before (input) or after
(output) the transaction at a single index. The validator never loads
cells itself: a CellSource supplied by the host does.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from order_lock.core.config import BALANCE_FIELD_LEN
from order_lock.core.exceptions import IndexOutOfBoundError


class Side(str, Enum):
    INPUT = "input"    # before the transaction
    OUTPUT = "output"  # after the transaction


@dataclass(frozen=True)
class CellSnapshot:
    value: int
    data: bytes
    lock_identity: bytes
    type_identity: Optional[bytes] = None

    def has_balance_field(self) -> bool:
        return len(self.data) >= BALANCE_FIELD_LEN

    @property
    def balance(self) -> int:
        """
        Balance held in the leading 16 data bytes

        Cells without a balance field (free cells) hold zero.
        """
        if not self.has_balance_field():
            return 0
        return int.from_bytes(self.data[:BALANCE_FIELD_LEN], "little")


class CellSource(Protocol):
    """Host collaborator that loads cells by transaction position"""

    def load_cell(self, index: int, side: Side) -> CellSnapshot:
        """
        Raises:
            IndexOutOfBoundError: no cell at this index on this side
        """
        ...


class SnapshotCellSource:
    """CellSource over snapshots the host has already resolved"""

    def __init__(self, inputs: Sequence[CellSnapshot], outputs: Sequence[CellSnapshot]):
        self._cells = {
            Side.INPUT: tuple(inputs),
            Side.OUTPUT: tuple(outputs),
        }

    def load_cell(self, index: int, side: Side) -> CellSnapshot:
        cells = self._cells[side]
        if not 0 <= index < len(cells):
            raise IndexOutOfBoundError(index, side.value)
        return cells[index]
