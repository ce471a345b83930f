"""
Transaction Cell Source

Resolves snapshots, identities and witnesses out of a host Transaction
for one order lock script.
"""

import logging
from typing import List, Optional

from order_lock.chain.models import CellOutput, Script, Transaction, WitnessArgs
from order_lock.core.exceptions import IndexOutOfBoundError
from order_lock.services.cell import CellSnapshot, Side

logger = logging.getLogger(__name__)


def _snapshot(output: CellOutput, data: bytes) -> CellSnapshot:
    return CellSnapshot(
        value=output.capacity,
        data=data,
        lock_identity=output.lock_hash(),
        type_identity=output.type_hash(),
    )


class TransactionCellSource:
    """
    CellSource over a resolved Transaction

    The script group is every input whose lock hash equals the hash of
    `order_lock`. Hashes are computed once up front.
    """

    def __init__(self, tx: Transaction, order_lock: Script):
        self.tx = tx
        self.order_lock_hash = order_lock.calc_hash()
        self._input_lock_hashes = [resolved.output.lock_hash() for resolved in tx.inputs]

    def load_cell(self, index: int, side: Side) -> CellSnapshot:
        """
        Raises:
            IndexOutOfBoundError: no cell at this index on this side
        """
        if side is Side.INPUT:
            if not 0 <= index < len(self.tx.inputs):
                raise IndexOutOfBoundError(index, side.value)
            resolved = self.tx.inputs[index]
            return _snapshot(resolved.output, resolved.data)

        if not 0 <= index < len(self.tx.outputs):
            raise IndexOutOfBoundError(index, side.value)
        return _snapshot(self.tx.outputs[index], self.tx.outputs_data[index])

    def input_identities(self) -> List[bytes]:
        """Packed CellInput bytes of every input, in order"""
        return [resolved.input.pack() for resolved in self.tx.inputs]

    def group_positions(self) -> List[int]:
        return [
            index for index, lock_hash in enumerate(self._input_lock_hashes)
            if lock_hash == self.order_lock_hash
        ]

    def group_input_identities(self) -> List[bytes]:
        """Packed CellInput bytes of the inputs locked by the order lock"""
        return [self.tx.inputs[index].input.pack() for index in self.group_positions()]

    def witness(self, index: int) -> Optional[WitnessArgs]:
        if index < len(self.tx.witnesses):
            return self.tx.witnesses[index]
        return None

    def group_witness(self) -> Optional[WitnessArgs]:
        """Witness at the first group input position, if any"""
        positions = self.group_positions()
        if not positions:
            return None
        return self.witness(positions[0])

    def find_input_by_lock(self, lock_hash: bytes) -> Optional[int]:
        """Position of the first input locked by `lock_hash`"""
        for index, input_lock_hash in enumerate(self._input_lock_hashes):
            if input_lock_hash == lock_hash:
                logger.debug("Input %d is locked by the requested lock", index)
                return index
        return None
