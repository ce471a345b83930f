"""
Order State Classifier

Decides what kind of transition an order cell undergoes purely from
lock identities:

- output keeps the order lock        -> PARTIAL_FILLED (order recreated)
- output goes to the owner's lock    -> SELL_COMPLETED / BUY_COMPLETED
- output goes anywhere else          -> rejected

The owner's lock hash is the 32-byte argument the order lock was
parameterized with. Numeric payload never influences the decision.
"""

from enum import Enum

from order_lock.core.exceptions import UnknownOutputLockError
from order_lock.services.cell import CellSnapshot
from order_lock.services.order_record import Direction


class OrderState(str, Enum):
    PARTIAL_FILLED = "partial_filled"
    SELL_COMPLETED = "sell_completed"
    BUY_COMPLETED = "buy_completed"

    @property
    def is_completed(self) -> bool:
        return self is not OrderState.PARTIAL_FILLED


def classify(
    before: CellSnapshot,
    after: CellSnapshot,
    user_lock_hash: bytes,
    direction: Direction,
) -> OrderState:
    """
    Classify one before/after pair

    Args:
        before: Order cell being spent
        after: Output at the same position
        user_lock_hash: Order lock args (owner's lock hash)
        direction: Direction of the input order record. The matcher decodes
            `before.data` first and passes the decoded direction here, so
            `before` is never re-parsed

    Raises:
        UnknownOutputLockError: output lock is neither the order lock nor
            the owner's lock

    Example:
        >>> classify(order_cell, owner_cell, owner_hash, Direction.SELL)
        <OrderState.SELL_COMPLETED: 'sell_completed'>
    """
    if after.lock_identity == before.lock_identity:
        return OrderState.PARTIAL_FILLED

    if after.lock_identity == user_lock_hash:
        if direction is Direction.SELL:
            return OrderState.SELL_COMPLETED
        return OrderState.BUY_COMPLETED

    raise UnknownOutputLockError(after.lock_identity)
