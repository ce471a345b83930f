"""
Order Set Matcher

A transaction may fill many orders at once. Every input locked by this
order lock is paired with the output at the same position, and each
pair is validated on its own:

1. Load the before/after snapshots at position i
2. Decode the input order record (rejects nothing-left orders)
3. Classify the pair by lock identities
4. Validate the transition for that state

Pairs are visited in ascending input position and the first failure
rejects the whole transaction. Inputs outside the order group belong to
other scripts and are skipped.
"""

from typing import Sequence

from order_lock.core.exceptions import OrderAmountIsZeroError
from order_lock.core.logging_config import get_logger
from order_lock.services.cell import CellSource, Side
from order_lock.services.classifier import OrderState, classify
from order_lock.services.order_record import OrderRecord
from order_lock.services.validation import validate_transition

logger = get_logger()


def validate_order_cells(cells: CellSource, index: int, user_lock_hash: bytes) -> OrderState:
    """
    Validate the order pair at one transaction position

    Args:
        cells: Host cell source
        index: Position of the order input (and its paired output)
        user_lock_hash: Order lock args (owner's lock hash)

    Returns:
        The state the pair was classified as

    Raises:
        OrderLockError subclass for the first violated check
    """
    before = cells.load_cell(index, Side.INPUT)
    after = cells.load_cell(index, Side.OUTPUT)

    order = OrderRecord.decode(before.data)
    if order.remaining_order_amount == 0:
        raise OrderAmountIsZeroError()

    state = classify(before, after, user_lock_hash, order.direction)
    logger.debug(
        "Order pair classified",
        extra={"index": index, "state": state.value},
    )

    validate_transition(state, order, before, after)
    return state


def validate_order_group(
    tx_inputs: Sequence[bytes],
    group_inputs: Sequence[bytes],
    cells: CellSource,
    user_lock_hash: bytes,
) -> None:
    """
    Validate every order input of the transaction

    Membership is decided by raw input identity (the packed input bytes),
    never by position within the group.

    Args:
        tx_inputs: Identities of all transaction inputs, in order
        group_inputs: Identities of the inputs locked by this order lock
        cells: Host cell source
        user_lock_hash: Order lock args (owner's lock hash)

    Raises:
        OrderLockError subclass from the first failing pair

    Example:
        >>> validate_order_group([a, b, c], [a, c], cells, owner_hash)
        # validates positions 0 and 2, ignores 1
    """
    group = set(group_inputs)
    logger.info("Validating order group", extra={"group_size": len(group)})

    for index, identity in enumerate(tx_inputs):
        if identity not in group:
            continue
        validate_order_cells(cells, index, user_lock_hash)
