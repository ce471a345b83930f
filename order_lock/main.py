"""
Order Lock Entry

Host-facing entry for the order lock script. A transaction spending
order cells is accepted by exactly one route:

1. Direct cancellation: the order group carries a witness holding the
   owner's lock script and signature
2. Owner spend: an input locked by the owner's own lock is spent
   alongside the orders (that lock authorizes itself)
3. Matching: every order pair must satisfy the order invariants
"""

from enum import Enum
from typing import Optional

from order_lock.chain.models import Script, Transaction
from order_lock.chain.source import TransactionCellSource
from order_lock.core.config import USER_LOCK_HASH_LEN, settings
from order_lock.core.exceptions import (
    OrderLockError,
    WrongMatchInputWitnessError,
    WrongUserLockHashSizeError,
)
from order_lock.core.logging_config import get_logger, setup_logging
from order_lock.services.cancellation import SignatureAuthority, verify_cancellation
from order_lock.services.matching import validate_order_group

logger = get_logger()


class Route(str, Enum):
    CANCELLATION = "cancellation"
    USER_LOCK = "user_lock"
    MATCHING = "matching"


def verify_order_lock(
    tx: Transaction,
    order_lock: Script,
    authority: Optional[SignatureAuthority] = None,
) -> Route:
    """
    Verify a transaction against one order lock script

    Args:
        tx: Resolved transaction
        order_lock: The order lock script; its args are the owner's lock hash
        authority: Signature verifier used by direct cancellation

    Returns:
        Route the transaction was accepted by

    Raises:
        OrderLockError subclass when the transaction is rejected
    """
    user_lock_hash = order_lock.args
    if len(user_lock_hash) != USER_LOCK_HASH_LEN:
        raise WrongUserLockHashSizeError(len(user_lock_hash))

    source = TransactionCellSource(tx, order_lock)

    witness = source.group_witness()
    if witness is not None:
        logger.debug("Route: direct cancellation")
        verify_cancellation(witness, user_lock_hash, authority)
        return Route.CANCELLATION

    owner_input = source.find_input_by_lock(user_lock_hash)
    if owner_input is not None:
        logger.debug("Route: owner spend", extra={"index": owner_input})
        if source.witness(owner_input) is None:
            raise WrongMatchInputWitnessError(owner_input)
        return Route.USER_LOCK

    logger.debug("Route: matching")
    validate_order_group(
        source.input_identities(),
        source.group_input_identities(),
        source,
        user_lock_hash,
    )
    return Route.MATCHING


def order_lock_error_handler(exc: OrderLockError) -> int:
    """
    Log a rejection and map it to the host status code
    """
    logger.warning(
        f"Order lock rejected: {exc.code.name}",
        extra={
            "code": exc.code.name,
            "error_message": exc.message,
            "details": exc.details,
            "status_code": exc.status_code,
        }
    )
    return exc.status_code


def program_entry(
    tx: Transaction,
    order_lock: Script,
    authority: Optional[SignatureAuthority] = None,
) -> int:
    """
    Script entry: 0 on success, the error's status code otherwise

    Example:
        >>> program_entry(tx, order_lock)
        0
    """
    setup_logging(level=settings.LOG_LEVEL, json_format=settings.use_json_logs)

    try:
        route = verify_order_lock(tx, order_lock, authority)
    except OrderLockError as exc:
        return order_lock_error_handler(exc)

    logger.info("Order lock accepted", extra={"route": route.value})
    return 0
