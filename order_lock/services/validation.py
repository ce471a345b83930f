"""
Order Invariant Validator

Checks one classified before/after pair of an order cell.

Invariants:
- Asset identity (type hash) never changes while the order lives
- A partial fill keeps price, direction and record size, and leaves a
  nonzero remaining amount that decreased by no more than was traded
- Value and balance only move in the order's direction
- Traded amounts respect the order price after the 0.3% fee
- No single deal trades more than the remaining order amount
- An order only completes once it cannot be matched any further

Price arithmetic (F = 3, D = 1000, price = num / den):

    Sell (value sold for balance):
        (D - F) * value_sold * den  <=  D * balance_got * num
    Buy (balance paid for value):
        D * value_bought * den  >=  (D - F) * balance_paid * num

Every term is an exact integer; nothing is divided.
"""

from order_lock.core.config import BALANCE_CELL_CAPACITY, FEE, FEE_DECIMAL
from order_lock.core.exceptions import (
    BuyOrderBalanceIsZeroError,
    NegativeCapacityDifferenceError,
    NegativeSudtDifferenceError,
    OrderAmountIncreasedError,
    OrderAmountIsZeroError,
    OrderAmountMismatchError,
    OrderOverfilledError,
    OrderStillMatchableError,
    OutputBurnSudtAmountError,
    OutputNotAFreeCellError,
    OutputNotASudtCellError,
    OutputOrderDataSizeChangedError,
    OutputOrderPriceChangedError,
    OutputOrderTypeChangedError,
    OutputSudtAmountIsZeroError,
    OutputTypeHashChangedError,
    PriceMismatchError,
)
from order_lock.services.cell import CellSnapshot
from order_lock.services.classifier import OrderState
from order_lock.services.order_record import Direction, OrderRecord
from order_lock.services.price import Price


def sell_price_satisfied(
    value_sold: int,
    balance_got: int,
    price: Price,
    fee: int = FEE,
    fee_decimal: int = FEE_DECIMAL,
) -> bool:
    """
    Check that value sold, after the fee, buys balance at the order price or better

    Examples:
        >>> # 752.25 ckb sold for 150 tokens at price 5: 750 after fee
        >>> sell_price_satisfied(752_25_000_000, 150_00_000_000, Price(5, 0))
        True
        >>> sell_price_satisfied(1000_00_000_000, 100_00_000_000, Price(5, 0))
        False
    """
    return (
        (fee_decimal - fee) * value_sold * price.scaled_denominator()
        <= fee_decimal * balance_got * price.scaled_numerator()
    )


def buy_price_satisfied(
    value_bought: int,
    balance_paid: int,
    price: Price,
    fee: int = FEE,
    fee_decimal: int = FEE_DECIMAL,
) -> bool:
    """
    Check that value bought covers the fee-discounted balance paid at the order price

    Examples:
        >>> # paid 150.45 tokens at price 5 for 750 ckb
        >>> buy_price_satisfied(750_00_000_000, 150_45_000_000, Price(5, 0))
        True
        >>> buy_price_satisfied(300_00_000_000, 1000_00_000_000, Price(5, 0))
        False
    """
    return (
        fee_decimal * value_bought * price.scaled_denominator()
        >= (fee_decimal - fee) * balance_paid * price.scaled_numerator()
    )


def sell_still_matchable(sellable_value: int, price: Price) -> bool:
    """
    Can the leftover value still buy at least one smallest token unit?

    (sellable * 997 / 1000) / price >= 1
    """
    return (
        (FEE_DECIMAL - FEE) * sellable_value * price.scaled_denominator()
        >= FEE_DECIMAL * price.scaled_numerator()
    )


def buy_still_matchable(sellable_balance: int, price: Price) -> bool:
    """
    Can the leftover balance still buy at least one shannon?

    (sellable * 997 / 1000) * price >= 1
    """
    return (
        (FEE_DECIMAL - FEE) * sellable_balance * price.scaled_numerator()
        >= FEE_DECIMAL * price.scaled_denominator()
    )


def validate_transition(
    state: OrderState,
    order: OrderRecord,
    before: CellSnapshot,
    after: CellSnapshot,
) -> None:
    """
    Validate one classified order transition

    The caller has already rejected orders with nothing remaining.

    Args:
        state: Classification of the pair
        order: Order record decoded from `before`
        before: Order cell being spent
        after: Output at the same position

    Raises:
        OrderLockError subclass for the first violated invariant
    """
    after_order = None
    if state is OrderState.PARTIAL_FILLED:
        after_order = check_partial_fill(order, before, after)
    elif state is OrderState.SELL_COMPLETED:
        check_sell_completion(order, before, after)
    else:
        check_buy_completion(before, after)

    if order.direction is Direction.SELL:
        traded = validate_sell_price(order, before, after, completed=state.is_completed)
    else:
        traded = validate_buy_price(order, before, after, completed=state.is_completed)

    if after_order is not None:
        check_remaining_decrease(order, after_order, traded)


def check_partial_fill(order: OrderRecord, before: CellSnapshot, after: CellSnapshot) -> OrderRecord:
    """
    Order cell recreated under its own lock: only the amounts may change

    Returns:
        The decoded output order record
    """
    if after.type_identity != before.type_identity:
        raise OutputTypeHashChangedError()

    if len(after.data) != len(before.data):
        raise OutputOrderDataSizeChangedError(len(before.data), len(after.data))

    after_order = OrderRecord.decode(after.data)
    if after_order.price != order.price:
        raise OutputOrderPriceChangedError()

    if after_order.direction is not order.direction:
        raise OutputOrderTypeChangedError()

    # Nothing left means the order completed and must go to the owner
    if after_order.remaining_order_amount == 0:
        raise OrderAmountIsZeroError()

    return after_order


def check_sell_completion(order: OrderRecord, before: CellSnapshot, after: CellSnapshot) -> None:
    """
    Sell order paid out to the owner

    A typed output is a balance cell of the same asset holding the bought
    balance. An untyped output is a free cell, legal only when the order
    held no balance (otherwise that balance would vanish).
    """
    if after.type_identity is not None:
        if after.type_identity != before.type_identity:
            raise OutputTypeHashChangedError()

        if not after.has_balance_field():
            raise OutputNotASudtCellError(len(after.data))

        if after.balance == 0:
            if order.balance != 0:
                raise OutputBurnSudtAmountError(order.balance)
            raise OutputSudtAmountIsZeroError()
    else:
        if len(after.data) != 0:
            raise OutputNotAFreeCellError(len(after.data))

        if order.balance != 0:
            raise OutputBurnSudtAmountError(order.balance)


def check_buy_completion(before: CellSnapshot, after: CellSnapshot) -> None:
    """
    Buy order paid out to the owner: a balance cell of the same asset
    keeping any unspent balance, or a free cell once everything was paid
    """
    if after.type_identity is not None:
        if after.type_identity != before.type_identity:
            raise OutputTypeHashChangedError()

        if not after.has_balance_field():
            raise OutputNotASudtCellError(len(after.data))
    elif len(after.data) != 0:
        raise OutputNotAFreeCellError(len(after.data))


def validate_sell_price(order: OrderRecord, before: CellSnapshot, after: CellSnapshot, completed: bool) -> int:
    """
    Sell order: value goes down, balance goes up

    Returns:
        Balance bought (counted against remaining_order_amount)

    Example (partial fill into completion):
        before: value 2000 ckb, balance 50, remaining 150, price 5
        after:  value 1247.75 ckb, balance 200
        sold 752.25 ckb, got 150: 997 * 752.25 <= 1000 * 150 * 5  -> OK
        remaining 150 - 150 = 0 -> completion allowed
    """
    if after.value > before.value:
        raise NegativeCapacityDifferenceError(before.value, after.value)

    balance_before = before.balance
    balance_after = after.balance
    if balance_after < balance_before:
        raise NegativeSudtDifferenceError(balance_before, balance_after)

    value_sold = before.value - after.value
    balance_got = balance_after - balance_before

    if not sell_price_satisfied(value_sold, balance_got, order.price):
        raise PriceMismatchError(value_sold, balance_got)

    if balance_got > order.remaining_order_amount:
        raise OrderOverfilledError(balance_got, order.remaining_order_amount)

    remaining = order.remaining_order_amount - balance_got
    if completed and remaining >= 1:
        # Value locked up by the balance cell itself can't be sold
        sellable_value = max(after.value - BALANCE_CELL_CAPACITY, 0)
        if sell_still_matchable(sellable_value, order.price):
            raise OrderStillMatchableError(remaining)

    return balance_got


def validate_buy_price(order: OrderRecord, before: CellSnapshot, after: CellSnapshot, completed: bool) -> int:
    """
    Buy order: balance goes down, value goes up

    Returns:
        Value bought (counted against remaining_order_amount)

    Example:
        before: value 800 ckb, balance 500, remaining 1000 ckb, price 5
        after:  value 1550 ckb, balance 349.55
        bought 750 ckb, paid 150.45: 1000 * 750 >= 997 * 150.45 * 5  -> OK
    """
    if before.value > after.value:
        raise NegativeCapacityDifferenceError(before.value, after.value)

    balance_before = before.balance
    if balance_before == 0:
        raise BuyOrderBalanceIsZeroError()

    balance_after = after.balance
    if balance_after > balance_before:
        raise NegativeSudtDifferenceError(balance_before, balance_after)

    value_bought = after.value - before.value
    balance_paid = balance_before - balance_after

    if not buy_price_satisfied(value_bought, balance_paid, order.price):
        raise PriceMismatchError(value_bought, balance_paid)

    if value_bought > order.remaining_order_amount:
        raise OrderOverfilledError(value_bought, order.remaining_order_amount)

    remaining = order.remaining_order_amount - value_bought
    if completed and remaining >= 1 and buy_still_matchable(balance_after, order.price):
        raise OrderStillMatchableError(remaining)

    return value_bought


def check_remaining_decrease(order: OrderRecord, after_order: OrderRecord, traded: int) -> None:
    """
    Remaining amount only shrinks, and by no more than was traded

    Example:
        remaining 1000 -> 250 after buying 750: decrease 750 <= 750 -> OK
        remaining 1000 -> 200 after buying 750: decrease 800 > 750 -> rejected
    """
    before_amount = order.remaining_order_amount
    after_amount = after_order.remaining_order_amount

    if after_amount > before_amount:
        raise OrderAmountIncreasedError(before_amount, after_amount)

    decrease = before_amount - after_amount
    if decrease > traded:
        raise OrderAmountMismatchError(decrease, traded)
