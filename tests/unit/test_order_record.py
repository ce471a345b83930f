"""
Unit tests for the 43-byte order record codec
"""

import pytest

from order_lock.core.exceptions import (
    ErrorCode,
    OrderPriceIsZeroError,
    UnexpectedVersionError,
    UnknownDirectionError,
    WrongRecordSizeError,
)
from order_lock.services.order_record import Direction, OrderRecord
from order_lock.services.price import Price

CKB = 10**8


@pytest.mark.unit
def test_decode_sell_order(make_order_data):
    data = make_order_data(50 * CKB, 150 * CKB, price=(5, 0), direction=Direction.SELL)

    order = OrderRecord.decode(data)

    assert order.balance == 50 * CKB
    assert order.remaining_order_amount == 150 * CKB
    assert order.price == Price(5, 0)
    assert order.direction is Direction.SELL
    assert order.version == 1


@pytest.mark.unit
def test_field_offsets(make_order_data):
    data = make_order_data(1, 2, price=(3, -4), direction=Direction.BUY)

    assert len(data) == 43
    assert data[0:16] == (1).to_bytes(16, "little")
    assert data[16:32] == (2).to_bytes(16, "little")
    assert data[32:40] == (3).to_bytes(8, "little")
    assert data[40] == 0xFC
    assert data[41] == 1
    assert data[42] == 1


@pytest.mark.unit
def test_u128_fields_decode_full_range(make_order_data):
    max_u128 = 2**128 - 1
    order = OrderRecord.decode(make_order_data(max_u128, max_u128))

    assert order.balance == max_u128
    assert order.remaining_order_amount == max_u128


@pytest.mark.unit
@pytest.mark.parametrize("length", [0, 16, 42, 44, 77])
def test_wrong_size_rejected(length):
    with pytest.raises(WrongRecordSizeError) as exc_info:
        OrderRecord.decode(bytes(length))

    assert exc_info.value.code == ErrorCode.WRONG_ORDER_DATA_SIZE
    assert exc_info.value.details == {"length": length, "expected": 43}


@pytest.mark.unit
def test_zero_price_rejected(make_order_data):
    with pytest.raises(OrderPriceIsZeroError):
        OrderRecord.decode(make_order_data(0, 1, price=(0, 0)))


@pytest.mark.unit
@pytest.mark.parametrize("tag", [2, 255])
def test_unknown_direction_rejected(make_order_data, tag):
    with pytest.raises(UnknownDirectionError) as exc_info:
        OrderRecord.decode(make_order_data(0, 1, direction=tag))

    assert exc_info.value.code == ErrorCode.UNKNOWN_ORDER_TYPE


@pytest.mark.unit
@pytest.mark.parametrize("version", [0, 2])
def test_unexpected_version_rejected(make_order_data, version):
    with pytest.raises(UnexpectedVersionError) as exc_info:
        OrderRecord.decode(make_order_data(0, 1, version=version))

    assert exc_info.value.code == ErrorCode.UNEXPECTED_ORDER_VERSION


@pytest.mark.unit
def test_price_checked_before_direction(make_order_data):
    """Checks run in field order"""
    with pytest.raises(OrderPriceIsZeroError):
        OrderRecord.decode(make_order_data(0, 1, price=(0, 0), direction=7, version=9))


def raw_record(balance, remaining, significand, exponent, tag) -> bytes:
    return (
        balance.to_bytes(16, "little")
        + remaining.to_bytes(16, "little")
        + significand.to_bytes(8, "little")
        + exponent.to_bytes(1, "little", signed=True)
        + bytes([tag, 1])
    )


@pytest.mark.unit
@pytest.mark.parametrize("balance,remaining,significand,exponent,tag", [
    (2**128 - 1, 2**128 - 1, 5, 0, 0),
    (0, 1, 2**64 - 1, 100, 1),
    (1, 2, 1, -100, 0),
    (7, 9, 123, -5, 1),
])
def test_raw_record_reencodes_unchanged(balance, remaining, significand, exponent, tag):
    data = raw_record(balance, remaining, significand, exponent, tag)

    order = OrderRecord.decode(data)

    assert order.direction is Direction(tag)
    assert order.encode() == data
