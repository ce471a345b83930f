"""
Order Record Codec

Order cell data is a fixed 43-byte little-endian record:

    offset  size  field
    0       16    balance                 u128
    16      16    remaining_order_amount  u128
    32      8     price significand       u64
    40      1     price exponent          i8
    41      1     direction               u8  (0 = Sell, 1 = Buy)
    42      1     version                 u8  (must be 1)

Any other length is rejected; there is no variable-length encoding.
"""

from dataclasses import dataclass
from enum import IntEnum

from order_lock.core.config import BALANCE_FIELD_LEN, ORDER_DATA_LEN, ORDER_VERSION
from order_lock.core.exceptions import (
    UnexpectedVersionError,
    UnknownDirectionError,
    WrongRecordSizeError,
)
from order_lock.services.price import Price


class Direction(IntEnum):
    """
    Order side, named from the native value's point of view

    SELL: sells value (capacity) to buy balance (the traded token);
          remaining_order_amount is counted in balance units
    BUY:  pays balance to buy back value;
          remaining_order_amount is counted in value units
    """

    SELL = 0
    BUY = 1


@dataclass(frozen=True)
class OrderRecord:
    balance: int
    remaining_order_amount: int
    price: Price
    direction: Direction
    version: int = ORDER_VERSION

    @classmethod
    def decode(cls, data: bytes) -> "OrderRecord":
        """
        Decode order cell data

        Checks run in field order: size, price, direction, version.

        Raises:
            WrongRecordSizeError: data is not exactly 43 bytes
            OrderPriceIsZeroError / PriceExponentOutOfRangeError: bad price
            UnknownDirectionError: direction tag is neither 0 nor 1
            UnexpectedVersionError: version byte is not the supported one
        """
        if len(data) != ORDER_DATA_LEN:
            raise WrongRecordSizeError(len(data), ORDER_DATA_LEN)

        balance = int.from_bytes(data[0:16], "little")
        remaining_order_amount = int.from_bytes(data[16:32], "little")
        price = Price.decode(data[32:41])

        tag = data[41]
        try:
            direction = Direction(tag)
        except ValueError:
            raise UnknownDirectionError(tag) from None

        version = data[42]
        if version != ORDER_VERSION:
            raise UnexpectedVersionError(version, ORDER_VERSION)

        return cls(balance, remaining_order_amount, price, direction, version)

    def encode(self) -> bytes:
        return (
            self.balance.to_bytes(BALANCE_FIELD_LEN, "little")
            + self.remaining_order_amount.to_bytes(16, "little")
            + self.price.encode()
            + bytes([int(self.direction), self.version])
        )
