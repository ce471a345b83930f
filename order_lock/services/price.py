"""
Fixed-Point Price

A price is significand * 10^exponent, stored as 9 bytes:
- significand: u64 little endian, never zero
- exponent: i8, within [-100, 100]

Comparisons never divide. A ratio a / b is checked against the price by
cross-multiplying with the exact integer ratio numerator / denominator:

    a / b <= price   <=>   a * denominator <= b * numerator

Python ints are arbitrary precision, so no product can overflow and no
rounding can admit an off-by-one price violation.
"""

from dataclasses import dataclass

from order_lock.core.config import MAX_PRICE_EXPONENT, MIN_PRICE_EXPONENT, PRICE_BYTES_LEN
from order_lock.core.exceptions import (
    OrderPriceIsZeroError,
    PriceExponentOutOfRangeError,
    WrongRecordSizeError,
)

U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class Price:
    """
    Structural price: (5, 0) and (50, -1) are different prices

    Equality compares both fields, so a partial fill must keep the exact
    bytes it was placed with.
    """

    significand: int
    exponent: int

    @classmethod
    def decode(cls, data: bytes) -> "Price":
        """
        Decode 9 price bytes

        Raises:
            WrongRecordSizeError: data is not 9 bytes
            OrderPriceIsZeroError: significand is zero
            PriceExponentOutOfRangeError: exponent outside [-100, 100]

        Examples:
            >>> Price.decode(bytes([5, 0, 0, 0, 0, 0, 0, 0, 0]))
            Price(significand=5, exponent=0)
            >>> Price.decode(bytes([50, 0, 0, 0, 0, 0, 0, 0, 0xFF]))
            Price(significand=50, exponent=-1)
        """
        if len(data) != PRICE_BYTES_LEN:
            raise WrongRecordSizeError(len(data), PRICE_BYTES_LEN)

        significand = int.from_bytes(data[0:8], "little")
        if significand == 0:
            raise OrderPriceIsZeroError()

        exponent = int.from_bytes(data[8:9], "little", signed=True)
        if not MIN_PRICE_EXPONENT <= exponent <= MAX_PRICE_EXPONENT:
            raise PriceExponentOutOfRangeError(exponent, MIN_PRICE_EXPONENT, MAX_PRICE_EXPONENT)

        return cls(significand, exponent)

    def encode(self) -> bytes:
        return (
            self.significand.to_bytes(8, "little")
            + self.exponent.to_bytes(1, "little", signed=True)
        )

    def is_negative_exponent(self) -> bool:
        return self.exponent < 0

    def scaled_numerator(self) -> int:
        """significand * 10^exponent for exponent >= 0, else significand"""
        if self.is_negative_exponent():
            return self.significand
        return self.significand * 10 ** self.exponent

    def scaled_denominator(self) -> int:
        """10^|exponent| for exponent < 0, else 1"""
        if self.is_negative_exponent():
            return 10 ** -self.exponent
        return 1

    def __str__(self) -> str:
        return f"{self.significand}e{self.exponent}"
