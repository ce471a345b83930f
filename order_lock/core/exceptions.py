"""
Standardized Validator Errors

Every rejection is an OrderLockError carrying a host status code, a
message and a `details` dict. The entry logs code, message and details
as structured `extra` fields.

All errors are fatal for the transaction: nothing in the validator
catches them. Only the host entry (order_lock.main.program_entry)
turns them into a status code.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class ErrorCode(IntEnum):
    """
    Host status codes

    1-31 keep the numbering of the deployed order lock so existing
    tooling reads the same codes. New checks start at 37.
    """

    INDEX_OUT_OF_BOUND = 1

    # Input order
    WRONG_USER_LOCK_HASH_SIZE = 5
    WRONG_ORDER_DATA_SIZE = 6
    ORDER_PRICE_IS_ZERO = 7
    UNKNOWN_ORDER_TYPE = 8
    UNEXPECTED_ORDER_VERSION = 9

    # Order deal
    UNKNOWN_OUTPUT_LOCK = 10
    OUTPUT_TYPE_HASH_CHANGED = 11
    OUTPUT_ORDER_PRICE_CHANGED = 12
    OUTPUT_ORDER_TYPE_CHANGED = 13
    OUTPUT_ORDER_DATA_SIZE_CHANGED = 14
    ORDER_AMOUNT_IS_ZERO = 15
    OUTPUT_NOT_A_SUDT_CELL = 16
    OUTPUT_NOT_A_FREE_CELL = 17
    BUY_ORDER_BALANCE_IS_ZERO = 18
    OUTPUT_SUDT_AMOUNT_IS_ZERO = 19
    OUTPUT_BURN_SUDT_AMOUNT = 20
    NEGATIVE_SUDT_DIFFERENCE = 21
    NEGATIVE_CAPACITY_DIFFERENCE = 22
    PRICE_MISMATCH = 23
    ORDER_STILL_MATCHABLE = 24

    # Direct cancellation
    USER_LOCK_NOT_FOUND = 26
    USER_LOCK_SCRIPT_ENCODING = 27
    USER_LOCK_HASH_NOT_MATCH = 28
    UNKNOWN_USER_LOCK_HASH_TYPE = 29
    VALIDATION_FUNCTION_NOT_FOUND = 31

    WRONG_MATCH_INPUT_WITNESS = 37
    PRICE_EXPONENT_OUT_OF_RANGE = 38
    ORDER_AMOUNT_INCREASED = 39
    ORDER_AMOUNT_MISMATCH = 40
    SIGNATURE_VERIFICATION_FAILED = 41
    ORDER_OVERFILLED = 42


class OrderLockError(Exception):
    """
    Base exception for validator rejections with structured payload

    Usage:
        raise OrderLockError(ErrorCode.PRICE_MISMATCH, "Price mismatch",
                             {"value_sold": 100, "balance_got": 5})
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """Non-zero code returned to the verifying host"""
        return int(self.code)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.name}, message={self.message!r})"


# Error families

class DecodeError(OrderLockError):
    """Malformed order record or price"""


class ClassificationError(OrderLockError):
    """Output went somewhere the order never authorized"""


class ConservationError(OrderLockError):
    """Value or balance moved wrongly, or the asset changed"""


class PriceError(OrderLockError):
    """Fee-adjusted price inequality violated"""


class CompletionError(OrderLockError):
    """Completion gating: zero amounts, dust gate, amount bookkeeping"""


class CancellationError(OrderLockError):
    """Cancellation path rejected"""


class CellSourceError(OrderLockError):
    """Host could not supply a requested cell"""


# Host / cell source

class IndexOutOfBoundError(CellSourceError):
    def __init__(self, index: int, side: str):
        super().__init__(
            ErrorCode.INDEX_OUT_OF_BOUND,
            f"No {side} cell at index {index}",
            {"index": index, "side": side}
        )


# Decoding

class WrongUserLockHashSizeError(DecodeError):
    def __init__(self, length: int):
        super().__init__(
            ErrorCode.WRONG_USER_LOCK_HASH_SIZE,
            f"Order lock args must be a 32-byte lock hash, got {length} bytes",
            {"length": length}
        )


class WrongRecordSizeError(DecodeError):
    """Order data has the wrong length (WrongDataLengthOrFormat)"""
    def __init__(self, length: int, expected: int):
        super().__init__(
            ErrorCode.WRONG_ORDER_DATA_SIZE,
            f"Wrong data length or format: order data must be {expected} bytes, got {length}",
            {"length": length, "expected": expected}
        )


class OrderPriceIsZeroError(DecodeError):
    def __init__(self):
        super().__init__(ErrorCode.ORDER_PRICE_IS_ZERO, "Order price is zero")


class PriceExponentOutOfRangeError(DecodeError):
    def __init__(self, exponent: int, low: int, high: int):
        super().__init__(
            ErrorCode.PRICE_EXPONENT_OUT_OF_RANGE,
            f"Price exponent must be between {low} and {high}",
            {"exponent": exponent}
        )


class UnknownDirectionError(DecodeError):
    def __init__(self, tag: int):
        super().__init__(
            ErrorCode.UNKNOWN_ORDER_TYPE,
            f"Unknown order direction tag {tag}",
            {"tag": tag}
        )


class UnexpectedVersionError(DecodeError):
    def __init__(self, version: int, expected: int):
        super().__init__(
            ErrorCode.UNEXPECTED_ORDER_VERSION,
            f"Unexpected order version {version}, only version {expected} is supported",
            {"version": version, "expected": expected}
        )


# Classification

class UnknownOutputLockError(ClassificationError):
    def __init__(self, lock_hash: bytes):
        super().__init__(
            ErrorCode.UNKNOWN_OUTPUT_LOCK,
            "Output lock is neither the order lock nor the owner's lock",
            {"lock_hash": lock_hash.hex()}
        )


# Conservation

class OutputTypeHashChangedError(ConservationError):
    def __init__(self):
        super().__init__(ErrorCode.OUTPUT_TYPE_HASH_CHANGED, "Output asset type changed")


class OutputNotASudtCellError(ConservationError):
    def __init__(self, length: int):
        super().__init__(
            ErrorCode.OUTPUT_NOT_A_SUDT_CELL,
            "Typed output must carry a 16-byte balance field",
            {"length": length}
        )


class OutputNotAFreeCellError(ConservationError):
    def __init__(self, length: int):
        super().__init__(
            ErrorCode.OUTPUT_NOT_A_FREE_CELL,
            "Untyped output must have empty data",
            {"length": length}
        )


class BuyOrderBalanceIsZeroError(ConservationError):
    def __init__(self):
        super().__init__(
            ErrorCode.BUY_ORDER_BALANCE_IS_ZERO,
            "Buy order holds no balance to pay with"
        )


class OutputSudtAmountIsZeroError(ConservationError):
    def __init__(self):
        super().__init__(
            ErrorCode.OUTPUT_SUDT_AMOUNT_IS_ZERO,
            "Completed sell order output holds zero balance"
        )


class OutputBurnSudtAmountError(ConservationError):
    def __init__(self, balance: int):
        super().__init__(
            ErrorCode.OUTPUT_BURN_SUDT_AMOUNT,
            "Completed order output burns the held balance",
            {"balance": balance}
        )


class NegativeSudtDifferenceError(ConservationError):
    def __init__(self, before: int, after: int):
        super().__init__(
            ErrorCode.NEGATIVE_SUDT_DIFFERENCE,
            "Balance moved against the order direction",
            {"before": before, "after": after}
        )


class NegativeCapacityDifferenceError(ConservationError):
    def __init__(self, before: int, after: int):
        super().__init__(
            ErrorCode.NEGATIVE_CAPACITY_DIFFERENCE,
            "Value moved against the order direction",
            {"before": before, "after": after}
        )


# Partial fill bookkeeping

class OutputOrderPriceChangedError(CompletionError):
    def __init__(self):
        super().__init__(ErrorCode.OUTPUT_ORDER_PRICE_CHANGED, "Partially filled order changed its price")


class OutputOrderTypeChangedError(CompletionError):
    def __init__(self):
        super().__init__(ErrorCode.OUTPUT_ORDER_TYPE_CHANGED, "Partially filled order changed its direction")


class OutputOrderDataSizeChangedError(CompletionError):
    def __init__(self, before: int, after: int):
        super().__init__(
            ErrorCode.OUTPUT_ORDER_DATA_SIZE_CHANGED,
            "Partially filled order changed its data size",
            {"before": before, "after": after}
        )


class OrderAmountIsZeroError(CompletionError):
    def __init__(self):
        super().__init__(ErrorCode.ORDER_AMOUNT_IS_ZERO, "Order amount is zero")


class OrderAmountIncreasedError(CompletionError):
    def __init__(self, before: int, after: int):
        super().__init__(
            ErrorCode.ORDER_AMOUNT_INCREASED,
            "Partially filled order increased its remaining amount",
            {"before": before, "after": after}
        )


class OrderAmountMismatchError(CompletionError):
    def __init__(self, decrease: int, traded: int):
        super().__init__(
            ErrorCode.ORDER_AMOUNT_MISMATCH,
            "Remaining amount decreased by more than was traded",
            {"decrease": decrease, "traded": traded}
        )


class OrderOverfilledError(CompletionError):
    def __init__(self, traded: int, remaining: int):
        super().__init__(
            ErrorCode.ORDER_OVERFILLED,
            "Traded amount exceeds the remaining order amount",
            {"traded": traded, "remaining": remaining}
        )


class OrderStillMatchableError(CompletionError):
    def __init__(self, remaining: int):
        super().__init__(
            ErrorCode.ORDER_STILL_MATCHABLE,
            "Order completed while it can still be matched",
            {"remaining": remaining}
        )


# Price

class PriceMismatchError(PriceError):
    def __init__(self, value_delta: int, balance_delta: int):
        super().__init__(
            ErrorCode.PRICE_MISMATCH,
            "Traded amounts violate the fee-adjusted order price",
            {"value_delta": value_delta, "balance_delta": balance_delta}
        )


# Cancellation

class UserLockNotFoundError(CancellationError):
    def __init__(self):
        super().__init__(ErrorCode.USER_LOCK_NOT_FOUND, "Cancel witness carries no user lock script")


class UserLockScriptEncodingError(CancellationError):
    def __init__(self, reason: str):
        super().__init__(
            ErrorCode.USER_LOCK_SCRIPT_ENCODING,
            f"Malformed user lock script: {reason}",
            {"reason": reason}
        )


class UnknownUserLockHashTypeError(CancellationError):
    def __init__(self, hash_type: int):
        super().__init__(
            ErrorCode.UNKNOWN_USER_LOCK_HASH_TYPE,
            f"Unknown script hash type {hash_type}",
            {"hash_type": hash_type}
        )


class UserLockHashNotMatchError(CancellationError):
    def __init__(self):
        super().__init__(ErrorCode.USER_LOCK_HASH_NOT_MATCH, "User lock hash does not match order lock args")


class ValidationFunctionNotFoundError(CancellationError):
    def __init__(self):
        super().__init__(
            ErrorCode.VALIDATION_FUNCTION_NOT_FOUND,
            "No signature authority available to verify the cancellation"
        )


class SignatureVerificationError(CancellationError):
    def __init__(self, reason: str = "signature rejected"):
        super().__init__(
            ErrorCode.SIGNATURE_VERIFICATION_FAILED,
            f"Cancellation signature verification failed: {reason}",
            {"reason": reason}
        )


class WrongMatchInputWitnessError(CancellationError):
    def __init__(self, index: int):
        super().__init__(
            ErrorCode.WRONG_MATCH_INPUT_WITNESS,
            "Owner's input must carry a witness to cancel the order",
            {"index": index}
        )
