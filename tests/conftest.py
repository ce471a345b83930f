"""
Pytest Configuration and Fixtures

Shared builders for order cells, balance cells and whole transactions.
Amounts are in the smallest unit: 1 ckb = 10^8 shannons, token balances
use the same 8 decimals.
"""

from types import SimpleNamespace

import pytest

from order_lock.chain.models import (
    CellInput,
    CellOutput,
    OutPoint,
    ResolvedInput,
    Script,
    Transaction,
    WitnessArgs,
)
from order_lock.chain.molecule import HashType
from order_lock.services.cell import CellSnapshot, SnapshotCellSource
from order_lock.services.matching import validate_order_cells
from order_lock.services.order_record import Direction, OrderRecord
from order_lock.services.price import Price

CKB = 10**8

ORDER_LOCK_HASH = bytes([0x11]) * 32
USER_LOCK_HASH = bytes([0x22]) * 32
SUDT_TYPE_HASH = bytes([0x33]) * 32
OTHER_HASH = bytes([0x44]) * 32


def encode_balance(balance: int) -> bytes:
    return balance.to_bytes(16, "little")


def encode_order(balance, remaining, price=(5, 0), direction=Direction.SELL, version=1) -> bytes:
    """Raw 43-byte order record; `version` is written as-is"""
    significand, exponent = price
    record = OrderRecord(balance, remaining, Price(significand, exponent), direction)
    return record.encode()[:-1] + bytes([version])


# ============================================================================
# SNAPSHOT BUILDERS (services layer)
# ============================================================================

@pytest.fixture
def hashes():
    """Lock/type identities used by snapshot builders"""
    return SimpleNamespace(
        order_lock=ORDER_LOCK_HASH,
        user_lock=USER_LOCK_HASH,
        sudt_type=SUDT_TYPE_HASH,
        other=OTHER_HASH,
    )


@pytest.fixture
def make_order_data():
    """Factory for raw order record bytes"""
    return encode_order


@pytest.fixture
def make_balance_data():
    return encode_balance


@pytest.fixture
def make_order_cell():
    """
    Factory for order cell snapshots under the order lock

    Usage:
        cell = make_order_cell(2000 * CKB, 50 * CKB, 150 * CKB, price=(5, 0))
    """
    def _make(value, balance, remaining, price=(5, 0), direction=Direction.SELL,
              type_identity=SUDT_TYPE_HASH):
        return CellSnapshot(
            value=value,
            data=encode_order(balance, remaining, price, direction),
            lock_identity=ORDER_LOCK_HASH,
            type_identity=type_identity,
        )
    return _make


@pytest.fixture
def make_sudt_cell():
    """Factory for owner balance cells (16-byte balance data)"""
    def _make(value, balance, type_identity=SUDT_TYPE_HASH, lock_identity=USER_LOCK_HASH):
        return CellSnapshot(
            value=value,
            data=encode_balance(balance),
            lock_identity=lock_identity,
            type_identity=type_identity,
        )
    return _make


@pytest.fixture
def make_free_cell():
    """Factory for owner free cells (no type, no data)"""
    def _make(value, data=b"", lock_identity=USER_LOCK_HASH):
        return CellSnapshot(value=value, data=data, lock_identity=lock_identity)
    return _make


@pytest.fixture
def check_pair():
    """
    Validate one before/after pair at position 0

    Returns the classified OrderState; raises on rejection.
    """
    def _check(before, after):
        cells = SnapshotCellSource([before], [after])
        return validate_order_cells(cells, 0, USER_LOCK_HASH)
    return _check


# ============================================================================
# TRANSACTION BUILDERS (chain layer)
# ============================================================================

def script(tag: int, args: bytes = b"", hash_type: HashType = HashType.TYPE) -> Script:
    return Script(code_hash=bytes([tag]) * 32, hash_type=hash_type, args=args)


@pytest.fixture
def user_lock():
    """Owner's lock script"""
    return script(0x01, args=bytes([0xAB]) * 20)


@pytest.fixture
def order_lock(user_lock):
    """Order lock parameterized with the owner's lock hash"""
    return script(0x02, args=user_lock.calc_hash())


@pytest.fixture
def sudt_type():
    return script(0x03, args=bytes([0xCD]) * 32)


@pytest.fixture
def other_lock():
    return script(0x04, args=bytes([0xEF]) * 20)


class TxBuilder:
    """Assembles a Transaction input by input and output by output"""

    def __init__(self):
        self.inputs = []
        self.outputs = []
        self.outputs_data = []
        self.witnesses = []

    def add_input(self, capacity, lock, data=b"", type_=None, witness=None):
        index = len(self.inputs)
        self.inputs.append(ResolvedInput(
            input=CellInput(previous_output=OutPoint(tx_hash=bytes([index + 1]) * 32, index=index)),
            output=CellOutput(capacity=capacity, lock=lock, type_=type_),
            data=data,
        ))
        self.witnesses.append(witness)
        return self

    def add_output(self, capacity, lock, data=b"", type_=None):
        self.outputs.append(CellOutput(capacity=capacity, lock=lock, type_=type_))
        self.outputs_data.append(data)
        return self

    def build(self) -> Transaction:
        return Transaction(
            inputs=self.inputs,
            outputs=self.outputs,
            outputs_data=self.outputs_data,
            witnesses=self.witnesses,
        )


@pytest.fixture
def tx_builder():
    """Fresh TxBuilder per test"""
    return TxBuilder()


@pytest.fixture
def cancel_witness(user_lock):
    """Witness carrying the owner's packed lock script and a signature"""
    return WitnessArgs(lock=bytes(65), input_type=user_lock.pack())


class StubAuthority:
    """SignatureAuthority that accepts or rejects every signature"""

    def __init__(self, accept=True):
        self.accept = accept
        self.calls = []

    def verify(self, user_lock, witness):
        self.calls.append((user_lock, witness))
        return self.accept


@pytest.fixture
def make_authority():
    def _make(accept=True):
        return StubAuthority(accept)
    return _make
