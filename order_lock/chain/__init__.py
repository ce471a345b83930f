"""
Chain Integration

Host-side transaction model for the order lock:
- Molecule codec for scripts and inputs
- Script hashing
- Pydantic transaction models
- CellSource over a resolved transaction
"""

from .hashing import ckb_hash
from .models import CellInput, CellOutput, OutPoint, ResolvedInput, Script, Transaction, WitnessArgs
from .molecule import HashType
from .source import TransactionCellSource

__all__ = [
    "CellInput",
    "CellOutput",
    "HashType",
    "OutPoint",
    "ResolvedInput",
    "Script",
    "Transaction",
    "TransactionCellSource",
    "WitnessArgs",
    "ckb_hash",
]
