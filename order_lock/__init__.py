"""
Order Lock

Validator for limit orders that live in chain cells: decides whether a
transaction spending order cells fills, completes or cancels them
legally.
"""

__version__ = "0.1.0"
