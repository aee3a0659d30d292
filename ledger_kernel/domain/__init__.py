"""
Pure domain layer.

Value parsing and time abstractions with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O (other than SystemClock)
"""

from ledger_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SequentialClock,
    SystemClock,
)
from ledger_kernel.domain.values import (
    add_days,
    format_amount,
    to_date,
    to_day_count,
    to_decimal,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SequentialClock",
    "SystemClock",
    "add_days",
    "format_amount",
    "to_date",
    "to_day_count",
    "to_decimal",
]
