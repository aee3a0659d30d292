"""
Values -- wire-to-domain conversions for amounts, day counts and dates.

Responsibility:
    Turn the loosely typed values that arrive from forms and storage
    (decimal text, integers, ISO dates) into ``Decimal``, ``int`` and
    ``date``.  Amounts are NEVER carried as binary floats inside the
    ledger; a float that reaches this boundary is converted through its
    shortest ``repr`` so ``0.01`` becomes ``Decimal("0.01")``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Imported by the
    engines, which translate ``ValueError`` into their own typed errors.

Invariants enforced:
    - Amounts fit the storage column: at most ``AMOUNT_SCALE`` fractional
      digits and ``AMOUNT_PRECISION`` significant digits, so whatever is
      accepted here reads back unchanged from ``Numeric(38, 9)``.

Failure modes:
    - ValueError on unparseable, non-finite, boolean or fractional inputs,
      on amounts the storage column cannot hold exactly, and on dates
      pushed past ``date.max``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, Inexact, InvalidOperation, localcontext
from typing import Any

# Shape of the Numeric column every amount is stored in.
AMOUNT_PRECISION = 38
AMOUNT_SCALE = 9

# Largest power of ten a day count may reach before conversion to int.
_MAX_DAY_COUNT_EXPONENT = 9


def _fraction_places(amount: Decimal) -> int:
    """Significant fractional digits, ignoring trailing zeros."""
    if not amount:
        return 0
    _, digits, exponent = amount.as_tuple()
    places = -exponent if exponent < 0 else 0
    for digit in reversed(digits):
        if places == 0 or digit != 0:
            break
        places -= 1
    return places


def to_decimal(value: Any) -> Decimal:
    """
    Convert a monetary input to ``Decimal``.

    Preconditions:
        - ``value`` is a Decimal, int, float or decimal text.
    Postconditions:
        - Returns a finite ``Decimal`` with at most ``AMOUNT_SCALE``
          fractional digits and at most ``AMOUNT_PRECISION - AMOUNT_SCALE``
          integer digits.
    Raises:
        ValueError: if ``value`` is a bool, not numeric, not finite, or
            cannot be stored without rounding.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
    else:
        raise ValueError(f"Invalid amount: {value!r}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    if result and result.adjusted() >= AMOUNT_PRECISION - AMOUNT_SCALE:
        raise ValueError(f"Amount is too large: {value!r}")
    if _fraction_places(result) > AMOUNT_SCALE:
        raise ValueError(
            f"Amount has more than {AMOUNT_SCALE} decimal places: {value!r}"
        )
    return result


def to_day_count(value: Any) -> int:
    """
    Convert a day-count input to ``int``.

    Integral text (``"30"``) and integral Decimals/floats (``30.0``) are
    accepted; anything with a fractional part is rejected, as is anything
    of ten digits or more.

    Raises:
        ValueError: if ``value`` is a bool, fractional, oversized or not numeric.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid day count: {value!r}")
    if isinstance(value, int):
        return value
    amount = to_decimal(value)
    if amount and amount.adjusted() >= _MAX_DAY_COUNT_EXPONENT:
        raise ValueError(f"Day count is too large: {value!r}")
    if amount != amount.to_integral_value():
        raise ValueError(f"Day count must be a whole number: {value!r}")
    return int(amount)


def to_date(value: Any) -> date:
    """
    Parse a calendar date from a ``date`` or ISO-8601 text.

    A ``datetime`` is reduced to its date component.

    Raises:
        ValueError: if ``value`` is not a valid date representation.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Cannot parse date from {value!r}")


def add_amounts(left: Decimal, right: Decimal) -> Decimal:
    """
    Exact sum at storage precision.

    Raises:
        ValueError: if the sum cannot be stored without rounding.
    """
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        ctx.traps[Inexact] = True
        try:
            total = left + right
        except Inexact as e:
            raise ValueError(f"Sum of {left} and {right} exceeds {AMOUNT_PRECISION} digits") from e
    return to_decimal(total)


def add_days(start: date, days: int) -> date:
    """
    Return a new date ``days`` calendar days after ``start``.

    Raises:
        ValueError: if the result falls outside the supported date range.
    """
    try:
        return start + timedelta(days=days)
    except OverflowError as e:
        raise ValueError(f"{start.isoformat()} + {days} days is out of range") from e


def format_amount(amount: Decimal, places: int = 2) -> str:
    """Render ``amount`` as decimal text with exactly ``places`` decimals."""
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        quantum = Decimal(1).scaleb(-places)
        return str(amount.quantize(quantum, rounding=ROUND_HALF_UP))
