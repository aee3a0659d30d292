"""
Module: ledger_engines.project_terms
Responsibility:
    Validate a project's execution window and funding split at creation
    time, independent of the amendment ledger.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Window: start date on or before end date.
    - Funding: positive total, non-negative contributions, contributions
      never exceeding the total.
    - Decimal-only arithmetic, exact to the stored precision.

Failure modes:
    - InvalidWindowError, InvalidFundingError as described above; also when
      an input cannot be parsed as a date or as a storable amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from typing import Any

from ledger_kernel.domain.values import (
    AMOUNT_PRECISION,
    add_amounts,
    to_date,
    to_decimal,
)
from ledger_kernel.exceptions import InvalidFundingError, InvalidWindowError


@dataclass(frozen=True)
class ProjectWindow:
    start_date: date
    end_date: date

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days


@dataclass(frozen=True)
class FundingSplit:
    """
    Validated funding of a project.

    Guarantees:
        - ``total_value > 0``; both contributions ``>= 0``.
        - ``contribution_a + contribution_b <= total_value``.
    """

    total_value: Decimal
    contribution_a: Decimal
    contribution_b: Decimal

    @property
    def unfunded(self) -> Decimal:
        """Portion of the total not covered by either contribution."""
        with localcontext() as ctx:
            ctx.prec = AMOUNT_PRECISION
            return self.total_value - self.contribution_a - self.contribution_b


def validate_project_window(start_date: date | str, end_date: date | str) -> ProjectWindow:
    """
    Raises:
        InvalidWindowError: if ``start_date`` is strictly after ``end_date``
            or either cannot be parsed.
    """
    try:
        start = to_date(start_date)
        end = to_date(end_date)
    except ValueError as e:
        raise InvalidWindowError(start_date, end_date, "Dates must be ISO calendar dates") from e

    if start > end:
        raise InvalidWindowError(start, end)
    return ProjectWindow(start_date=start, end_date=end)


def validate_funding(
    total_value: Any,
    contribution_a: Any,
    contribution_b: Any,
) -> FundingSplit:
    """
    Raises:
        InvalidFundingError: total ``<= 0``, a negative contribution,
            contributions summing past the total, or an unparseable amount.
    """
    try:
        total = to_decimal(total_value)
        a = to_decimal(contribution_a)
        b = to_decimal(contribution_b)
    except ValueError as e:
        raise InvalidFundingError(
            total_value, contribution_a, contribution_b, "Amounts must be numeric"
        ) from e

    if total <= 0:
        raise InvalidFundingError(
            total, a, b, "Project value must be greater than 0"
        )
    if a < 0 or b < 0:
        raise InvalidFundingError(
            total, a, b, "Contributions cannot be negative"
        )
    try:
        funded = add_amounts(a, b)
    except ValueError as e:
        raise InvalidFundingError(
            total, a, b, "Contributions cannot exceed the project value"
        ) from e
    if funded > total:
        raise InvalidFundingError(
            total, a, b, "Contributions cannot exceed the project value"
        )
    return FundingSplit(total_value=total, contribution_a=a, contribution_b=b)
