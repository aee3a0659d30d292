"""
Module: ledger_engines.amendments
Responsibility:
    Validate contract amendments and replay a project's amendment ledger
    against its original terms to produce the effective value, effective
    end date and running totals.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel.domain and ledger_kernel.exceptions.

Invariants enforced:
    - Closed kinds: ``AmendmentKind`` is an enumeration; unknown kinds are
      rejected when parsed, never silently summarized as zero.
    - Kind contract: an amendment's kind fully determines which numeric
      fields are required; fields outside that contract are dropped at
      construction and never inspected by the reducer.
    - Construction-time gate: ``Amendment`` cannot exist unless it passes
      ``validate_amendment``.
    - Decimal-only arithmetic for monetary amounts.
    - Insertion order: the fold applies amendments in the order given, and
      each extension produces a new ``date`` (no mutation).
    - Purity: no clock access, no I/O, no logging.

Failure modes:
    - InvalidAmendmentError for an unknown kind, or a kind whose required
      value/day count is missing, unparseable, or not positive,
      or when applying an amendment would overflow the stored amount or the
      calendar.
    - ValueError when ``summarize`` receives a negative or unparseable
      original value or an unparseable original end date.

Usage:
    from ledger_engines.amendments import AmendmentKind, summarize

    summary = summarize(Decimal("100000000"), date(2025, 1, 1), amendments)
    summary.current_end_date  # date(2025, 2, 10)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import reduce
from itertools import accumulate
from typing import Any, Sequence
from uuid import UUID

from ledger_kernel.domain.values import (
    add_amounts,
    add_days,
    format_amount,
    to_date,
    to_day_count,
    to_decimal,
)
from ledger_kernel.exceptions import InvalidAmendmentError


class AmendmentKind(str, Enum):
    """What an amendment changes: the contract value, its term, or both."""

    ADDITION = "ADDITION"
    EXTENSION = "EXTENSION"
    ADDITION_AND_EXTENSION = "ADDITION_AND_EXTENSION"

    @property
    def adds_value(self) -> bool:
        return self in (AmendmentKind.ADDITION, AmendmentKind.ADDITION_AND_EXTENSION)

    @property
    def extends_term(self) -> bool:
        return self in (AmendmentKind.EXTENSION, AmendmentKind.ADDITION_AND_EXTENSION)

    @classmethod
    def parse(cls, value: Any) -> AmendmentKind:
        """
        Parse a kind from its wire spelling.

        Accepts the enum itself, its value, or one of the legacy spellings
        in ``KIND_ALIASES`` (case-insensitive).

        Raises:
            InvalidAmendmentError: if ``value`` names no known kind.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key in KIND_ALIASES:
                return KIND_ALIASES[key]
        raise InvalidAmendmentError(
            kind=str(value),
            field="kind",
            value=value,
            reason=f"Unknown amendment kind; expected one of {[k.value for k in cls]}",
        )


# Longest single extension accepted (about a century).
MAX_EXTENSION_DAYS = 36500


# Spellings used by earlier intake forms and the legacy prototype store.
KIND_ALIASES: dict[str, AmendmentKind] = {
    "ADICION": AmendmentKind.ADDITION,
    "PRORROGA": AmendmentKind.EXTENSION,
    "ADICION_PRORROGA": AmendmentKind.ADDITION_AND_EXTENSION,
    "BOTH": AmendmentKind.ADDITION_AND_EXTENSION,
}


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True)
class AmendmentTerms:
    """
    Normalized numeric terms of a validated amendment.

    Guarantees:
        - ``added_value`` is a positive Decimal iff ``kind.adds_value``,
          otherwise None.
        - ``extension_days`` is a positive int iff ``kind.extends_term``,
          otherwise None.
    """

    kind: AmendmentKind
    added_value: Decimal | None
    extension_days: int | None


def validate_amendment(
    kind: AmendmentKind | str,
    added_value: Any = None,
    extension_days: Any = None,
    max_extension_days: int = MAX_EXTENSION_DAYS,
) -> AmendmentTerms:
    """
    Check a proposed amendment against the contract of its kind.

    Preconditions:
        - Called before the amendment is admitted to a ledger.
    Postconditions:
        - Returns normalized ``AmendmentTerms``; no side effects.

    Raises:
        InvalidAmendmentError: unknown kind; value-adding kind without a
            positive ``added_value``; term-extending kind without a
            positive whole ``extension_days``, or one above
            ``max_extension_days``.
    """
    parsed = AmendmentKind.parse(kind)

    value: Decimal | None = None
    if parsed.adds_value:
        if _is_missing(added_value):
            raise InvalidAmendmentError(
                parsed.value, "added_value", added_value, "Added value is required"
            )
        try:
            value = to_decimal(added_value)
        except ValueError as e:
            raise InvalidAmendmentError(
                parsed.value, "added_value", added_value, "Added value is not a valid amount"
            ) from e
        if value <= 0:
            raise InvalidAmendmentError(
                parsed.value, "added_value", added_value, "Added value must be greater than 0"
            )

    days: int | None = None
    if parsed.extends_term:
        if _is_missing(extension_days):
            raise InvalidAmendmentError(
                parsed.value, "extension_days", extension_days, "Extension days are required"
            )
        try:
            days = to_day_count(extension_days)
        except ValueError as e:
            raise InvalidAmendmentError(
                parsed.value,
                "extension_days",
                extension_days,
                "Extension days must be a whole number of days",
            ) from e
        if days <= 0:
            raise InvalidAmendmentError(
                parsed.value,
                "extension_days",
                extension_days,
                "Extension days must be greater than 0",
            )
        if days > max_extension_days:
            raise InvalidAmendmentError(
                parsed.value,
                "extension_days",
                extension_days,
                f"Extension days cannot exceed {max_extension_days}",
            )

    return AmendmentTerms(kind=parsed, added_value=value, extension_days=days)


@dataclass(frozen=True)
class Amendment:
    """
    One recorded change to a project's value and/or end date.

    Contract:
        Frozen dataclass; ``__post_init__`` runs ``validate_amendment`` and
        stores the normalized terms, so an invalid Amendment cannot exist.
    Guarantees:
        - ``kind`` is an ``AmendmentKind``.
        - Numeric fields outside the kind's contract are None.
    Non-goals:
        - Does not assign ``id``, ``sequence`` or ``created_at``; the
          intake layer does.
    """

    id: UUID
    project_id: UUID
    kind: AmendmentKind
    sequence: int
    created_at: datetime
    added_value: Decimal | None = None
    extension_days: int | None = None
    justification: str = ""
    administrative_act: str | None = None
    approval_date: date | None = None

    def __post_init__(self) -> None:
        terms = validate_amendment(self.kind, self.added_value, self.extension_days)
        object.__setattr__(self, "kind", terms.kind)
        object.__setattr__(self, "added_value", terms.added_value)
        object.__setattr__(self, "extension_days", terms.extension_days)


@dataclass(frozen=True)
class LedgerSummary:
    """
    Effective project terms after replaying its amendments.

    Guarantees:
        - ``current_value == original value + total_additions``.
        - ``current_end_date == original end date + total_extension_days``.
    """

    current_value: Decimal
    current_end_date: date
    total_additions: Decimal
    total_extension_days: int
    amendment_count: int

    def to_wire(self, places: int = 2) -> dict[str, Any]:
        """Wire form: amounts as quantized decimal text, dates as ISO text."""
        return {
            "current_value": format_amount(self.current_value, places),
            "current_end_date": self.current_end_date.isoformat(),
            "total_additions": format_amount(self.total_additions, places),
            "total_extension_days": self.total_extension_days,
            "amendment_count": self.amendment_count,
        }


def _apply(state: LedgerSummary, amendment: Amendment) -> LedgerSummary:
    """One fold step: returns a new summary with ``amendment`` applied."""
    value = state.current_value
    additions = state.total_additions
    end_date = state.current_end_date
    days = state.total_extension_days

    if amendment.kind.adds_value:
        try:
            value = add_amounts(value, amendment.added_value)
            additions = add_amounts(additions, amendment.added_value)
        except ValueError as e:
            raise InvalidAmendmentError(
                amendment.kind.value,
                "added_value",
                amendment.added_value,
                "Contract value would exceed the storable amount",
            ) from e
    if amendment.kind.extends_term:
        end_date = _extend(end_date, amendment.extension_days, amendment.kind)
        days = days + amendment.extension_days

    return LedgerSummary(
        current_value=value,
        current_end_date=end_date,
        total_additions=additions,
        total_extension_days=days,
        amendment_count=state.amendment_count + 1,
    )


def _extend(end_date: date, days: int, kind: AmendmentKind) -> date:
    try:
        return add_days(end_date, days)
    except ValueError as e:
        raise InvalidAmendmentError(
            kind.value,
            "extension_days",
            days,
            "Extended end date is out of range",
        ) from e


def _opening_state(original_value: Any, original_end_date: Any) -> LedgerSummary:
    value = to_decimal(original_value)
    if value < 0:
        raise ValueError(f"Original value cannot be negative: {original_value!r}")
    return LedgerSummary(
        current_value=value,
        current_end_date=to_date(original_end_date),
        total_additions=Decimal("0"),
        total_extension_days=0,
        amendment_count=0,
    )


def summarize(
    original_value: Decimal | str | int,
    original_end_date: date | str,
    amendments: Sequence[Amendment],
) -> LedgerSummary:
    """
    Replay ``amendments`` in insertion order against the original terms.

    Postconditions:
        - Empty ``amendments`` returns the originals with zero totals.
        - Same inputs in the same order always return an equal summary.

    Raises:
        ValueError: negative/unparseable original value or end date.
        InvalidAmendmentError: an amendment would push the value or end date
            out of range.
    """
    return reduce(_apply, amendments, _opening_state(original_value, original_end_date))


def replay(
    original_value: Decimal | str | int,
    original_end_date: date | str,
    amendments: Sequence[Amendment],
) -> tuple[LedgerSummary, ...]:
    """
    Running summaries: the opening state followed by one state per amendment.

    The last element always equals ``summarize(...)`` for the same inputs.
    """
    return tuple(
        accumulate(
            amendments,
            _apply,
            initial=_opening_state(original_value, original_end_date),
        )
    )


def projected_end_date(
    current_end_date: date | str,
    extension_days: Any,
    max_extension_days: int = MAX_EXTENSION_DAYS,
) -> date:
    """
    End date a proposed extension would produce.

    Raises:
        InvalidAmendmentError: if ``extension_days`` is not a positive whole
            number no larger than ``max_extension_days``, or the resulting
            date is past the end of the calendar.
    """
    terms = validate_amendment(
        AmendmentKind.EXTENSION,
        None,
        extension_days,
        max_extension_days=max_extension_days,
    )
    return _extend(to_date(current_end_date), terms.extension_days, terms.kind)
