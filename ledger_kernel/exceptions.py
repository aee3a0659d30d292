"""
Typed Exception Hierarchy for the Amendment Ledger.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers surface these errors as form-validation messages.  Matching on the
message text is fragile, so every error has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example:
    try:
        validate_funding(total, entity, university)
    except InvalidFundingError as e:
        api_response(code=e.code, reason=e.reason)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidAmendmentError
    |   +-- InvalidWindowError
    |   +-- InvalidFundingError
    |
    +-- ProjectError
    |   +-- ProjectNotFoundError
    |   +-- DuplicateProjectCodeError
    |   +-- AmendmentNotFoundError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                    | When Raised
-------------|-------------------------|------------------------------------------
Validation   | INVALID_AMENDMENT       | Kind unknown, or its required value/days
             |                         | are missing or not positive
             | INVALID_WINDOW          | Project start date after end date
             | INVALID_FUNDING         | Non-positive total, negative contribution,
             |                         | or contributions exceed the total
-------------|-------------------------|------------------------------------------
Project      | PROJECT_NOT_FOUND       | Project ID/code doesn't exist
             | DUPLICATE_PROJECT_CODE  | Project code already registered
             | AMENDMENT_NOT_FOUND     | Amendment ID doesn't exist
-------------|-------------------------|------------------------------------------
Immutability | IMMUTABILITY_VIOLATION  | Updating an append-only amendment row
"""


class LedgerKernelError(Exception):
    """
    Base exception for all amendment ledger errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Validation exceptions


class ValidationError(LedgerKernelError):
    """Base exception for input validation failures."""

    code: str = "VALIDATION_ERROR"


class InvalidAmendmentError(ValidationError):
    """
    An amendment does not satisfy the contract of its kind.

    Raised before the amendment is admitted to a ledger; an invalid
    amendment is never partially summarized.
    """

    code: str = "INVALID_AMENDMENT"

    def __init__(self, kind: str, field: str, value: object, reason: str):
        self.kind = kind
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {kind} amendment ({field}={value!r}): {reason}")


class InvalidWindowError(ValidationError):
    """Project start date falls after its end date."""

    code: str = "INVALID_WINDOW"

    def __init__(self, start_date: object, end_date: object, reason: str | None = None):
        self.start_date = start_date
        self.end_date = end_date
        self.reason = reason or "Start date cannot be after end date"
        super().__init__(f"Invalid project window {start_date} -> {end_date}: {self.reason}")


class InvalidFundingError(ValidationError):
    """Total value and contributions are inconsistent."""

    code: str = "INVALID_FUNDING"

    def __init__(
        self,
        total_value: object,
        contribution_a: object,
        contribution_b: object,
        reason: str,
    ):
        self.total_value = total_value
        self.contribution_a = contribution_a
        self.contribution_b = contribution_b
        self.reason = reason
        super().__init__(
            f"Invalid funding (total={total_value}, contributions="
            f"{contribution_a} + {contribution_b}): {reason}"
        )


# Project-related exceptions


class ProjectError(LedgerKernelError):
    """Base exception for project lookup and registration errors."""

    code: str = "PROJECT_ERROR"


class ProjectNotFoundError(ProjectError):
    """Project with given ID or code was not found."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_ref: str):
        self.project_ref = project_ref
        super().__init__(f"Project not found: {project_ref}")


class DuplicateProjectCodeError(ProjectError):
    """A project with the same code already exists."""

    code: str = "DUPLICATE_PROJECT_CODE"

    def __init__(self, project_code: str):
        self.project_code = project_code
        super().__init__(f"Project code already exists: {project_code}")


class AmendmentNotFoundError(ProjectError):
    """Amendment with given ID was not found."""

    code: str = "AMENDMENT_NOT_FOUND"

    def __init__(self, amendment_id: str):
        self.amendment_id = amendment_id
        super().__init__(f"Amendment not found: {amendment_id}")


# Immutability exceptions


class ImmutabilityError(LedgerKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify an append-only record.

    Amendments are never mutated once recorded; corrections are new
    amendments.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )
