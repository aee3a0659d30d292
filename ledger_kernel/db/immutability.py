"""
ORM-Level Append-Only Enforcement.

Amendment rows are append-only: once flushed they are never modified.
Corrections are recorded as new amendments, and the CRUD layer may delete
a row outright, but an UPDATE is always a bug.

SQLAlchemy fires ``before_update`` before the SQL reaches the database:

    session.flush()
         |
         v
    [before_update event] --> _reject_update() --> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if the check passes)

Models opt in through ``register_append_only(Model)``. Importing a model
installs nothing: ``ledger_modules._orm_registry.register_append_only_models()``
does it, and both application start-up and every SQLAlchemy-backed project
repository call it, so sessions opened outside ``session_scope`` are guarded
too.
"""

from sqlalchemy import event

from ledger_kernel.exceptions import ImmutabilityViolationError
from ledger_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _reject_update(mapper, connection, target):
    """Block any UPDATE of an append-only row."""
    entity_type = type(target).__name__
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(target.id),
        reason=f"{entity_type} records are append-only and cannot be modified",
    )


def register_append_only(model) -> None:
    """Register the UPDATE guard on ``model`` (idempotent)."""
    if not event.contains(model, "before_update", _reject_update):
        event.listen(model, "before_update", _reject_update)


def unregister_append_only(model) -> None:
    """
    Remove the UPDATE guard from ``model``.

    WARNING: Only use this in tests that must bypass the guard.
    """
    if event.contains(model, "before_update", _reject_update):
        event.remove(model, "before_update", _reject_update)
