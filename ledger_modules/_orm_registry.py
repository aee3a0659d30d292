"""
Module ORM Registry (``ledger_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level ORM model is imported so ``Base.metadata``
knows its table before tables are created, and register the append-only
guard on models whose rows must never be updated.

Architecture position
---------------------
**Modules layer** -- utility.  Imports from sibling ``ledger_modules``
packages and from ``ledger_kernel.db`` (allowed: modules -> kernel).
MUST NOT be imported by ``ledger_kernel``.
"""


def import_all_orm_models() -> None:
    """Import every ``ledger_modules.*.orm`` module (idempotent)."""
    import ledger_modules.project.orm  # noqa: F401


def register_append_only_models() -> None:
    """Install the UPDATE guard on append-only models (idempotent)."""
    from ledger_kernel.db.immutability import register_append_only
    from ledger_modules.project.orm import ProjectAmendmentModel

    register_append_only(ProjectAmendmentModel)


def create_all_tables() -> None:
    """Register all module ORM models, then create every table."""
    from ledger_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()
