"""
Application bootstrap (``ledger_modules.bootstrap``).

Wires settings into the kernel: logging level, database engine, and the
append-only guards.  Entry points call ``init_from_settings`` once at
startup and then build services per session.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from ledger_config import LedgerSettings, get_active_config
from ledger_kernel.db.engine import init_engine_from_url
from ledger_kernel.logging_config import configure_logging
from ledger_modules._orm_registry import (
    create_all_tables,
    import_all_orm_models,
    register_append_only_models,
)


def init_from_settings(
    settings: LedgerSettings | None = None,
    create_schema: bool = False,
) -> Engine:
    """
    Configure logging and the database engine from ``settings``.

    Args:
        settings: Settings to apply. Defaults to ``get_active_config()``.
        create_schema: If True, create all tables after connecting.

    Returns:
        The initialized SQLAlchemy Engine.
    """
    settings = settings or get_active_config()
    configure_logging(level=settings.logging.level)

    engine = init_engine_from_url(
        settings.database.url,
        echo=settings.database.echo,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )
    import_all_orm_models()
    register_append_only_models()
    if create_schema:
        create_all_tables()
    return engine
