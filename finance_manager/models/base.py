"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every balance-affecting
operation gets its own unit of work built on SessionLocal.
"""

from datetime import datetime

from sqlalchemy import create_engine, event, and_, Boolean, DateTime
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import (
    sessionmaker, DeclarativeBase, Mapped, mapped_column,
)

from finance_manager.config import get_settings
from finance_manager.models.types import register_sqlite_functions

settings = get_settings()


def build_engine(database_url: str):
    """
    Create an engine for the given URL.

    SQLite connections are used from the balance sync worker
    thread as well as from request workers, so the same-thread
    check has to be disabled for it. Each SQLite connection also
    gets the exact money aggregate used by Money sums.
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {}
    if is_sqlite:
        connect_args["check_same_thread"] = False
    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    if is_sqlite:
        event.listen(engine, "connect", register_sqlite_functions)
    return engine


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = build_engine(settings.DATABASE_URL)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. A transaction record and the wallet balance it
# affects must be committed together or not at all.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class SoftDeleteMixin:
    """
    Soft-delete columns shared by users, wallets and transactions.

    A row is active only when the flag is clear AND no deletion
    timestamp is set. ``is_active`` is the single definition of
    that rule: it evaluates on instances and renders as SQL on the
    class, so balance sums and list queries cannot disagree.
    """

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None, index=True
    )

    @hybrid_property
    def is_active(self) -> bool:
        return not self.is_deleted and self.deleted_at is None

    @is_active.expression
    def is_active(cls):
        return and_(cls.is_deleted.is_(False), cls.deleted_at.is_(None))

