"""SQLAlchemy declarative base and common mixins.

This module provides the base class for all database models
along with reusable mixins for common patterns.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides a common foundation for model definitions with
    a primary-key based repr.
    """

    def __repr__(self) -> str:
        """Generate string representation of the model instance.

        Returns:
            String with class name and primary key values.
        """
        pk_cols = [col.name for col in self.__table__.primary_key.columns]
        pk_values = ", ".join(f"{col}={getattr(self, col, None)}" for col in pk_cols)
        return f"<{self.__class__.__name__}({pk_values})>"


class CreatedAtMixin:
    """Mixin that adds an immutable creation timestamp.

    The value is assigned in Python at insert time so that rows created
    within the same second still sort by creation order.

    Attributes:
        created_at: Timestamp when record was created.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
