"""
Base model class and common mixins for all database models.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, declared_attr

from core.config import settings

Base = declarative_base()

LOCAL_TZ = settings.local_timezone


def get_local_now():
    """Get current time in the society timezone (as naive datetime)."""
    return datetime.now(LOCAL_TZ).replace(tzinfo=None)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(DateTime, default=get_local_now, nullable=False)
    updated_at = Column(DateTime, default=get_local_now, onupdate=get_local_now, nullable=False)


class SocietyMixin:
    """
    Mixin that adds society_id to any model.
    All society-scoped models MUST use this mixin.
    """

    @declared_attr
    def society_id(cls):
        return Column(
            Integer,
            ForeignKey('societies.id', ondelete='CASCADE'),
            nullable=False,
            index=True
        )


class BaseModel(Base, TimestampMixin):
    """Abstract base model for NON-society models (Society itself)."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    def to_dict(self):
        """Convert model to dictionary."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"


class SocietyBaseModel(Base, TimestampMixin, SocietyMixin):
    """
    Abstract base model for ALL society-scoped models.

    Includes:
    - id (PK)
    - society_id (FK -> societies.id) with index
    - created_at, updated_at timestamps

    Queries on SocietyBaseModel subclasses are filtered by society_id
    via SQLAlchemy event listener once a society is resolved for the request.
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    def to_dict(self):
        """Convert model to dictionary."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id}, society_id={self.society_id})>"
