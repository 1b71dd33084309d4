"""
Database package for the society billing API.

Usage:
    from database import db, get_db, init_db
    from database.models import Society, Flat, Bill, Payment
"""

from .base import Base, BaseModel, SocietyBaseModel, SocietyMixin, TimestampMixin
from .connection import (
    DatabaseConnection,
    db,
    get_db,
    init_db,
    reset_db,
)

# Import all models to ensure they are registered with SQLAlchemy
from .models import *


__all__ = [
    # Base
    'Base',
    'BaseModel',
    'SocietyBaseModel',
    'SocietyMixin',
    'TimestampMixin',

    # Connection
    'DatabaseConnection',
    'db',
    'get_db',
    'init_db',
    'reset_db',
]
