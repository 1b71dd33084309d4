"""Initial schema - societies, master data, flats, bills, payments, expenses

Revision ID: 001_initial_schema
Revises: (none)
Create Date: 2026-03-01

Creates ALL tables from SQLAlchemy models using metadata.create_all().
"""

from alembic import op
from loguru import logger

revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create all tables from SQLAlchemy models."""
    conn = op.get_bind()

    # Import all models so they register with Base.metadata
    from database.base import Base
    from database.models import (
        society, master_data, flat, billing, expense
    )

    Base.metadata.create_all(bind=conn, checkfirst=True)

    logger.info("All tables created from SQLAlchemy models")


def downgrade():
    """Drop all tables."""
    conn = op.get_bind()

    from database.base import Base
    from database.models import (
        society, master_data, flat, billing, expense
    )

    Base.metadata.drop_all(bind=conn)
    logger.info("All tables dropped")
