"""
Database seed - creates the default society with standard flat types and
charge types on first run.
"""
from loguru import logger
from sqlalchemy.orm import Session

from core.config import settings
from schemas.settings import BillingSettings
from .models import Society, FlatType, ChargeType


DEFAULT_FLAT_TYPES = [
    {"name": "1 BHK", "default_area": 450},
    {"name": "2 BHK", "default_area": 750},
    {"name": "3 BHK", "default_area": 1100},
    {"name": "Shop", "default_area": 200},
]

DEFAULT_CHARGE_TYPES = [
    {"name": "Maintenance", "calculation_type": "per_sqft", "default_amount": 3},
    {"name": "Sinking Fund", "calculation_type": "per_sqft", "default_amount": 0.5},
    {"name": "Water Charges", "calculation_type": "fixed", "default_amount": 200},
    {"name": "Parking - 2 Wheeler", "calculation_type": "per_vehicle", "default_amount": 100,
     "vehicle_type": "2wheeler"},
    {"name": "Parking - 4 Wheeler", "calculation_type": "per_vehicle", "default_amount": 500,
     "vehicle_type": "4wheeler"},
]


def create_society(
    session: Session, name: str, slug: str, with_defaults: bool = True, **fields
) -> Society:
    """Create a society, optionally with the standard master data."""
    society = Society(
        name=name,
        slug=slug,
        settings=BillingSettings().model_dump(),
        is_active=True,
        **fields,
    )
    session.add(society)
    session.flush()

    if with_defaults:
        for ft in DEFAULT_FLAT_TYPES:
            session.add(FlatType(society_id=society.id, **ft))
        for order, ct in enumerate(DEFAULT_CHARGE_TYPES):
            session.add(ChargeType(society_id=society.id, sort_order=order, **ct))

    session.commit()
    return society


def seed_default_society(session: Session):
    """Create the default society if no society exists."""
    if session.query(Society).first():
        logger.info("Society already exists, skipping seed")
        return

    society = create_society(
        session,
        name=settings.default_society_name,
        slug=settings.default_society_slug,
    )
    logger.info(f"Default society created (slug={society.slug})")


def seed_all(session: Session):
    """Main seed entry point."""
    seed_default_society(session)
