"""
Society service - society profile and billing settings.
"""

from typing import Optional, Tuple

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database.models import Society
from schemas.settings import BillingSettings


def load_billing_settings(society: Society) -> BillingSettings:
    """
    Validate the society's stored settings document.
    Raises pydantic.ValidationError on a malformed document.
    """
    return BillingSettings.model_validate(society.settings or {})


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else first.get("msg", "Invalid settings")


class SocietyService:
    """Society profile and settings management."""

    def __init__(self, db: Session):
        self.db = db

    def update_profile(self, society: Society, data: dict) -> Tuple[bool, str]:
        for key, value in data.items():
            if value is not None and hasattr(society, key):
                setattr(society, key, value.strip() if isinstance(value, str) else value)
        self.db.commit()
        return True, "Society details saved"

    def update_settings(
        self, society: Society, data: dict
    ) -> Tuple[bool, str, Optional[BillingSettings]]:
        """
        Merge `data` onto the stored settings document and validate the result.
        Stored keys not in `data` are kept as they are, so a broken document is
        only saved once the update repairs it.
        """
        current = dict(society.settings or {})
        current.update({k: v for k, v in data.items() if v is not None})
        try:
            new_settings = BillingSettings.model_validate(current)
        except ValidationError as e:
            logger.warning(f"[{society.slug}] Settings update rejected: {_validation_message(e)}")
            return False, _validation_message(e), None

        society.settings = new_settings.model_dump()
        self.db.commit()
        logger.info(f"[{society.slug}] Billing settings updated")
        return True, "Settings saved", new_settings
