"""
FastAPI dependencies.
Resolves the society (tenant) from the URL for every society-scoped route.
"""

from fastapi import Depends, HTTPException, status, Path
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society
from schemas.settings import BillingSettings
from services.society import load_billing_settings
from .society import set_current_society


# ==================== SOCIETY RESOLUTION ====================

async def resolve_society(
    society_slug: str = Path(..., description="Society slug (URL identifier)"),
    db: Session = Depends(get_db)
) -> Society:
    """
    Resolve society from URL path parameter and set the society context
    for this request.
    """
    society = db.query(Society).filter(Society.slug == society_slug).first()

    if not society:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Society not found"
        )

    if not society.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Society is not active"
        )

    set_current_society(society.id)

    return society


async def get_billing_settings(
    society: Society = Depends(resolve_society)
) -> BillingSettings:
    """Validated billing settings of the resolved society."""
    try:
        return load_billing_settings(society)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Society billing settings are invalid: {e.errors()[0].get('msg')}"
        )


# ==================== ERROR MAPPING ====================

def raise_for_message(message: str):
    """Service (ok=False, message) -> HTTP error. Missing entities map to 404."""
    if "not found" in message.lower():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
