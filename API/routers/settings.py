"""
Settings router - society profile and billing configuration.
Endpoint: /api/v1/{society_slug}/settings/...
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society
from core.dependencies import resolve_society, get_billing_settings
from schemas.settings import (
    BillingSettings, BillingSettingsUpdate, SocietyProfileUpdate, SocietyResponse,
)
from services.society import SocietyService


router = APIRouter()


@router.get("", summary="Society profile and billing settings")
async def get_settings(
    society: Society = Depends(resolve_society),
    billing_settings: BillingSettings = Depends(get_billing_settings)
):
    return {
        "success": True,
        "data": {
            "society": SocietyResponse.model_validate(society),
            "billing": billing_settings,
        }
    }


@router.put("/profile", summary="Update society profile")
async def update_profile(
    data: SocietyProfileUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    service = SocietyService(db)
    ok, msg = service.update_profile(society, data.model_dump(exclude_unset=True))
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg)
    return {
        "success": True,
        "message": msg,
        "data": SocietyResponse.model_validate(society),
    }


@router.put("/billing", summary="Update billing settings")
async def update_billing_settings(
    data: BillingSettingsUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    """
    Merge the given fields into the billing settings.
    The merged document is validated as a whole; nothing is saved if it is invalid.
    """
    service = SocietyService(db)
    ok, msg, new_settings = service.update_settings(
        society, data.model_dump(exclude_unset=True)
    )
    if not ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg)
    return {"success": True, "message": msg, "data": new_settings}
