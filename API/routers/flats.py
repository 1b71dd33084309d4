"""
Flats router - flat register (owners, tenants, vehicles).
Endpoint: /api/v1/{society_slug}/flats/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society
from core.dependencies import resolve_society, raise_for_message
from schemas.flat import FlatCreate, FlatUpdate, FlatResponse, FlatListResponse
from services.flats import FlatService


router = APIRouter()


@router.get("", response_model=FlatListResponse, summary="List flats")
async def get_flats(
    building_id: Optional[int] = Query(None),
    occupancy_type: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Flat no, owner or tenant name"),
    include_inactive: bool = True,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flats = FlatService(db, society.id).get_flats(
        building_id, occupancy_type, search, include_inactive
    )
    return FlatListResponse(
        data=[FlatResponse.model_validate(f) for f in flats],
        count=len(flats)
    )


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create flat")
async def create_flat(
    data: FlatCreate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flat, msg = FlatService(db, society.id).create_flat(data.model_dump())
    if not flat:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": FlatResponse.model_validate(flat)}


@router.get("/{flat_id}", response_model=FlatResponse, summary="Flat detail")
async def get_flat(
    flat_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flat = FlatService(db, society.id).get_flat(flat_id)
    if not flat:
        raise HTTPException(status_code=404, detail="Flat not found")
    return flat


@router.put("/{flat_id}", summary="Update flat")
async def update_flat(
    flat_id: int,
    data: FlatUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flat, msg = FlatService(db, society.id).update_flat(
        flat_id, data.model_dump(exclude_unset=True)
    )
    if not flat:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": FlatResponse.model_validate(flat)}


@router.delete("/{flat_id}", summary="Delete flat")
async def delete_flat(
    flat_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    """Flats with bills or payments cannot be deleted; deactivate them instead."""
    ok, msg = FlatService(db, society.id).delete_flat(flat_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}
