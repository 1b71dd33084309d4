"""
Master data router - buildings, flat types and charge types.
Endpoint: /api/v1/{society_slug}/master-data/...
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society
from core.dependencies import resolve_society, raise_for_message
from schemas.master_data import (
    BuildingCreate, BuildingUpdate, BuildingResponse,
    FlatTypeCreate, FlatTypeUpdate, FlatTypeResponse,
    ChargeTypeCreate, ChargeTypeUpdate, ChargeTypeResponse,
    MasterDataResponse,
)
from services.master_data import MasterDataService


router = APIRouter()


@router.get("", response_model=MasterDataResponse, summary="All master data")
async def get_master_data(
    include_inactive: bool = True,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    service = MasterDataService(db, society.id)
    return MasterDataResponse(
        buildings=[BuildingResponse.model_validate(b) for b in service.get_buildings(include_inactive)],
        flat_types=[FlatTypeResponse.model_validate(ft) for ft in service.get_flat_types(include_inactive)],
        charge_types=[ChargeTypeResponse.model_validate(ct) for ct in service.get_charge_types(include_inactive)],
    )


# ==================== BUILDINGS ====================

@router.get("/buildings", summary="Buildings")
async def get_buildings(
    include_inactive: bool = True,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    buildings = MasterDataService(db, society.id).get_buildings(include_inactive)
    return {
        "data": [BuildingResponse.model_validate(b) for b in buildings],
        "count": len(buildings),
    }


@router.post("/buildings", status_code=status.HTTP_201_CREATED, summary="Create building")
async def create_building(
    data: BuildingCreate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    building, msg = MasterDataService(db, society.id).create_building(data.model_dump())
    if not building:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": BuildingResponse.model_validate(building)}


@router.put("/buildings/{building_id}", summary="Update building")
async def update_building(
    building_id: int,
    data: BuildingUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    building, msg = MasterDataService(db, society.id).update_building(
        building_id, data.model_dump(exclude_unset=True)
    )
    if not building:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": BuildingResponse.model_validate(building)}


@router.delete("/buildings/{building_id}", summary="Delete building")
async def delete_building(
    building_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    ok, msg = MasterDataService(db, society.id).delete_building(building_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}


# ==================== FLAT TYPES ====================

@router.get("/flat-types", summary="Flat types")
async def get_flat_types(
    include_inactive: bool = True,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flat_types = MasterDataService(db, society.id).get_flat_types(include_inactive)
    return {
        "data": [FlatTypeResponse.model_validate(ft) for ft in flat_types],
        "count": len(flat_types),
    }


@router.post("/flat-types", status_code=status.HTTP_201_CREATED, summary="Create flat type")
async def create_flat_type(
    data: FlatTypeCreate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flat_type, msg = MasterDataService(db, society.id).create_flat_type(data.model_dump())
    if not flat_type:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": FlatTypeResponse.model_validate(flat_type)}


@router.put("/flat-types/{flat_type_id}", summary="Update flat type")
async def update_flat_type(
    flat_type_id: int,
    data: FlatTypeUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    flat_type, msg = MasterDataService(db, society.id).update_flat_type(
        flat_type_id, data.model_dump(exclude_unset=True)
    )
    if not flat_type:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": FlatTypeResponse.model_validate(flat_type)}


@router.delete("/flat-types/{flat_type_id}", summary="Delete flat type")
async def delete_flat_type(
    flat_type_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    ok, msg = MasterDataService(db, society.id).delete_flat_type(flat_type_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}


# ==================== CHARGE TYPES ====================

@router.get("/charge-types", summary="Charge types")
async def get_charge_types(
    include_inactive: bool = True,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    charge_types = MasterDataService(db, society.id).get_charge_types(include_inactive)
    return {
        "data": [ChargeTypeResponse.model_validate(ct) for ct in charge_types],
        "count": len(charge_types),
    }


@router.post("/charge-types", status_code=status.HTTP_201_CREATED, summary="Create charge type")
async def create_charge_type(
    data: ChargeTypeCreate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    """per_vehicle charges must name the vehicle type they count."""
    charge_type, msg = MasterDataService(db, society.id).create_charge_type(data.model_dump())
    if not charge_type:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": ChargeTypeResponse.model_validate(charge_type)}


@router.put("/charge-types/{charge_type_id}", summary="Update charge type")
async def update_charge_type(
    charge_type_id: int,
    data: ChargeTypeUpdate,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    charge_type, msg = MasterDataService(db, society.id).update_charge_type(
        charge_type_id, data.model_dump(exclude_unset=True)
    )
    if not charge_type:
        raise_for_message(msg)
    return {"success": True, "message": msg, "data": ChargeTypeResponse.model_validate(charge_type)}


@router.delete("/charge-types/{charge_type_id}", summary="Delete charge type")
async def delete_charge_type(
    charge_type_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    ok, msg = MasterDataService(db, society.id).delete_charge_type(charge_type_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}
