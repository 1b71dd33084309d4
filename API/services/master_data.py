"""
Master data service - buildings, flat types and charge types.
"""

from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import func

from database.models import (
    Building, FlatType, ChargeType, Flat, BillLineItem,
)
from schemas.master_data import check_vehicle_type_rule
from services.base import SocietyServiceBase


class MasterDataService(SocietyServiceBase):

    # ==================== BUILDINGS ====================

    def get_buildings(self, include_inactive: bool = True) -> List[Building]:
        q = self._q(Building)
        if not include_inactive:
            q = q.filter(Building.is_active == True)
        return q.order_by(Building.name).all()

    def get_building(self, building_id: int) -> Optional[Building]:
        return self._q(Building).filter(Building.id == building_id).first()

    def _building_name_taken(self, name: str, exclude_id: int = None) -> bool:
        q = self._q(Building).filter(func.lower(Building.name) == name.lower())
        if exclude_id:
            q = q.filter(Building.id != exclude_id)
        return q.first() is not None

    def create_building(self, data: dict) -> Tuple[Optional[Building], str]:
        if self._building_name_taken(data["name"]):
            return None, f"Building \"{data['name']}\" already exists"
        building = Building(society_id=self.society_id, **data)
        self.db.add(building)
        self.db.commit()
        self.db.refresh(building)
        return building, "Building saved"

    def update_building(self, building_id: int, data: dict) -> Tuple[Optional[Building], str]:
        building = self.get_building(building_id)
        if not building:
            return None, "Building not found"
        name = data.get("name")
        if name is not None:
            name = name.strip()
            if not name:
                return None, "Please enter building name"
            if self._building_name_taken(name, exclude_id=building_id):
                return None, f"Building \"{name}\" already exists"
            data["name"] = name
        for key, value in data.items():
            setattr(building, key, value)
        self.db.commit()
        return building, "Building saved"

    def delete_building(self, building_id: int) -> Tuple[bool, str]:
        building = self.get_building(building_id)
        if not building:
            return False, "Building not found"
        if self._q(Flat).filter(Flat.building_id == building_id).first():
            return False, "Cannot delete a building that has flats"
        self.db.delete(building)
        self.db.commit()
        return True, "Building deleted"

    # ==================== FLAT TYPES ====================

    def get_flat_types(self, include_inactive: bool = True) -> List[FlatType]:
        q = self._q(FlatType)
        if not include_inactive:
            q = q.filter(FlatType.is_active == True)
        return q.order_by(FlatType.name).all()

    def get_flat_type(self, flat_type_id: int) -> Optional[FlatType]:
        return self._q(FlatType).filter(FlatType.id == flat_type_id).first()

    def create_flat_type(self, data: dict) -> Tuple[Optional[FlatType], str]:
        exists = self._q(FlatType).filter(
            func.lower(FlatType.name) == data["name"].lower()
        ).first()
        if exists:
            return None, f"Flat type \"{data['name']}\" already exists"
        flat_type = FlatType(society_id=self.society_id, **data)
        self.db.add(flat_type)
        self.db.commit()
        self.db.refresh(flat_type)
        return flat_type, "Flat type saved"

    def update_flat_type(self, flat_type_id: int, data: dict) -> Tuple[Optional[FlatType], str]:
        flat_type = self.get_flat_type(flat_type_id)
        if not flat_type:
            return None, "Flat type not found"
        if data.get("name") is not None and not data["name"].strip():
            return None, "Please enter flat type name"
        for key, value in data.items():
            setattr(flat_type, key, value.strip() if isinstance(value, str) else value)
        self.db.commit()
        return flat_type, "Flat type saved"

    def delete_flat_type(self, flat_type_id: int) -> Tuple[bool, str]:
        flat_type = self.get_flat_type(flat_type_id)
        if not flat_type:
            return False, "Flat type not found"
        if self._q(Flat).filter(Flat.flat_type_id == flat_type_id).first():
            return False, "Cannot delete a flat type that is assigned to flats"
        self.db.delete(flat_type)
        self.db.commit()
        return True, "Flat type deleted"

    # ==================== CHARGE TYPES ====================

    def get_charge_types(self, include_inactive: bool = True) -> List[ChargeType]:
        q = self._q(ChargeType)
        if not include_inactive:
            q = q.filter(ChargeType.is_active == True)
        return q.order_by(ChargeType.sort_order, ChargeType.id).all()

    def get_charge_type(self, charge_type_id: int) -> Optional[ChargeType]:
        return self._q(ChargeType).filter(ChargeType.id == charge_type_id).first()

    def create_charge_type(self, data: dict) -> Tuple[Optional[ChargeType], str]:
        charge_type = ChargeType(society_id=self.society_id, **data)
        self.db.add(charge_type)
        self.db.commit()
        self.db.refresh(charge_type)
        logger.info(f"Charge type '{charge_type.name}' ({charge_type.calculation_type}) created")
        return charge_type, "Charge type saved"

    def update_charge_type(self, charge_type_id: int, data: dict) -> Tuple[Optional[ChargeType], str]:
        charge_type = self.get_charge_type(charge_type_id)
        if not charge_type:
            return None, "Charge type not found"
        if data.get("name") is not None and not data["name"].strip():
            return None, "Please enter charge type name"

        calculation_type = data.get("calculation_type", charge_type.calculation_type)
        vehicle_type = data.get("vehicle_type", charge_type.vehicle_type)
        try:
            check_vehicle_type_rule(calculation_type, vehicle_type)
        except ValueError as e:
            return None, str(e)

        for key, value in data.items():
            setattr(charge_type, key, value.strip() if isinstance(value, str) and key == "name" else value)
        self.db.commit()
        return charge_type, "Charge type saved"

    def delete_charge_type(self, charge_type_id: int) -> Tuple[bool, str]:
        charge_type = self.get_charge_type(charge_type_id)
        if not charge_type:
            return False, "Charge type not found"
        used = self._q(BillLineItem).filter(BillLineItem.charge_type_id == charge_type_id).first()
        if used:
            return False, "Charge type is used on bills; deactivate it instead"
        self.db.delete(charge_type)
        self.db.commit()
        return True, "Charge type deleted"
