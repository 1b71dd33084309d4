"""
Flat service - flats, owners, tenants and parking.
"""

from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import func, or_

from database.models import Flat, Building, FlatType, Bill, Payment
from services.base import SocietyServiceBase


class FlatService(SocietyServiceBase):

    def get_flat(self, flat_id: int) -> Optional[Flat]:
        return self._q(Flat).filter(Flat.id == flat_id).first()

    def get_flats(
        self,
        building_id: Optional[int] = None,
        occupancy_type: Optional[str] = None,
        search: Optional[str] = None,
        include_inactive: bool = True,
    ) -> List[Flat]:
        q = self._q(Flat)
        if building_id:
            q = q.filter(Flat.building_id == building_id)
        if occupancy_type:
            q = q.filter(Flat.occupancy_type == occupancy_type)
        if not include_inactive:
            q = q.filter(Flat.is_active == True)
        if search:
            q = q.filter(or_(
                Flat.flat_no.ilike(f"%{search}%"),
                Flat.owner_name.ilike(f"%{search}%"),
                Flat.tenant_name.ilike(f"%{search}%"),
            ))
        return q.order_by(Flat.building_id, Flat.flat_no).all()

    def _validate_refs(self, building_id: Optional[int], flat_type_id: Optional[int]) -> Optional[str]:
        if building_id is not None:
            if not self._q(Building).filter(Building.id == building_id).first():
                return "Please select a building"
        if flat_type_id is not None:
            if not self._q(FlatType).filter(FlatType.id == flat_type_id).first():
                return "Please select flat type"
        return None

    def _is_duplicate(self, flat_no: str, building_id: Optional[int], exclude_id: int = None) -> bool:
        q = self._q(Flat).filter(
            func.lower(Flat.flat_no) == flat_no.lower(),
            Flat.building_id == building_id,
        )
        if exclude_id:
            q = q.filter(Flat.id != exclude_id)
        return q.first() is not None

    def create_flat(self, data: dict) -> Tuple[Optional[Flat], str]:
        error = self._validate_refs(data.get("building_id"), data.get("flat_type_id"))
        if error:
            return None, error
        if self._is_duplicate(data["flat_no"], data.get("building_id")):
            return None, "A flat with this number already exists in this building"

        flat = Flat(society_id=self.society_id, **data)
        self.db.add(flat)
        self.db.commit()
        self.db.refresh(flat)
        logger.info(f"Flat {flat.flat_no} created (society={self.society_id})")
        return flat, "Flat saved successfully"

    def update_flat(self, flat_id: int, data: dict) -> Tuple[Optional[Flat], str]:
        flat = self.get_flat(flat_id)
        if not flat:
            return None, "Flat not found"

        error = self._validate_refs(data.get("building_id"), data.get("flat_type_id"))
        if error:
            return None, error

        flat_no = (data.get("flat_no") or flat.flat_no).strip()
        if not flat_no:
            return None, "Please enter flat number"
        building_id = data.get("building_id", flat.building_id)
        if self._is_duplicate(flat_no, building_id, exclude_id=flat_id):
            return None, "A flat with this number already exists in this building"
        if "owner_name" in data and not (data["owner_name"] or "").strip():
            return None, "Please enter owner name"

        for key, value in data.items():
            setattr(flat, key, value.strip() if isinstance(value, str) else value)
        self.db.commit()
        return flat, "Flat saved successfully"

    def delete_flat(self, flat_id: int) -> Tuple[bool, str]:
        flat = self.get_flat(flat_id)
        if not flat:
            return False, "Flat not found"
        has_history = (
            self._q(Bill).filter(Bill.flat_id == flat_id).first() is not None
            or self._q(Payment).filter(Payment.flat_id == flat_id).first() is not None
        )
        if has_history:
            return False, "Flat has bills or payments; mark it inactive instead"
        self.db.delete(flat)
        self.db.commit()
        return True, "Flat deleted"
