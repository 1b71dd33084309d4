"""
Base service class with society filtering support.
All society-scoped services should inherit from SocietyServiceBase.
"""

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session, Query
from core.society import get_current_society_id


TWO_PLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce int/float/str/Decimal/None to a 2-decimal Decimal."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class SocietyServiceBase:
    """
    Base service class that provides automatic society filtering.

    Usage:
        class FlatService(SocietyServiceBase):
            def get_flats(self):
                return self._q(Flat).filter(Flat.is_active == True).all()

    self._q(Model) is equivalent to:
        self.db.query(Model).filter(Model.society_id == current_society_id)
    """

    def __init__(self, db: Session, society_id: int = None):
        self.db = db
        self._society_id = society_id

    @property
    def society_id(self) -> int:
        """Get society_id - from parameter or context."""
        if self._society_id:
            return self._society_id
        return get_current_society_id()

    def _q(self, model) -> Query:
        """
        Create a society-filtered query.

        Adds WHERE society_id = :current_society_id for models that have
        a society_id column.
        """
        query = self.db.query(model)
        sid = self.society_id
        if sid and hasattr(model, 'society_id'):
            query = query.filter(model.society_id == sid)
        return query
