"""
Shared schema helpers.
"""

from typing import ClassVar, Tuple
from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """
    Base for PUT bodies. Fields may be omitted, but the ones listed in
    non_nullable_fields cannot be sent as null.
    """

    non_nullable_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.non_nullable_fields:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
