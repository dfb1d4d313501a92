from pydantic import BaseModel
from typing import Optional
import datetime


# -------------------
# Mall Schemas
# -------------------

class MallBase(BaseModel):
    name: str
    city: str
    is_open: bool = True


class MallResponse(MallBase):
    id: int

    class Config:
        from_attributes = True


# -------------------
# Store Schemas
# -------------------

class StoreBase(BaseModel):
    name: str
    description: Optional[str] = None
    active: bool = True


class StoreResponse(StoreBase):
    id: int
    brand_name: Optional[str] = None
    updated_at: datetime.datetime

    class Config:
        from_attributes = True
