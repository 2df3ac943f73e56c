from typing import Optional
from pydantic import BaseModel, Field

class ItemRead(BaseModel):
    id: str
    column_id: str = Field(alias="columnId")
    order: float
    title: str
    content: Optional[str] = None

    class Config:
        from_attributes = True
        populate_by_name = True
