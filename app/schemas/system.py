from pydantic import BaseModel

class SystemStats(BaseModel):
    boards: int
    columns: int
    items: int
