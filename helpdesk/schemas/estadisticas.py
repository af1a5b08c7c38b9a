from pydantic import BaseModel


class SummaryResponse(BaseModel):
    total: int = 0
    pending_count: int = 0
    in_progress_count: int = 0
    resolved_count: int = 0


class TypeCount(BaseModel):
    tipo: str
    cantidad: int
