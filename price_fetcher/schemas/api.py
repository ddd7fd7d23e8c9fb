from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: int


class StockGroup(BaseModel):
    name: str
    symbols: list[str]
    description: str
