import math

from pydantic import BaseModel, ConfigDict, field_validator


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    currency: str = "USD"
    timestamp: int
    source: str
    change_24h: float | None = None
    change_percent_24h: float | None = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("price")
    @classmethod
    def require_finite_price(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("price must be finite")
        return value


class BatchResult(BaseModel):
    quotes: list[Quote] = []
    failures: list[tuple[str, str]] = []
