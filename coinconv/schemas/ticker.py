from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawTicker(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    last_price: str = Field(alias="lastPrice")

    @field_validator("last_price", mode="before")
    @classmethod
    def stringify_price(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class PricedSymbol(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    is_base: bool = False
