from __future__ import annotations

import math

from coinconv.errors import InvalidAmountError, NoDataAvailableError, UnknownSymbolError
from coinconv.services.event_log import EventLog, event_log
from coinconv.services.price_table import PriceTableStore, price_table_store


def parse_amount(raw: object) -> float:
    """Parse a path/query amount; ``None`` means one unit."""
    if raw is None:
        return 1.0
    if isinstance(raw, bool):
        raise InvalidAmountError(raw)
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        # float() accepts digit separators, JSON clients do not send them
        if not text or "_" in text:
            raise InvalidAmountError(raw)
        try:
            value = float(text)
        except ValueError as exc:
            raise InvalidAmountError(raw) from exc
    if not math.isfinite(value):
        raise InvalidAmountError(raw)
    return value


def format_amount(value: float) -> str:
    if value == 0:
        value = 0.0
    return f"{value:.8f}"


class ConversionService:
    def __init__(self, *, store: PriceTableStore, log: EventLog | None = None) -> None:
        self.store = store
        self.log = log or event_log
        self.conversions = 0

    def list_symbols(self) -> list[str]:
        return self.store.snapshot().symbols

    def convert(self, from_symbol: str, amount: object = None, to_symbol: str | None = None) -> str:
        table = self.store.snapshot()
        if table.is_empty:
            raise NoDataAvailableError()

        value = parse_amount(amount)

        source = str(from_symbol).strip().upper()
        target = str(to_symbol if to_symbol is not None else table.base_symbol).strip().upper()
        if source not in table or target not in table:
            raise UnknownSymbolError(table.symbols)

        converted = value * table.price_of(source) / table.price_of(target)
        if not math.isfinite(converted):
            raise InvalidAmountError(amount)
        result = format_amount(converted)
        self.conversions += 1
        self.log.emit("CONVERT", "converted", source=source, amount=value, target=target, result=result)
        return result


conversion_service = ConversionService(store=price_table_store)
