from __future__ import annotations

import threading
from typing import Iterable

from coinconv.schemas.ticker import PricedSymbol, RawTicker


class PriceTable:
    """Immutable, symbol-sorted snapshot of prices relative to one base currency."""

    def __init__(self, entries: Iterable[PricedSymbol] = ()) -> None:
        self._entries = tuple(sorted(entries, key=lambda e: e.symbol))
        self._by_symbol = {e.symbol: e for e in self._entries}
        if len(self._by_symbol) != len(self._entries):
            raise ValueError("duplicate symbol in price table")
        self._symbols = tuple(e.symbol for e in self._entries)
        self._base_symbol = next((e.symbol for e in self._entries if e.is_base), None)

    @property
    def entries(self) -> tuple[PricedSymbol, ...]:
        return self._entries

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    @property
    def base_symbol(self) -> str | None:
        return self._base_symbol

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def price_of(self, symbol: str) -> float:
        return self._by_symbol[symbol].price

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __len__(self) -> int:
        return len(self._entries)


def _positive_price(raw: str) -> float | None:
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    # NaN fails this comparison too
    if not value > 0:
        return None
    return value


def build_price_table(tickers: Iterable[RawTicker], base_currency: str) -> PriceTable:
    """Keep tickers quoted against the base currency and express each as base units per asset.

    ``BASEASSET`` listings are inverted (``1 / lastPrice``); ``ASSETBASE`` listings
    keep their price. When an asset shows up both ways the direct ``ASSETBASE``
    listing wins. The base currency itself is appended with price 1.
    """
    base = base_currency.strip().upper()
    if not base:
        raise ValueError("base currency must not be empty")

    picked: dict[str, tuple[bool, PricedSymbol]] = {}
    for ticker in tickers:
        pair = ticker.symbol.strip().upper()
        inverted = pair.startswith(base)
        if not (inverted or pair.endswith(base)):
            continue
        last_price = _positive_price(ticker.last_price)
        if last_price is None:
            continue

        symbol = pair.replace(base, "", 1).strip().upper()
        if not symbol or symbol == base:
            continue

        price = 1 / last_price if inverted else last_price
        existing = picked.get(symbol)
        if existing is not None and (inverted or not existing[0]):
            continue
        picked[symbol] = (inverted, PricedSymbol(symbol=symbol, price=price))

    entries = [row for _, row in picked.values()]
    entries.append(PricedSymbol(symbol=base, price=1.0, is_base=True))
    return PriceTable(entries)


class PriceTableStore:
    """Holds the current table; replaced wholesale, never edited in place."""

    def __init__(self, table: PriceTable | None = None) -> None:
        self._lock = threading.Lock()
        self._table = table or PriceTable()

    def snapshot(self) -> PriceTable:
        with self._lock:
            return self._table

    def replace(self, table: PriceTable) -> PriceTable:
        with self._lock:
            previous = self._table
            self._table = table
            return previous


price_table_store = PriceTableStore()
