from __future__ import annotations

from typing import Any, List, Optional

import requests
from pydantic import ValidationError

from coinconv.errors import UpstreamFetchFailedError
from coinconv.schemas.ticker import RawTicker


class TickerRestClient:
    """Exchange 24h ticker client returning ``{symbol, lastPrice}`` records."""

    DEFAULT_URL = "https://api2.binance.com/api/v3/ticker/24hr"

    def __init__(
        self,
        url: str = DEFAULT_URL,
        *,
        session: Optional[Any] = None,
        timeout: float = 5.0,
    ) -> None:
        self.url = url
        self.session = session or requests
        self.timeout = timeout
        self.skipped_rows = 0

    def get_tickers(self) -> List[RawTicker]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamFetchFailedError(f"ticker fetch failed: {exc}") from exc

        if not isinstance(payload, list):
            raise UpstreamFetchFailedError(
                f"ticker payload must be a list, got {type(payload).__name__}"
            )

        tickers: List[RawTicker] = []
        skipped = 0
        for row in payload:
            try:
                tickers.append(RawTicker.model_validate(row))
            except ValidationError:
                skipped += 1
        self.skipped_rows = skipped
        return tickers
