from __future__ import annotations


class ConversionError(Exception):
    """Base for conversion failures that map onto an HTTP error response."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoDataAvailableError(ConversionError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("No coins available")


class InvalidAmountError(ConversionError):
    def __init__(self, amount: object = None) -> None:
        super().__init__("Amount must be a number")
        self.amount = amount


class UnknownSymbolError(ConversionError):
    def __init__(self, available: list[str]) -> None:
        super().__init__(f"Symbol must be one of: {', '.join(available)}")
        self.available = list(available)


class UpstreamFetchFailedError(Exception):
    """Ticker fetch or decode failed; the refresh keeps the previous table."""
