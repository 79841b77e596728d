"""Domain errors raised by the calculators and exports."""
from __future__ import annotations

from datetime import datetime
from typing import Optional


class DownPaymentExceedsPriceError(ValueError):
    """Raised when the down payment would produce a negative loan amount."""

    field = "down_payment"

    def __init__(self, message: str = "Down payment cannot exceed home price") -> None:
        super().__init__(message)


class ExportRateLimitError(ValueError):
    """Raised when a fingerprint has used up its export allowance."""

    def __init__(self, message: str, reset_time: Optional[datetime] = None) -> None:
        super().__init__(message)
        self.reset_time = reset_time
