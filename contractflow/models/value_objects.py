"""Value objects mapped onto plain contract columns."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from contractflow.utils.constants import DEFAULT_CURRENCY


@dataclass(frozen=True)
class Period:
    """Closed time interval; ``end`` must be strictly after ``start``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("End must be after Start.")


@dataclass(frozen=True)
class Money:
    """Non-negative amount in a currency (BRL when blank)."""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Amount must not be negative.")
        if not self.currency or not self.currency.strip():
            object.__setattr__(self, "currency", DEFAULT_CURRENCY)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"
