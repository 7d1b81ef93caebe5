"""Data models for currency conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ExchangeRate:
    """Multiplier converting source-currency (RUB) prices to KZT.

    multiplier is always positive; is_fallback marks the fixed default.
    """

    multiplier: float
    resolved_at: datetime = field(default_factory=datetime.now)
    is_fallback: bool = False

    def __post_init__(self) -> None:
        if not self.multiplier > 0:
            raise ValueError(f"multiplier must be positive, got {self.multiplier}")

    def convert(self, amount: int) -> int:
        """Convert a non-negative source-currency amount, rounded to int."""
        return max(0, round(amount * self.multiplier))

    def to_dict(self) -> dict:
        return {
            "multiplier": self.multiplier,
            "resolved_at": self.resolved_at.isoformat(),
            "is_fallback": self.is_fallback,
        }
