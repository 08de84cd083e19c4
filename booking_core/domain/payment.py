"""Payment entry - one line of a transaction's payment list."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..constants.catalog import CREAM_CODE


@dataclass
class Payment:
    """Amounts are additive; a transaction's total is the sum of its payments."""

    method: str
    amount: Decimal
    code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Payment":
        """Creates a Payment from a dictionary."""
        amount = data["amount"]
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))

        return cls(
            method=data["method"],
            amount=amount,
            code=data.get("code") or None,
        )

    def to_dict(self) -> dict:
        """Converts to a JSON-friendly dictionary."""
        return {
            "method": self.method,
            "amount": str(self.amount),
            "code": self.code,
        }

    @property
    def is_cream(self) -> bool:
        return self.code == CREAM_CODE
