"""Transaction entity - a sale with one or more payments."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..constants.catalog import Provenance, TransactionKind
from .client import Client
from .payment import Payment


@dataclass
class Transaction:
    """A sale. ``kind`` is ``adelanto`` for deposits, ``cierre`` for closing
    payments and ``None`` for standalone sales. A transaction with no
    payments is legal and contributes nothing to revenue."""

    id: str
    timestamp: datetime
    client: Client
    service_type: str
    procedure: str
    payments: list[Payment] = field(default_factory=list)
    cream_sold: bool = False
    comments: Optional[str] = None
    booking_id: Optional[str] = None
    kind: Optional[str] = None
    provenance: str = Provenance.MANUAL
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Creates a Transaction from a flat row dictionary."""
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            client=Client.from_snapshot(data),
            service_type=data.get("service_type") or "",
            procedure=data.get("procedure") or "",
            payments=[Payment.from_dict(p) for p in data.get("payments") or []],
            cream_sold=bool(data.get("cream_sold", 0)),
            comments=data.get("comments"),
            booking_id=data.get("booking_id"),
            kind=data.get("kind"),
            provenance=data.get("provenance") or Provenance.MANUAL,
            created_by=data.get("created_by"),
            created_by_name=data.get("created_by_name"),
        )

    def to_dict(self) -> dict:
        """Converts to a flat row dictionary."""
        data = {
            "id": self.id,
            "timestamp": self.timestamp,
            "service_type": self.service_type,
            "procedure": self.procedure,
            "payments": [p.to_dict() for p in self.payments],
            "cream_sold": self.cream_sold,
            "comments": self.comments,
            "booking_id": self.booking_id,
            "kind": self.kind,
            "provenance": self.provenance,
            "created_by": self.created_by,
            "created_by_name": self.created_by_name,
        }
        data.update(self.client.to_snapshot())
        return data

    @property
    def total(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))

    @property
    def cream_amount(self) -> Decimal:
        """Add-on revenue reported apart from the service."""
        return sum((p.amount for p in self.payments if p.is_cream), Decimal("0"))

    @property
    def service_amount(self) -> Decimal:
        return self.total - self.cream_amount

    @property
    def is_deposit(self) -> bool:
        return self.kind == TransactionKind.ADELANTO

    @property
    def is_standalone(self) -> bool:
        """Checks if the sale is not tied to any appointment."""
        return self.booking_id is None and self.kind != TransactionKind.ADELANTO
