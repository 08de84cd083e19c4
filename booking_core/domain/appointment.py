"""Appointment entity - a booked time range with a specialist."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Literal

from ..constants.catalog import Provenance, ServiceType
from .client import Client
from .payment import Payment


AppointmentStatus = Literal["scheduled", "completed", "cancelled", "noshow"]
ReconfirmationStatus = Literal["confirmed", "rejected"]

TERMINAL_STATUSES = ("completed", "cancelled", "noshow")


@dataclass
class Appointment:
    """An appointment reserves [start_time, end_time) of a specialist's calendar.

    The booking code is assigned once when the appointment is first stored
    and never regenerated. ``reconfirmation_status`` is ``None`` while unset.
    """

    id: str
    specialist: str
    service_type: str
    procedure: str
    start_time: datetime
    end_time: datetime
    client: Client
    booking_code: Optional[str] = None
    status: AppointmentStatus = "scheduled"
    actual_duration: Optional[int] = None
    down_payment: Optional[Payment] = None
    reconfirmation_status: Optional[ReconfirmationStatus] = None
    comments: Optional[str] = None
    provenance: str = Provenance.MANUAL
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Appointment":
        """Creates an Appointment from a flat row dictionary."""
        down_payment = None
        if data.get("down_payment_amount") is not None:
            down_payment = Payment.from_dict(
                {
                    "method": data.get("down_payment_method") or "",
                    "amount": data["down_payment_amount"],
                    "code": data.get("down_payment_code"),
                }
            )

        return cls(
            id=data["id"],
            specialist=data["specialist"],
            service_type=data["service_type"],
            procedure=data.get("procedure") or "",
            start_time=data["start_time"],
            end_time=data["end_time"],
            client=Client.from_snapshot(data),
            booking_code=data.get("booking_code"),
            status=data.get("status") or "scheduled",
            actual_duration=data.get("actual_duration"),
            down_payment=down_payment,
            reconfirmation_status=data.get("reconfirmation_status"),
            comments=data.get("comments"),
            provenance=data.get("provenance") or Provenance.MANUAL,
            cancellation_reason=data.get("cancellation_reason"),
            cancelled_at=data.get("cancelled_at"),
            cancelled_by=data.get("cancelled_by"),
            created_at=data.get("created_at"),
            created_by=data.get("created_by"),
            created_by_name=data.get("created_by_name"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        """Converts to a flat row dictionary."""
        data = {
            "id": self.id,
            "booking_code": self.booking_code,
            "specialist": self.specialist,
            "service_type": self.service_type,
            "procedure": self.procedure,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
            "actual_duration": self.actual_duration,
            "down_payment_method": self.down_payment.method if self.down_payment else None,
            "down_payment_amount": self.down_payment.amount if self.down_payment else None,
            "down_payment_code": self.down_payment.code if self.down_payment else None,
            "reconfirmation_status": self.reconfirmation_status,
            "comments": self.comments,
            "provenance": self.provenance,
            "cancellation_reason": self.cancellation_reason,
            "cancelled_at": self.cancelled_at,
            "cancelled_by": self.cancelled_by,
            "created_at": self.created_at,
            "created_by": self.created_by,
            "created_by_name": self.created_by_name,
            "updated_at": self.updated_at,
        }
        data.update(self.client.to_snapshot())
        return data

    @property
    def is_terminal(self) -> bool:
        """Checks if no further status change is allowed."""
        return self.status in TERMINAL_STATUSES

    @property
    def is_block(self) -> bool:
        """Checks if this is a calendar block instead of a client visit."""
        return self.service_type == ServiceType.BLOQUEO

    @property
    def worked_hours(self) -> float:
        """Hours the slot consumed: actual duration once completed."""
        if self.status == "completed" and self.actual_duration:
            return self.actual_duration / 60
        return (self.end_time - self.start_time).total_seconds() / 3600