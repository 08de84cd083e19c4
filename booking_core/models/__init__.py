"""
Modelos de entrada validados para booking_core
"""
from .client import ClientInput
from .payment import PaymentInput
from .booking import BookingRequest, BlockRequest, CompletionRequest
from .schedule import DayScheduleInput
from .history import HistoryRow
from .validation import parse_input

__all__ = [
    "ClientInput",
    "PaymentInput",
    "BookingRequest",
    "BlockRequest",
    "CompletionRequest",
    "DayScheduleInput",
    "HistoryRow",
    "parse_input",
]
