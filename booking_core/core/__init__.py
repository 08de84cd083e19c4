"""
Núcleo de reservas: horario, conflictos, códigos, ciclo de vida y retención
"""

from .schedule import ScheduleModel, HourRange, Bounds
from .conflicts import Slot, SlotCheck, overlaps, find_conflict, check_slot, free_start_times
from .booking_codes import code_prefix, next_code
from .lifecycle import (
    BookingLifecycleManager,
    BookingResult,
    DeleteCheck,
    DeleteResult,
    can_transition,
)
from .retention import (
    RetentionEngine,
    RetentionSettings,
    RetentionStats,
    ConversionStats,
    FollowUpCandidate,
    FollowUpEvent,
    FollowUpQuery,
)
from .follow_up import FollowUpTracker
from .occupancy import occupancy_stats, occupancy_by_specialist, hourly_demand
from .outreach import compose_message, whatsapp_link
from .imports import HistoryImporter, ImportResult, infer_provenance

__all__ = [
    # Schedule
    "ScheduleModel",
    "HourRange",
    "Bounds",
    # Conflicts
    "Slot",
    "SlotCheck",
    "overlaps",
    "find_conflict",
    "check_slot",
    "free_start_times",
    # Booking codes
    "code_prefix",
    "next_code",
    # Lifecycle
    "BookingLifecycleManager",
    "BookingResult",
    "DeleteCheck",
    "DeleteResult",
    "can_transition",
    # Retention
    "RetentionEngine",
    "RetentionSettings",
    "RetentionStats",
    "ConversionStats",
    "FollowUpCandidate",
    "FollowUpEvent",
    "FollowUpQuery",
    "FollowUpTracker",
    # Statistics
    "occupancy_stats",
    "occupancy_by_specialist",
    "hourly_demand",
    # Outreach
    "compose_message",
    "whatsapp_link",
    # Imports
    "HistoryImporter",
    "ImportResult",
    "infer_provenance",
]
