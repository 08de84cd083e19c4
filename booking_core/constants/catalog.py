"""Service catalog, payment and follow-up vocabulary."""


class ServiceType:
    """Service categories offered by the business."""

    CEJAS = "Cejas"
    REMOCION = "Remoción"
    PESTANAS = "Pestañas"
    OTRO = "Otro"
    BLOQUEO = "Bloqueo"

    ALL = [CEJAS, REMOCION, PESTANAS, OTRO]


class TransactionKind:
    """Tag linking a transaction to an appointment's payment flow."""

    ADELANTO = "adelanto"
    CIERRE = "cierre"

    ALL = [ADELANTO, CIERRE]


class Provenance:
    """Where a record came from."""

    MANUAL = "manual"
    BULK_IMPORT = "bulk_import"

    ALL = [MANUAL, BULK_IMPORT]


TOUCH_UP_PROCEDURE = "Retoque"

# Reference code marking the add-on cream inside a payment list
CREAM_CODE = "CREMA"

PROCEDURES_BY_SERVICE: dict[str, list[str]] = {
    ServiceType.CEJAS: [
        "Microblading",
        "Microshading",
        "Hair",
        "Powder",
        "Henna",
        TOUCH_UP_PROCEDURE,
        "Crema",
        "Otro",
    ],
    ServiceType.PESTANAS: ["Lifting", "Laminado", "Otros"],
    ServiceType.REMOCION: ["Laser 1", "Laser 2", "Laser 3", "Laser 4", "Laser 5+"],
    ServiceType.OTRO: [],
}

# Minutes, looked up by procedure first, then by service type
SERVICE_DURATIONS: dict[str, int] = {
    ServiceType.CEJAS: 90,
    TOUCH_UP_PROCEDURE: 60,
    "Lifting": 90,
    "Laminado": 60,
    "Otros": 60,
    "Laser 1": 30,
    "Laser 2": 30,
    "Laser 3": 30,
    "Laser 4": 30,
    "Laser 5+": 30,
    ServiceType.OTRO: 60,
}

DEFAULT_DURATION_MINUTES = 60

SOURCES = ["FB", "IG", "Tiktok", "Pauta", "Recomendada", "Otros"]
PAYMENT_METHODS = ["Cash", "Plin", "Yape", "Transfer", "POS", "Link"]

DNI_LENGTH = 8

# Legacy comment/source markers written by the spreadsheet importer
BULK_IMPORT_MARKERS = ("carga masiva", "carga histórica")

BLOCK_CLIENT_NAME = "BLOQUEO"
BLOCK_CLIENT_SOURCE = "Sistema"


def default_duration(service_type: str, procedure: str) -> int:
    """Returns the default duration in minutes for a procedure."""
    return SERVICE_DURATIONS.get(
        procedure, SERVICE_DURATIONS.get(service_type, DEFAULT_DURATION_MINUTES)
    )
