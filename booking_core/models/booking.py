"""
BookingRequest / BlockRequest / CompletionRequest - Entradas del ciclo de vida de una cita
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants.catalog import CREAM_CODE, default_duration
from .client import ClientInput
from .payment import PaymentInput
from .validation import to_local_naive


class BookingRequest(BaseModel):
    """
    Reserva de un cliente. Si no se indica fin, se usa la duración indicada
    o la duración por defecto del procedimiento.
    """

    specialist: str = Field(..., min_length=1, description="Especialista")
    service_type: str = Field(..., min_length=1, description="Tipo de servicio")
    procedure: str = Field(default="", description="Procedimiento")
    start_time: datetime = Field(..., description="Inicio de la cita")
    end_time: Optional[datetime] = Field(None, description="Fin de la cita")
    duration_minutes: Optional[int] = Field(None, description="Duración en minutos")
    client: ClientInput
    comments: Optional[str] = Field(None, description="Comentarios")
    deposit: Optional[PaymentInput] = Field(None, description="Pago a cuenta")

    naive_times = field_validator("start_time", "end_time")(to_local_naive)

    @model_validator(mode="after")
    def resolve_end_time(self) -> "BookingRequest":
        if self.end_time is None:
            minutes = self.duration_minutes
            if minutes is None:
                minutes = default_duration(self.service_type, self.procedure)
            if minutes <= 0:
                raise ValueError("La duración debe ser un número positivo")
            self.end_time = self.start_time + timedelta(minutes=minutes)
        if self.end_time <= self.start_time:
            raise ValueError("La hora de fin debe ser posterior a la de inicio")
        if self.deposit is not None and self.deposit.amount <= 0:
            raise ValueError("Ingrese un monto válido para el pago a cuenta")
        return self


class BlockRequest(BaseModel):
    """
    Bloqueo de horario de un especialista (sin cliente).
    """

    specialist: str = Field(..., min_length=1)
    reason: str = Field(..., description="Motivo del bloqueo")
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: int = Field(default=60)
    comments: Optional[str] = None

    naive_times = field_validator("start_time", "end_time")(to_local_naive)

    @model_validator(mode="after")
    def check_block(self) -> "BlockRequest":
        if not self.reason.strip():
            raise ValueError("Indique el motivo del bloqueo")
        if self.end_time is None:
            if self.duration_minutes <= 0:
                raise ValueError("La duración debe ser un número positivo")
            self.end_time = self.start_time + timedelta(minutes=self.duration_minutes)
        if self.end_time <= self.start_time:
            raise ValueError("La hora de fin debe ser posterior a la de inicio")
        return self


class CompletionRequest(BaseModel):
    """
    Cierre de una atención: duración real y, opcionalmente, el pago final
    del saldo y la venta de crema como pagos separados.
    """

    actual_duration: int = Field(..., gt=0, description="Duración real en minutos")
    remaining_payment: Optional[PaymentInput] = Field(None, description="Saldo del servicio")
    cream_payment: Optional[PaymentInput] = Field(None, description="Venta de crema")
    comments: Optional[str] = None

    @model_validator(mode="after")
    def tag_cream(self) -> "CompletionRequest":
        if self.cream_payment is not None:
            self.cream_payment.code = CREAM_CODE
        return self

    @property
    def has_payment(self) -> bool:
        return self.remaining_payment is not None or self.cream_payment is not None
