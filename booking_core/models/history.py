"""
HistoryRow - Fila de un historial de ventas importado en bloque
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .validation import to_local_naive


class HistoryRow(BaseModel):
    """
    Venta histórica. Si no hay columnas de pago se asume todo en efectivo.
    """

    date: datetime = Field(..., description="Fecha y hora del servicio")
    client_name: str = Field(..., description="Nombre del cliente")
    dni: str = Field(default="", description="DNI, puede faltar en datos antiguos")
    phone: str = Field(default="", description="Celular")
    procedure: str = Field(..., description="Subservicio")
    service_type: Optional[str] = Field(None, description="Servicio; se infiere del subservicio")
    total_amount: Decimal = Field(..., ge=0, description="VENTA")
    cash: Decimal = Field(default=Decimal("0"), ge=0)
    card: Decimal = Field(default=Decimal("0"), ge=0)
    cream: Decimal = Field(default=Decimal("0"), ge=0)
    specialist: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0)

    class Config:
        from_attributes = True

    naive_date = field_validator("date")(to_local_naive)

    @field_validator("client_name", "procedure")
    @classmethod
    def required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Campo obligatorio")
        return v

    @field_validator("dni", "phone")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()
