"""
PaymentInput - Un pago ingresado por el personal
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..constants.catalog import PAYMENT_METHODS
from ..domain.payment import Payment


class PaymentInput(BaseModel):
    """
    Pago individual. Los montos no numéricos o negativos se rechazan.
    """

    method: str = Field(..., min_length=1, description="Cash, Yape, POS, ...")
    amount: Decimal = Field(..., ge=0, description="Monto del pago")
    code: Optional[str] = Field(None, description="Código de operación")

    class Config:
        from_attributes = True

    @field_validator("method")
    @classmethod
    def known_method(cls, v: str) -> str:
        v = v.strip()
        if v not in PAYMENT_METHODS:
            raise ValueError(f"Método de pago desconocido. Opciones: {', '.join(PAYMENT_METHODS)}")
        return v

    def to_domain(self) -> Payment:
        return Payment(method=self.method, amount=self.amount, code=self.code or None)
