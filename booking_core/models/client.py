"""
ClientInput - Datos del cliente capturados al reservar
"""

from pydantic import BaseModel, Field, field_validator

from ..constants.catalog import DNI_LENGTH, SOURCES
from ..domain.client import Client


class ClientInput(BaseModel):
    """
    Identidad del cliente. El DNI es la clave primaria en todo el sistema.
    """

    dni: str = Field(..., description="Documento nacional de identidad")
    name: str = Field(..., min_length=1, description="Nombre completo")
    phone: str = Field(..., min_length=1, description="Celular")
    source: str = Field(default="Otros", description="Canal de captación")

    class Config:
        from_attributes = True

    @field_validator("dni")
    @classmethod
    def validate_dni(cls, v: str) -> str:
        v = v.strip()
        if len(v) != DNI_LENGTH or not (v.isascii() and v.isdigit()):
            raise ValueError(f"El DNI debe tener {DNI_LENGTH} dígitos numéricos")
        return v

    @field_validator("source")
    @classmethod
    def known_source(cls, v: str) -> str:
        v = v.strip()
        if v not in SOURCES:
            raise ValueError(f"Canal desconocido. Opciones: {', '.join(SOURCES)}")
        return v

    @field_validator("name", "phone")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Campo obligatorio")
        return v

    def to_domain(self) -> Client:
        return Client(dni=self.dni, name=self.name, phone=self.phone, source=self.source)
