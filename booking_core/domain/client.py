"""Client entity - a person who books services."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Client:
    """A client is identified across the whole system by national ID (DNI)."""

    dni: str
    name: str
    phone: str = ""
    source: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Client":
        """Creates a Client from a dictionary."""
        return cls(
            dni=data["dni"],
            name=data["name"],
            phone=data.get("phone") or "",
            source=data.get("source") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @classmethod
    def from_snapshot(cls, data: dict, prefix: str = "client_") -> "Client":
        """Creates a Client from prefixed snapshot columns."""
        return cls(
            dni=data.get(f"{prefix}dni") or "",
            name=data.get(f"{prefix}name") or "Desconocido",
            phone=data.get(f"{prefix}phone") or "",
            source=data.get(f"{prefix}source") or "",
        )

    def to_dict(self) -> dict:
        """Converts to dictionary."""
        return {
            "dni": self.dni,
            "name": self.name,
            "phone": self.phone,
            "source": self.source,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_snapshot(self, prefix: str = "client_") -> dict:
        """Converts to prefixed snapshot columns."""
        return {
            f"{prefix}dni": self.dni,
            f"{prefix}name": self.name,
            f"{prefix}phone": self.phone,
            f"{prefix}source": self.source,
        }

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""
