"""Specialist entity - a provider with an independent calendar."""

from dataclasses import dataclass


@dataclass
class Specialist:
    name: str
    active: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "Specialist":
        return cls(name=data["name"], active=bool(data.get("active", 1)))

    def to_dict(self) -> dict:
        return {"name": self.name, "active": self.active}
