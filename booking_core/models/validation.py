"""
Traducción de errores de pydantic al error de validación del dominio
"""

from datetime import datetime
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Offset-aware datetimes are converted to naive local time; all stored times are naive."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_input(model_cls: Type[M], data: Any) -> M:
    """Validates a payload (dict or model instance) into ``model_cls``.

    Raises:
        ValidationError: With the first offending field.
    """
    if isinstance(data, model_cls):
        data = data.model_dump()
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", str(e))
        raise ValidationError(
            f"{field}: {message}" if field else message, field=field
        ) from e
