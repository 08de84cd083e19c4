"""Outreach messages for follow-up contacts."""

import re
from typing import Literal, Optional
from urllib.parse import quote

from ..config.env import get_business_name, get_phone_country_code
from ..domain.client import Client

MessageKind = Literal["retoque", "anual"]


def compose_message(
    client: Client,
    kind: MessageKind = "retoque",
    is_laser: bool = False,
    business_name: Optional[str] = None,
) -> str:
    """Builds the text sent to a client; laser clients get their own reminder."""
    name = client.first_name
    business = business_name or get_business_name()
    greeting = f"Hola {name}, te escribimos de {business} ✨."

    if kind == "anual":
        return (
            f"{greeting} Hace un año nos visitaste. Es un buen momento para renovar "
            "tu mirada o evaluar tu progreso. ¿Te gustaría agendar una cita?"
        )
    if is_laser:
        return (
            f"{greeting} Han pasado unas semanas desde tu sesión de láser. Es importante "
            "la constancia para ver resultados, o si prefieres, podemos evaluar el "
            "diseño de tus cejas. ¿Te agendamos una cita?"
        )
    return (
        f"{greeting} Han pasado 30 días desde tu diseño de cejas y es el momento ideal "
        "para tu retoque. ¿Te gustaría agendar una cita para mantenerlas perfectas?"
    )


def whatsapp_link(phone: str, message: str, country_code: Optional[str] = None) -> str:
    """wa.me deep link; non-digits are stripped from the phone number."""
    digits = re.sub(r"\D", "", phone)
    prefix = country_code if country_code is not None else get_phone_country_code()
    return f"https://wa.me/{prefix}{digits}?text={quote(message, safe='')}"
