from booking_core.core.outreach import compose_message, whatsapp_link
from booking_core.domain.client import Client

ANA = Client(dni="12345678", name="Ana Maria Garcia", phone="987 654 321")


def test_touch_up_message():
    text = compose_message(ANA, business_name="Muzza")
    assert text.startswith("Hola Ana, te escribimos de Muzza")
    assert "retoque" in text


def test_laser_message():
    assert "láser" in compose_message(ANA, is_laser=True, business_name="Muzza")


def test_yearly_message_ignores_laser_flag():
    text = compose_message(ANA, kind="anual", is_laser=True, business_name="Muzza")
    assert "un año" in text
    assert "láser" not in text


def test_business_name_from_environment(monkeypatch):
    monkeypatch.setenv("BUSINESS_NAME", "Studio Cejas")
    assert "Studio Cejas" in compose_message(ANA)


def test_whatsapp_link():
    link = whatsapp_link(ANA.phone, "Hola Ana", country_code="51")
    assert link == "https://wa.me/51987654321?text=Hola%20Ana"


def test_whatsapp_link_encodes_symbols(monkeypatch):
    monkeypatch.setenv("PHONE_COUNTRY_CODE", "34")
    link = whatsapp_link("600111222", "¿Te agendamos?")
    assert link.startswith("https://wa.me/34600111222?text=")
    assert "%C2%BF" in link
    assert "?" not in link.split("?text=")[1]
