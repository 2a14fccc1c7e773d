"""Unit tests for the WhatsApp order message."""

from decimal import Decimal
from unittest.mock import patch
from urllib.parse import unquote

from catalogo.core.config import settings
from catalogo.services.cart import CartMode
from catalogo.services.whatsapp import (
    MessageItem,
    OrderMessage,
    format_money,
    generate_message_lines,
    normalize_number,
    receipt_url,
    render_message,
    whatsapp_url,
)


def _message(mode=CartMode.RETAIL, **overrides):
    fields = dict(
        store_name="Moda Linda",
        mode=mode,
        items=[
            MessageItem(name="Blusa", qty=2, price=Decimal("35000"), min_wholesale=6),
            MessageItem(name="Jean", qty=1, price=Decimal("89900.50")),
        ],
        total=Decimal("159900.50"),
        receipt_url="https://catalogo.test/pedido/abc",
    )
    fields.update(overrides)
    return OrderMessage(**fields)


# ── Money ────────────────────────────────────────

def test_format_money_thousands():
    assert format_money(Decimal("1234567")) == "$1.234.567"
    assert format_money(Decimal("0")) == "$0"
    assert format_money(Decimal("1234.5")) == "$1.234,5"
    assert format_money(Decimal("999.99")) == "$999,99"


# ── Message ──────────────────────────────────────

def test_retail_message_lines():
    lines = generate_message_lines(_message())
    assert lines[0] == "🧾 Pedido (DETAL)"
    assert lines[1] == "🏪 Tienda: Moda Linda"
    assert "1. Blusa" in lines
    assert "   Cant: 2 | Precio: $35.000 | Subtotal: $70.000" in lines
    assert "TOTAL: $159.900,5" in lines
    assert "✅ Quiero confirmar este pedido." in lines
    assert lines[-2] == "📌 Comprobante (puedes editar):"
    assert lines[-1] == "https://catalogo.test/pedido/abc"
    # Retail never mentions the wholesale minimum
    assert not any("mínimo mayor" in line for line in lines)


def test_wholesale_message_shows_minimum():
    lines = generate_message_lines(_message(CartMode.WHOLESALE))
    assert lines[0] == "🧾 Pedido (MAYOR)"
    assert "   (mínimo mayor: 6)" in lines


def test_customer_and_note_lines():
    text = render_message(_message(customer_name="Ana", customer_note="Entregar en la tarde"))
    assert "👤 Cliente: Ana" in text
    assert "📝 Nota: Entregar en la tarde" in text


def test_no_receipt_link():
    lines = generate_message_lines(_message(receipt_url=None))
    assert lines[-1] == "✅ Quiero confirmar este pedido."


# ── Links ────────────────────────────────────────

def test_normalize_number():
    assert normalize_number("+57 300 111-2233") == "573001112233"
    assert normalize_number("") == ""


def test_whatsapp_url_encodes_text():
    url = whatsapp_url("+57 300 111 2233", "Hola\nTOTAL: $1.000")
    assert url.startswith("https://wa.me/573001112233?text=")
    assert "\n" not in url
    assert unquote(url.split("text=", 1)[1]) == "Hola\nTOTAL: $1.000"


def test_receipt_url_uses_public_base():
    with patch.object(settings, "PUBLIC_BASE_URL", "https://catalogo.test/"):
        assert receipt_url("tok123") == "https://catalogo.test/pedido/tok123"
