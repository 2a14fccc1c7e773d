"""WhatsApp order message generation."""

import re
from decimal import Decimal, ROUND_HALF_UP
from urllib.parse import quote

from pydantic import BaseModel, Field

from catalogo.core.config import settings
from catalogo.services.cart import CartMode


class MessageItem(BaseModel):
    """One numbered line in the order message."""
    name: str
    qty: int
    price: Decimal = Field(..., decimal_places=2)
    min_wholesale: int | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.qty


class OrderMessage(BaseModel):
    """Everything needed to render the message sent to the merchant."""
    store_name: str
    mode: CartMode
    items: list[MessageItem]
    total: Decimal = Field(..., decimal_places=2)
    receipt_url: str | None = None
    customer_name: str | None = None
    customer_note: str | None = None


def format_money(amount: Decimal | int | float) -> str:
    """Colombian peso style: ``$1.234.567`` and ``$1.234,5``."""
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, frac = f"{abs(value):.2f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    frac = frac.rstrip("0")
    return f"{sign}${grouped}" + (f",{frac}" if frac else "")


def generate_message_lines(message: OrderMessage) -> list[str]:
    mode_label = "MAYOR" if message.mode == CartMode.WHOLESALE else "DETAL"
    lines = [
        f"🧾 Pedido ({mode_label})",
        f"🏪 Tienda: {message.store_name}",
    ]
    if message.customer_name:
        lines.append(f"👤 Cliente: {message.customer_name}")
    lines.append("")

    for idx, item in enumerate(message.items, start=1):
        lines.append(f"{idx}. {item.name}")
        lines.append(
            f"   Cant: {item.qty} | Precio: {format_money(item.price)} "
            f"| Subtotal: {format_money(item.subtotal)}"
        )
        if message.mode == CartMode.WHOLESALE and item.min_wholesale:
            lines.append(f"   (mínimo mayor: {max(1, item.min_wholesale)})")

    lines.append("")
    lines.append(f"TOTAL: {format_money(message.total)}")
    if message.customer_note:
        lines.append(f"📝 Nota: {message.customer_note}")
    lines.append("")
    lines.append("✅ Quiero confirmar este pedido.")

    if message.receipt_url:
        lines.append("")
        lines.append("📌 Comprobante (puedes editar):")
        lines.append(message.receipt_url)
    return lines


def render_message(message: OrderMessage) -> str:
    return "\n".join(generate_message_lines(message))


def normalize_number(number: str) -> str:
    """wa.me wants digits only: country code + number, no '+' or spaces."""
    return re.sub(r"\D", "", number or "")


def whatsapp_url(number: str, text: str) -> str:
    return f"https://wa.me/{normalize_number(number)}?text={quote(text, safe='')}"


def receipt_url(token: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/pedido/{token}"
