"""Theme tokens: flat theme config -> CSS custom properties on :root."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.models.store import Store
from catalogo.models.theme import Theme

DEFAULT_BG_A = "#2a0a5e"
DEFAULT_BG_B = "#060620"
DEFAULT_BG_SOLID = "#07060d"
DEFAULT_CTA = "#d946ef"
DEFAULT_CTA_B = "#8b5cf6"
DEFAULT_TEXT = "#ffffff"
DEFAULT_MUTED = "rgba(255,255,255,0.72)"
DEFAULT_BORDER = "rgba(255,255,255,0.12)"
DEFAULT_CARD_BG = "rgba(255,255,255,0.06)"
DEFAULT_RADIUS = 24
DEFAULT_GLOW = 60


class ThemeConfig(BaseModel):
    """Keys a theme row may carry. Legacy keys win over the newer ones."""

    model_config = ConfigDict(extra="allow")

    text: str | None = None
    mutedText: str | None = None
    border: str | None = None
    cardBg: str | None = None
    cardBorder: str | None = None
    accent: str | None = None
    accent2: str | None = None
    radius: float | None = None
    glow: float | None = None

    bgMode: Literal["solid", "gradient"] | None = None
    bgSolid: str | None = None
    bgGradA: str | None = None
    bgGradB: str | None = None
    bgAngle: float | None = None

    ctaMode: Literal["solid", "gradient"] | None = None
    ctaSolid: str | None = None
    ctaA: str | None = None
    ctaB: str | None = None
    ctaAngle: float | None = None

    # Legacy dashboard keys
    bg: str | None = None
    card: str | None = None
    card_border: str | None = None
    muted: str | None = None
    cta: str | None = None

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value, handler):
        # malformed values read as unset
        try:
            return handler(value)
        except ValidationError:
            return None


def gradient(angle: float = 135, a: str = DEFAULT_BG_A, b: str = DEFAULT_BG_B) -> str:
    return f"linear-gradient({_num(angle)}deg, {a}, {b})"


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _pick(value: Any) -> str | None:
    """Non-blank string or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve_theme_variables(cfg: ThemeConfig | dict | None) -> dict[str, str]:
    """Map a theme config to the ``--t-*`` variables used by the catalog pages."""
    if cfg is None:
        cfg = ThemeConfig()
    elif isinstance(cfg, dict):
        cfg = ThemeConfig.model_validate(cfg)

    # Background: legacy string, then solid/gradient mode, then default gradient
    bg = _pick(cfg.bg)
    if bg is None:
        if cfg.bgMode == "solid":
            bg = cfg.bgSolid or DEFAULT_BG_SOLID
        else:
            bg = gradient(
                cfg.bgAngle if cfg.bgAngle is not None else 135,
                cfg.bgGradA or DEFAULT_BG_A,
                cfg.bgGradB or DEFAULT_BG_B,
            )

    # Call-to-action: legacy string, then mode, then bare ctaA/ctaB, then default
    cta = _pick(cfg.cta)
    if cta is None:
        if cfg.ctaMode == "solid":
            cta = cfg.ctaSolid or DEFAULT_CTA
        elif cfg.ctaMode == "gradient":
            cta = gradient(
                cfg.ctaAngle if cfg.ctaAngle is not None else 90,
                cfg.ctaA or DEFAULT_CTA,
                cfg.ctaB or DEFAULT_CTA_B,
            )
        elif _pick(cfg.ctaA):
            cta_b = _pick(cfg.ctaB)
            cta = gradient(90, _pick(cfg.ctaA), cta_b) if cta_b else _pick(cfg.ctaA)
        else:
            cta = DEFAULT_CTA

    border = _pick(cfg.card_border) or _pick(cfg.border) or DEFAULT_BORDER
    accent = _pick(cfg.accent) or DEFAULT_CTA

    return {
        "--t-bg": bg,
        "--t-cta": cta,
        "--t-text": _pick(cfg.text) or DEFAULT_TEXT,
        "--t-muted": _pick(cfg.muted) or _pick(cfg.mutedText) or DEFAULT_MUTED,
        "--t-border": border,
        "--t-card-bg": _pick(cfg.card) or _pick(cfg.cardBg) or DEFAULT_CARD_BG,
        "--t-card-border": _pick(cfg.cardBorder) or border,
        "--t-accent": accent,
        "--t-accent2": _pick(cfg.accent2) or accent,
        "--t-radius": _num(cfg.radius if cfg.radius is not None else DEFAULT_RADIUS),
        "--t-glow": _num(cfg.glow if cfg.glow is not None else DEFAULT_GLOW),
    }


def render_root_css(variables: dict[str, str]) -> str:
    body = "\n".join(f"  {name}: {value};" for name, value in variables.items())
    return f":root {{\n{body}\n}}\n"


async def resolve_store_theme(db: AsyncSession, store: Store) -> dict | None:
    """The store's own theme config, else the first active theme by sort order."""
    if store.theme_id is not None:
        theme = await db.get(Theme, store.theme_id)
        if theme is not None and theme.config:
            return theme.config

    result = await db.execute(
        select(Theme).where(Theme.active.is_(True)).order_by(Theme.sort_order.asc()).limit(1)
    )
    fallback = result.scalar_one_or_none()
    return fallback.config if fallback is not None else None
