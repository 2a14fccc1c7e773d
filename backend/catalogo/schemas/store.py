"""Store, profile and link schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


SLUG_PATTERN = r"^[a-z0-9][a-z0-9-]*$"


# ── Profile / links ────────────────────────────────
class StoreProfileBase(BaseModel):
    headline: str | None = Field(None, max_length=255)
    description: str | None = None
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    department: str | None = Field(None, max_length=100)
    google_maps_url: str | None = Field(None, max_length=500)
    delivery_info: str | None = None
    payment_methods: str | None = None
    policies: str | None = None


class StoreProfileUpdate(StoreProfileBase):
    pass


class StoreProfileResponse(StoreProfileBase):
    model_config = ConfigDict(from_attributes=True)

    store_id: UUID


class StoreLinkBase(BaseModel):
    type: str = Field(..., min_length=1, max_length=30)
    label: str | None = Field(None, max_length=100)
    url: str = Field(..., min_length=1, max_length=500)
    icon_url: str | None = Field(None, max_length=500)
    sort_order: int = 0
    active: bool = True


class StoreLinkIn(StoreLinkBase):
    id: UUID | None = None  # omitted for new links


class StoreLinkResponse(StoreLinkBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID


class StoreLinksReplace(BaseModel):
    links: list[StoreLinkIn]


# ── Store ──────────────────────────────────────────
class StorePublic(BaseModel):
    """What shoppers see."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    whatsapp: str
    logo_url: str | None = None
    banner_url: str | None = None


class StoreResponse(StorePublic):
    phone: str | None = None
    email: str | None = None
    active: bool
    active_until: datetime | None = None
    catalog_retail: bool
    catalog_wholesale: bool
    wholesale_key: str | None = None
    theme_id: UUID | None = None
    owner_id: UUID | None = None
    created_at: datetime


class StoreUpdate(BaseModel):
    """Owner-editable store fields."""
    name: str | None = Field(None, min_length=1, max_length=255)
    whatsapp: str | None = Field(None, max_length=30)
    phone: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    catalog_retail: bool | None = None
    catalog_wholesale: bool | None = None
    wholesale_key: str | None = Field(None, max_length=100)
    theme_id: UUID | None = None


class ThemeOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    config: dict


class StoreSettingsResponse(BaseModel):
    store: StoreResponse
    profile: StoreProfileResponse | None = None
    links: list[StoreLinkResponse]
    themes: list[ThemeOption]


# ── Admin ──────────────────────────────────────────
class StoreAdminCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    whatsapp: str = Field("", max_length=30)
    owner_id: UUID | None = None
    catalog_retail: bool = True
    catalog_wholesale: bool = False
    wholesale_key: str | None = Field(None, max_length=100)


class StoreAdminUpdate(StoreUpdate):
    slug: str | None = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    active: bool | None = None
    active_until: datetime | None = None


class AssignOwnerRequest(BaseModel):
    owner_id: UUID | None


class ExtendRequest(BaseModel):
    days: int = Field(..., ge=1, le=3660)


class StoreListResponse(BaseModel):
    items: list[StoreResponse]
    total: int
