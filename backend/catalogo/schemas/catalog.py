"""Public catalog view schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from catalogo.services.cart import CartMode
from catalogo.schemas.store import StorePublic, StoreProfileResponse, StoreLinkResponse


class CatalogCategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    image_url: str | None = None
    sort_order: int


class CatalogView(BaseModel):
    store: StorePublic
    mode: CartMode
    profile: StoreProfileResponse | None = None
    links: list[StoreLinkResponse]
    categories: list[CatalogCategory]
    theme: dict[str, str]
