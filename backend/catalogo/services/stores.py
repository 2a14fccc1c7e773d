"""Store activity rules shared by the owner dashboard and the admin screens."""

import logging
from datetime import datetime, timedelta, timezone

from catalogo.models.store import Store

logger = logging.getLogger(__name__)

CATALOG_FLAGS = ("catalog_retail", "catalog_wholesale")


class StoreInactiveError(ValueError):
    pass


def catalogs_auto_off(store: Store, now: datetime | None = None) -> bool:
    """Force both catalogs off when the store is not active right now.

    Returns True when a flag was switched off.
    """
    now = now or datetime.now(timezone.utc)
    if store.is_active_at(now):
        return False
    changed = store.catalog_retail or store.catalog_wholesale
    store.catalog_retail = False
    store.catalog_wholesale = False
    if changed:
        logger.info("Catalogs turned off for inactive store %s", store.slug)
    return changed


def check_catalog_flags(store: Store, updates: dict, now: datetime | None = None) -> None:
    """Owners cannot enable a catalog while their store is inactive or expired."""
    now = now or datetime.now(timezone.utc)
    enabling = any(updates.get(flag) is True for flag in CATALOG_FLAGS)
    if enabling and not store.is_active_at(now):
        raise StoreInactiveError("Store is not active; catalogs cannot be enabled")


def apply_admin_update(store: Store, updates: dict, now: datetime | None = None) -> None:
    """Apply admin edits, then the auto-off rule.

    Deactivating a store switches its catalogs off even when the same
    request tries to enable them.
    """
    for key, value in updates.items():
        setattr(store, key, value)
    if updates.get("active") is False:
        store.catalog_retail = False
        store.catalog_wholesale = False
    catalogs_auto_off(store, now)


def extend_store(store: Store, days: int, now: datetime | None = None) -> datetime:
    """Reactivate the store for ``days`` days counted from now."""
    now = now or datetime.now(timezone.utc)
    store.active_until = now + timedelta(days=days)
    store.active = True
    return store.active_until
