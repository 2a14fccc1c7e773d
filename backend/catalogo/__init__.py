"""Catalogo: multi-tenant WhatsApp product catalogs."""

__version__ = "0.1.0"
