"""Zentro HTTP API package."""

from consulting.api.routes import admin_router, booking_router, category_router, consultant_router, service_router

__all__ = ["admin_router", "booking_router", "category_router", "consultant_router", "service_router"]
