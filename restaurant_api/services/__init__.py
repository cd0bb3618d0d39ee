"""Services for the Restaurant API."""

from restaurant_api.services.restaurant_store import (
    RestaurantNotFoundError,
    RestaurantStore,
    StoreError,
)

__all__ = ["RestaurantNotFoundError", "RestaurantStore", "StoreError"]
