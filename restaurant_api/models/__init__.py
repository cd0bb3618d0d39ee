"""Data models for the Restaurant API."""

from restaurant_api.models.restaurant import Restaurant, RestaurantPayload

__all__ = ["Restaurant", "RestaurantPayload"]
