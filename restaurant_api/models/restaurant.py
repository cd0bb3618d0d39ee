"""Restaurant data models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RestaurantPayload(BaseModel):
    """Fields a client supplies when creating or replacing a restaurant."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Restaurant name")
    stars: int = Field(..., description="Star rating")
    address: str = Field(..., description="Street address")
    chef: str = Field(..., description="Head chef")
    state: str = Field(default="", description="State or region")
    website: str = Field(default="", description="Website URL")
    info: str = Field(default="", description="Free-form description")

    @field_validator("stars", mode="before")
    @classmethod
    def reject_boolean_stars(cls, value):
        """Keep JSON true/false from binding as 1/0."""
        if isinstance(value, bool):
            raise ValueError("stars must be an integer, not a boolean")
        return value


class Restaurant(RestaurantPayload):
    """A stored restaurant record."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Primary key assigned by the store")

    # Not persisted in the restaurants table
    hours: str | None = Field(None, description="Opening hours")
    staff: list[str] = Field(default_factory=list, description="Staff members")
    photos: list[str] = Field(default_factory=list, description="Photo URLs")
    menus: list[str] = Field(default_factory=list, description="Menu names")

    @classmethod
    def from_payload(cls, restaurant_id: int, payload: RestaurantPayload) -> "Restaurant":
        """Build a record from a validated payload and its assigned id."""
        return cls(id=restaurant_id, **payload.model_dump())
