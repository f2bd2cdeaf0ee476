"""
Pydantic schemas for the add-property form.
"""

from pydantic import BaseModel, Field, field_validator, ValidationError as PydanticValidationError
from typing import Any, Dict, List
from decimal import Decimal
from app.models.property import PropertyType, ListingType
from app.utils.exceptions import ValidationError


class PropertyForm(BaseModel):
    """Fields submitted with a new listing. Every field is required."""

    title: str = Field(..., max_length=255, description="Property listing title")
    description: str = Field(..., description="Detailed property description")
    price: Decimal = Field(
        ...,
        ge=0,
        le=Decimal("9999999999.99"),
        allow_inf_nan=False,
        description="Property price in local currency"
    )
    area_sqm: Decimal = Field(
        ...,
        ge=0,
        le=Decimal("99999999.99"),
        allow_inf_nan=False,
        description="Property area in square meters"
    )
    property_type: PropertyType = Field(..., description="Kind of property")
    location_city: str = Field(..., max_length=120, description="City of the property")
    listing_type: ListingType = Field(..., description="Listing type - sale or rent")

    @field_validator("title", "description", "location_city", mode="before")
    @classmethod
    def require_text(cls, v):
        """Strip text fields and reject empty ones."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Field cannot be empty")
        return v

    @field_validator("price", "area_sqm", "property_type", "listing_type", mode="before")
    @classmethod
    def require_value(cls, v):
        """Treat blank form values as missing."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Field cannot be empty")
        return v

    @classmethod
    def from_form(cls, data: Dict[str, Any]) -> "PropertyForm":
        """
        Validate raw form values.

        Raises:
            ValidationError: With one entry per invalid field
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            field_errors: List[Dict[str, Any]] = [
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in e.errors()
            ]
            raise ValidationError(
                "All fields are required and price and area must be non-negative numbers.",
                field_errors=field_errors
            )
