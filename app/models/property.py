"""
Property model for sale and rent listings.
"""

from sqlalchemy import String, Text, Numeric, Enum as SQLEnum, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from decimal import Decimal
import enum
import uuid
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.image import PropertyImage


class PropertyType(str, enum.Enum):
    """Kind of property being listed."""
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    STUDIO = "studio"
    LAND = "land"
    COMMERCIAL = "commercial"


class ListingType(str, enum.Enum):
    """Listing type enumeration for sale or rent listings."""
    SALE = "sale"
    RENT = "rent"


class Property(Base):
    """
    Property listing owned by a user.
    Created together with its images in one transaction; the owner never changes.
    """

    __tablename__ = "properties"

    # Foreign key to the owning user
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who listed this property"
    )

    # Basic property information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    # Pricing and size
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Property price in local currency"
    )

    area_sqm: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        comment="Property area in square meters"
    )

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType),
        nullable=False,
        index=True,
        comment="Kind of property"
    )

    location_city: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        index=True,
        comment="City where the property is located"
    )

    listing_type: Mapped[ListingType] = mapped_column(
        SQLEnum(ListingType),
        nullable=False,
        index=True,
        comment="Listing type - sale or rent"
    )

    # Relationships
    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.position.asc()"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, price={self.price})>"

    @property
    def image_count(self) -> int:
        """Get the number of images associated with this property."""
        return len(self.images)

    def to_dict(self, include_images: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_images: Whether to include image information

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "owner_id": str(self.owner_id),
            "title": self.title,
            "description": self.description,
            "price": float(self.price),
            "area_sqm": float(self.area_sqm),
            "property_type": self.property_type.value,
            "location_city": self.location_city,
            "listing_type": self.listing_type.value,
        }

        if include_images:
            result["images"] = [image.to_dict() for image in self.images]

        return result
