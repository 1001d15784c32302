"""Schemas for the sub-resources embedded in a website."""

from typing import Dict, List, Literal, Optional

from pydantic import ConfigDict, Field

from .base import BaseSchema

BedType = Literal["Single", "Double", "Queen", "King", "Twin", "Suite", "Bunk"]
HeroPage = Literal[
    "home", "facilities", "about", "contact", "room", "roomdetails", "location", "dining"
]


# Rooms

class RoomCreate(BaseSchema):
    """Room added to a website."""

    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    max_occupancy: int = Field(ge=1, le=20)
    bed_type: BedType
    size: float = Field(0, ge=0)
    base_price: float = Field(ge=0)
    discount_price: float = Field(0, ge=0)
    discount_percentage: str = ""
    main_image: str = ""
    detail_images: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    services_included: List[str] = Field(default_factory=list)
    popular_facilities: List[str] = Field(default_factory=list)
    is_available: bool = True


class RoomUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    max_occupancy: Optional[int] = Field(None, ge=1, le=20)
    bed_type: Optional[BedType] = None
    size: Optional[float] = Field(None, ge=0)
    base_price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    discount_percentage: Optional[str] = None
    main_image: Optional[str] = None
    detail_images: Optional[List[str]] = None
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    features: Optional[List[str]] = None
    services_included: Optional[List[str]] = None
    popular_facilities: Optional[List[str]] = None
    is_available: Optional[bool] = None


# Hero sections

class HeroSectionUpsert(BaseSchema):
    """Create or update the hero banner of one page."""

    page: HeroPage
    image: Optional[str] = None
    text: Optional[str] = Field(None, max_length=500)
    sub_text: Optional[str] = Field(None, max_length=1000)
    details_text: Optional[str] = Field(None, max_length=2000)
    is_active: Optional[bool] = None


# Facilities

class FacilityCreate(BaseSchema):
    image: str = ""
    title: str = Field("", max_length=200)
    sub_title: str = Field("", max_length=500)


class FacilityUpdate(BaseSchema):
    image: Optional[str] = None
    title: Optional[str] = Field(None, max_length=200)
    sub_title: Optional[str] = Field(None, max_length=500)


# Reviews

class ReviewCreate(BaseSchema):
    avatar: str = ""
    name: str = Field(min_length=1, max_length=100)
    review: str = Field("", max_length=2000)
    rating: float = Field(ge=1, le=5)


class ReviewUpdate(BaseSchema):
    avatar: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    review: Optional[str] = Field(None, max_length=2000)
    rating: Optional[float] = Field(None, ge=1, le=5)


# Offer

class OfferUpsert(BaseSchema):
    """
    Offer payload. Field names are snake_case on the wire as well.

    ``title``, ``subtitle`` and ``offer_percentage`` are required when the
    website has no offer yet; the service enforces that.
    """

    model_config = ConfigDict(alias_generator=None, str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, min_length=1, max_length=500)
    offer_available: Optional[bool] = None
    offer_percentage: Optional[float] = Field(None, ge=0, le=100)
    offer_image: Optional[str] = None


# Our story

class OurStoryUpdate(BaseSchema):
    title: Optional[str] = Field(None, max_length=200)
    sub_title: Optional[str] = Field(None, max_length=500)
    percentage: Optional[str] = None
    suites: Optional[str] = None
    images: Optional[List[str]] = None


# Site settings

class SiteSettingsUpdate(BaseSchema):
    logo: Optional[str] = None
    footer_logo: Optional[str] = None
    footer_description: Optional[str] = None


# Contact info

class Coordinates(BaseSchema):
    lat: float = Field(0, ge=-90, le=90)
    lng: float = Field(0, ge=-180, le=180)


class SocialLinks(BaseSchema):
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None


class ContactInfoUpdate(BaseSchema):
    """Partial update of ``hotelInfo.contact`` and ``hotelInfo.socialLinks``."""

    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    social_links: Optional[SocialLinks] = None

    def contact_fields(self) -> Dict[str, object]:
        fields = self.present_fields()
        fields.pop("socialLinks", None)
        if "email" in fields:
            fields["email"] = fields["email"].lower()
        return fields

    def social_fields(self) -> Dict[str, object]:
        if self.social_links is None:
            return {}
        return self.social_links.present_fields()
