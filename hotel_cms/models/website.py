"""Website aggregate: one row per hotel site with its embedded content."""

import copy
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, Column, Index, Integer, String, Uuid
from sqlalchemy.orm.attributes import flag_modified

from .base import TimestampMixin, serialize_value
from hotel_cms.core.database import Base

HERO_PAGES = (
    "home",
    "facilities",
    "about",
    "contact",
    "room",
    "roomdetails",
    "location",
    "dining",
)
BED_TYPES = ("Single", "Double", "Queen", "King", "Twin", "Suite", "Bunk")

MAX_FACILITIES = 6
MAX_ROOM_DETAIL_IMAGES = 10
MAX_OUR_STORY_IMAGES = 20

# Embedded JSON columns; each is read as a deep copy and written back whole.
EMBEDDED_FIELDS = (
    "hotel_info",
    "rooms",
    "hero_sections",
    "our_story",
    "facilities",
    "reviews",
    "offer",
    "site_settings",
    "settings",
    "seo",
)


def default_hotel_info(name: str = "") -> Dict[str, Any]:
    return {
        "title": f"Welcome to {name}" if name else "",
        "description": "",
        "contact": {
            "phone": "",
            "email": "",
            "address": "",
            "coordinates": {"lat": 0, "lng": 0},
        },
        "socialLinks": {},
        "images": {"banner": "", "logo": "", "gallery": []},
        "amenities": [],
        "nearbyAttractions": [],
        "transportLinks": [],
    }


def default_our_story() -> Dict[str, Any]:
    return {"title": "", "subTitle": "", "percentage": "", "suites": "", "images": []}


def default_site_settings() -> Dict[str, Any]:
    return {"logo": "", "footerLogo": "", "footerDescription": ""}


def default_settings() -> Dict[str, Any]:
    return {"language": "en", "currency": "USD", "timezone": "UTC"}


def default_seo() -> Dict[str, Any]:
    return {"title": "", "description": "", "keywords": []}


class Website(Base, TimestampMixin):
    """
    Tenant aggregate.

    Rooms, hero sections, facilities, reviews, the offer, our-story, site
    settings and hotel info are embedded JSON documents. Contact messages are
    deliberately stored in their own table (see ``ContactMessage``).

    ``version`` is SQLAlchemy's optimistic concurrency counter: a flush whose
    row was changed by another transaction since it was loaded raises
    ``StaleDataError`` instead of overwriting it.
    """

    __tablename__ = "websites"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Internal identifier, never exposed publicly",
    )
    unique_id = Column(
        String(36),
        nullable=False,
        unique=True,
        default=lambda: str(uuid.uuid4()),
        comment="Opaque public identifier used by the public API",
    )

    name = Column(String(100), nullable=False)
    domain = Column(String(255), nullable=False, unique=True)
    subdomain = Column(String(255), nullable=True, unique=True)
    theme = Column(String(50), nullable=False, default="default")

    hotel_info = Column(JSON, nullable=False, default=default_hotel_info)
    rooms = Column(JSON, nullable=False, default=list)
    hero_sections = Column(JSON, nullable=False, default=list)
    our_story = Column(JSON, nullable=False, default=default_our_story)
    facilities = Column(JSON, nullable=False, default=list)
    reviews = Column(JSON, nullable=False, default=list)
    offer = Column(JSON, nullable=True)
    site_settings = Column(JSON, nullable=False, default=default_site_settings)
    settings = Column(JSON, nullable=False, default=default_settings)
    seo = Column(JSON, nullable=False, default=default_seo)

    is_active = Column(Boolean, nullable=False, default=True)
    assigned_admin_id = Column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="Admin scoped to this website; mirrors users.website_id",
    )

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("idx_websites_is_active", "is_active"),
        Index("idx_websites_assigned_admin", "assigned_admin_id"),
    )

    def get_embedded(self, field: str) -> Any:
        """Deep copy of an embedded document, safe to mutate."""
        return copy.deepcopy(getattr(self, field))

    def set_embedded(self, field: str, value: Any) -> None:
        """Replace an embedded document and mark it dirty."""
        setattr(self, field, value)
        flag_modified(self, field)

    def find_item(self, field: str, item_id: str) -> Optional[Dict[str, Any]]:
        for item in getattr(self, field) or []:
            if item.get("id") == item_id:
                return item
        return None

    def available_rooms(self) -> List[Dict[str, Any]]:
        return [r for r in self.rooms or [] if r.get("isAvailable", True)]

    def active_hero_sections(self) -> List[Dict[str, Any]]:
        return [h for h in self.hero_sections or [] if h.get("isActive", True)]

    def average_rating(self) -> float:
        reviews = self.reviews or []
        if not reviews:
            return 0
        return sum(r.get("rating", 0) for r in reviews) / len(reviews)

    def to_dict(self, assigned_admin: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Full authenticated representation."""
        return {
            "id": serialize_value(self.id),
            "uniqueId": self.unique_id,
            "name": self.name,
            "domain": self.domain,
            "subdomain": self.subdomain,
            "theme": self.theme,
            "hotelInfo": self.hotel_info,
            "rooms": self.rooms or [],
            "heroSections": self.hero_sections or [],
            "ourStory": self.our_story,
            "facilities": self.facilities or [],
            "reviews": self.reviews or [],
            "offer": self.offer,
            "siteSettings": self.site_settings,
            "settings": self.settings,
            "seo": self.seo,
            "isActive": self.is_active,
            "assignedAdmin": assigned_admin
            if assigned_admin is not None
            else serialize_value(self.assigned_admin_id),
            "createdAt": serialize_value(self.created_at),
            "updatedAt": serialize_value(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Website(id={self.id}, name='{self.name}', domain='{self.domain}')>"
