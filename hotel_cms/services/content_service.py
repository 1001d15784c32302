"""Embedded website content: rooms, hero sections, facilities, reviews and
the single-object sections (offer, our story, site settings, contact info).

Every mutation follows the same shape: load the website, locate the
sub-resource, merge only the fields the caller sent, write the whole embedded
document back and commit. Image files that a change stops referencing are
removed from storage once the website is saved.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.exceptions import NotFoundError, ValidationError
from hotel_cms.models.base import new_embedded_id
from hotel_cms.models.website import (
    MAX_FACILITIES,
    MAX_OUR_STORY_IMAGES,
    MAX_ROOM_DETAIL_IMAGES,
    Website,
    default_hotel_info,
    default_our_story,
    default_site_settings,
)
from hotel_cms.schemas.content import (
    ContactInfoUpdate,
    FacilityCreate,
    FacilityUpdate,
    HeroSectionUpsert,
    OfferUpsert,
    OurStoryUpdate,
    ReviewCreate,
    ReviewUpdate,
    RoomCreate,
    RoomUpdate,
    SiteSettingsUpdate,
)
from hotel_cms.services.file_storage import FileStorage
from hotel_cms.services.website_service import WebsiteService, commit_website_changes

logger = logging.getLogger(__name__)

ROOM_IMAGE_FIELDS = ("mainImage",)
ROOM_IMAGE_LIST_FIELDS = ("detailImages", "images")


def stale_images(
    current: Dict[str, Any],
    changes: Dict[str, Any],
    image_fields: Sequence[str] = (),
    image_list_fields: Sequence[str] = (),
) -> List[str]:
    """
    Image paths referenced by ``current`` that ``changes`` would drop.

    A single image is stale when it is replaced by a different value; a list
    contributes the paths that are not in its new value.
    """
    stale = []
    for key in image_fields:
        old = current.get(key)
        if key in changes and old and old != changes[key]:
            stale.append(old)
    for key in image_list_fields:
        if key in changes:
            keep = set(changes[key] or [])
            stale.extend(path for path in current.get(key) or [] if path and path not in keep)
    return stale


def owned_images(
    item: Dict[str, Any],
    image_fields: Sequence[str] = (),
    image_list_fields: Sequence[str] = (),
) -> List[str]:
    """Every image path an embedded item references."""
    paths = [item.get(key) for key in image_fields]
    for key in image_list_fields:
        paths.extend(item.get(key) or [])
    return [path for path in paths if path]


def _find(items: Iterable[Dict[str, Any]], item_id: str) -> Optional[Dict[str, Any]]:
    for item in items:
        if item.get("id") == item_id:
            return item
    return None


class ContentService:
    """CRUD over the content embedded in a website."""

    def __init__(self, db_session: AsyncSession, file_storage: FileStorage):
        self.db = db_session
        self.files = file_storage
        self.websites = WebsiteService(db_session, file_storage)

    async def _load(self, website_id: uuid.UUID) -> Website:
        return await self.websites.get_website(website_id)

    def _own_files(self, website: Website, paths: Iterable[str]) -> List[str]:
        """Keep only the paths stored in this website's own folder."""
        owned = []
        for path in paths:
            if self.files.belongs_to(path, website.name):
                owned.append(path)
            elif self.files.resolve(path) is not None:
                logger.warning(f"Not deleting {path}: outside the folder of website {website.id}")
        return owned

    async def _save(self, website: Website, stale: Iterable[str] = ()) -> None:
        stale = self._own_files(website, stale)
        await commit_website_changes(self.db)
        if stale:
            await self.files.delete_many(stale)

    # Generic collection operations

    async def _list(self, website_id: uuid.UUID, field: str) -> List[Dict[str, Any]]:
        website = await self._load(website_id)
        return getattr(website, field) or []

    async def _get_item(
        self, website_id: uuid.UUID, field: str, item_id: str, label: str
    ) -> Dict[str, Any]:
        website = await self._load(website_id)
        item = website.find_item(field, item_id)
        if item is None:
            raise NotFoundError(f"{label} not found")
        return item

    async def _add_item(self, website: Website, field: str, document: Dict[str, Any]) -> Dict[str, Any]:
        item = {"id": new_embedded_id(), **document}
        items = website.get_embedded(field) or []
        items.append(item)
        website.set_embedded(field, items)
        await self._save(website)
        return item

    async def _update_item(
        self,
        website_id: uuid.UUID,
        field: str,
        item_id: str,
        changes: Dict[str, Any],
        label: str,
        image_fields: Sequence[str] = (),
        image_list_fields: Sequence[str] = (),
    ) -> Dict[str, Any]:
        website = await self._load(website_id)
        items = website.get_embedded(field) or []
        item = _find(items, item_id)
        if item is None:
            raise NotFoundError(f"{label} not found")

        stale = stale_images(item, changes, image_fields, image_list_fields)
        item.update(changes)
        website.set_embedded(field, items)
        await self._save(website, stale)
        return item

    async def _delete_item(
        self,
        website_id: uuid.UUID,
        field: str,
        item_id: str,
        label: str,
        image_fields: Sequence[str] = (),
        image_list_fields: Sequence[str] = (),
    ) -> None:
        website = await self._load(website_id)
        items = website.get_embedded(field) or []
        item = _find(items, item_id)
        if item is None:
            raise NotFoundError(f"{label} not found")

        await self.files.delete_many(
            self._own_files(website, owned_images(item, image_fields, image_list_fields))
        )

        website.set_embedded(field, [i for i in items if i.get("id") != item_id])
        await self._save(website)
        logger.info(f"Deleted {label.lower()} {item_id} from website {website.id}")

    # Rooms

    async def list_rooms(self, website_id: uuid.UUID) -> List[Dict[str, Any]]:
        return await self._list(website_id, "rooms")

    async def get_room(self, website_id: uuid.UUID, room_id: str) -> Dict[str, Any]:
        return await self._get_item(website_id, "rooms", room_id, "Room")

    async def add_room(self, website_id: uuid.UUID, data: RoomCreate) -> Dict[str, Any]:
        """
        Append a room.

        Raises:
            NotFoundError: If the website does not exist
            ValidationError: If more than 10 detail images are given
        """
        website = await self._load(website_id)
        if len(data.detail_images) > MAX_ROOM_DETAIL_IMAGES:
            raise ValidationError(f"Maximum {MAX_ROOM_DETAIL_IMAGES} detail images allowed")
        room = await self._add_item(website, "rooms", data.document())
        logger.info(f"Added room {room['id']} to website {website.id}")
        return room

    async def update_room(self, website_id: uuid.UUID, room_id: str, data: RoomUpdate) -> Dict[str, Any]:
        if data.detail_images is not None and len(data.detail_images) > MAX_ROOM_DETAIL_IMAGES:
            raise ValidationError(f"Maximum {MAX_ROOM_DETAIL_IMAGES} detail images allowed")
        return await self._update_item(
            website_id,
            "rooms",
            room_id,
            data.present_fields(),
            "Room",
            ROOM_IMAGE_FIELDS,
            ROOM_IMAGE_LIST_FIELDS,
        )

    async def delete_room(self, website_id: uuid.UUID, room_id: str) -> None:
        await self._delete_item(
            website_id, "rooms", room_id, "Room", ROOM_IMAGE_FIELDS, ROOM_IMAGE_LIST_FIELDS
        )

    # Hero sections

    async def list_hero_sections(self, website_id: uuid.UUID) -> List[Dict[str, Any]]:
        return await self._list(website_id, "hero_sections")

    async def get_hero_section(self, website_id: uuid.UUID, page: str) -> Dict[str, Any]:
        website = await self._load(website_id)
        for hero in website.hero_sections or []:
            if hero.get("page") == page:
                return hero
        raise NotFoundError("Hero section not found")

    async def upsert_hero_section(self, website_id: uuid.UUID, data: HeroSectionUpsert) -> Dict[str, Any]:
        """
        Create or update the hero section of ``data.page``.

        An existing entry for the page is updated in place and keeps its id.
        """
        website = await self._load(website_id)
        heroes = website.get_embedded("hero_sections") or []
        changes = data.present_fields()
        changes.pop("page", None)

        hero = next((h for h in heroes if h.get("page") == data.page), None)
        stale: List[str] = []
        if hero is not None:
            stale = stale_images(hero, changes, ("image",))
            hero.update(changes)
        else:
            hero = {
                "id": new_embedded_id(),
                "page": data.page,
                "image": "",
                "text": "",
                "subText": "",
                "detailsText": "",
                "isActive": True,
                **changes,
            }
            heroes.append(hero)

        website.set_embedded("hero_sections", heroes)
        await self._save(website, stale)
        logger.info(f"Saved {data.page} hero section for website {website.id}")
        return hero

    async def delete_hero_section(self, website_id: uuid.UUID, hero_id: str) -> None:
        await self._delete_item(website_id, "hero_sections", hero_id, "Hero section", ("image",))

    # Facilities

    async def list_facilities(self, website_id: uuid.UUID) -> List[Dict[str, Any]]:
        return await self._list(website_id, "facilities")

    async def add_facility(self, website_id: uuid.UUID, data: FacilityCreate) -> Dict[str, Any]:
        website = await self._load(website_id)
        if len(website.facilities or []) >= MAX_FACILITIES:
            raise ValidationError(f"Maximum {MAX_FACILITIES} facilities allowed")
        return await self._add_item(website, "facilities", data.document())

    async def update_facility(
        self, website_id: uuid.UUID, facility_id: str, data: FacilityUpdate
    ) -> Dict[str, Any]:
        return await self._update_item(
            website_id, "facilities", facility_id, data.present_fields(), "Facility", ("image",)
        )

    async def delete_facility(self, website_id: uuid.UUID, facility_id: str) -> None:
        await self._delete_item(website_id, "facilities", facility_id, "Facility", ("image",))

    # Reviews

    async def list_reviews(self, website_id: uuid.UUID) -> List[Dict[str, Any]]:
        return await self._list(website_id, "reviews")

    async def add_review(self, website_id: uuid.UUID, data: ReviewCreate) -> Dict[str, Any]:
        website = await self._load(website_id)
        return await self._add_item(website, "reviews", data.document())

    async def update_review(self, website_id: uuid.UUID, review_id: str, data: ReviewUpdate) -> Dict[str, Any]:
        return await self._update_item(
            website_id, "reviews", review_id, data.present_fields(), "Review", ("avatar",)
        )

    async def delete_review(self, website_id: uuid.UUID, review_id: str) -> None:
        await self._delete_item(website_id, "reviews", review_id, "Review", ("avatar",))

    # Offer

    async def get_offer(self, website_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        website = await self._load(website_id)
        return website.offer

    async def upsert_offer(self, website_id: uuid.UUID, data: OfferUpsert) -> Dict[str, Any]:
        """
        Create the offer or merge into the existing one.

        Raises:
            ValidationError: If no offer exists yet and title, subtitle or
                offer_percentage is missing
        """
        website = await self._load(website_id)
        changes = data.present_fields()
        offer = website.get_embedded("offer")

        stale: List[str] = []
        if offer is None:
            missing = [k for k in ("title", "subtitle", "offer_percentage") if k not in changes]
            if missing:
                raise ValidationError(f"Offer requires: {', '.join(missing)}")
            offer = {
                "id": new_embedded_id(),
                "offer_available": True,
                "offer_image": "",
                **changes,
            }
        else:
            stale = stale_images(offer, changes, ("offer_image",))
            offer.update(changes)

        website.set_embedded("offer", offer)
        await self._save(website, stale)
        return offer

    async def delete_offer(self, website_id: uuid.UUID) -> None:
        website = await self._load(website_id)
        if website.offer is None:
            raise NotFoundError("Offer not found")
        image = website.offer.get("offer_image")
        website.set_embedded("offer", None)
        await self._save(website, [image] if image else [])

    # Our story

    async def get_our_story(self, website_id: uuid.UUID) -> Dict[str, Any]:
        website = await self._load(website_id)
        return website.our_story or default_our_story()

    async def update_our_story(self, website_id: uuid.UUID, data: OurStoryUpdate) -> Dict[str, Any]:
        website = await self._load(website_id)
        if data.images is not None and len(data.images) > MAX_OUR_STORY_IMAGES:
            raise ValidationError(f"Maximum {MAX_OUR_STORY_IMAGES} images allowed")

        story = website.get_embedded("our_story") or default_our_story()
        changes = data.present_fields()
        stale = stale_images(story, changes, image_list_fields=("images",))
        story.update(changes)

        website.set_embedded("our_story", story)
        await self._save(website, stale)
        return story

    # Site settings

    async def get_site_settings(self, website_id: uuid.UUID) -> Dict[str, Any]:
        website = await self._load(website_id)
        return website.site_settings or default_site_settings()

    async def update_site_settings(self, website_id: uuid.UUID, data: SiteSettingsUpdate) -> Dict[str, Any]:
        website = await self._load(website_id)
        site_settings = website.get_embedded("site_settings") or default_site_settings()
        changes = data.present_fields()
        stale = stale_images(site_settings, changes, ("logo", "footerLogo"))
        site_settings.update(changes)

        website.set_embedded("site_settings", site_settings)
        await self._save(website, stale)
        return site_settings

    # Contact info

    @staticmethod
    def _contact_info(hotel_info: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "contact": hotel_info.get("contact") or {},
            "socialLinks": hotel_info.get("socialLinks") or {},
        }

    async def get_contact_info(self, website_id: uuid.UUID) -> Dict[str, Any]:
        website = await self._load(website_id)
        return self._contact_info(website.hotel_info or default_hotel_info())

    async def update_contact_info(self, website_id: uuid.UUID, data: ContactInfoUpdate) -> Dict[str, Any]:
        website = await self._load(website_id)
        hotel_info = website.get_embedded("hotel_info") or default_hotel_info(website.name)

        contact = hotel_info.get("contact") or {}
        changes = data.contact_fields()
        if "coordinates" in changes:
            changes["coordinates"] = {**(contact.get("coordinates") or {}), **changes["coordinates"]}
        contact.update(changes)
        hotel_info["contact"] = contact

        social_links = hotel_info.get("socialLinks") or {}
        social_links.update(data.social_fields())
        hotel_info["socialLinks"] = social_links

        website.set_embedded("hotel_info", hotel_info)
        await self._save(website)
        return self._contact_info(hotel_info)
