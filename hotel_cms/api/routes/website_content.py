"""Endpoints for the content embedded in a website.

Reads and writes are both open to super_admins and to the admin assigned to
the website.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from hotel_cms.api.dependencies.common import get_content_service
from hotel_cms.middleware.tenant import require_website_access
from hotel_cms.schemas.base import api_response
from hotel_cms.schemas.content import (
    ContactInfoUpdate,
    FacilityCreate,
    FacilityUpdate,
    HeroPage,
    HeroSectionUpsert,
    OfferUpsert,
    OurStoryUpdate,
    ReviewCreate,
    ReviewUpdate,
    RoomCreate,
    RoomUpdate,
    SiteSettingsUpdate,
)
from hotel_cms.services.content_service import ContentService

router = APIRouter(
    prefix="/websites/{website_id}",
    tags=["Website content"],
    dependencies=[Depends(require_website_access())],
)


# Rooms

@router.get("/rooms")
async def list_rooms(website_id: UUID, service: ContentService = Depends(get_content_service)):
    rooms = await service.list_rooms(website_id)
    return api_response({"rooms": rooms}, count=len(rooms))


@router.get("/rooms/{room_id}")
async def get_room(website_id: UUID, room_id: str, service: ContentService = Depends(get_content_service)):
    room = await service.get_room(website_id, room_id)
    return api_response({"room": room})


@router.post("/rooms", status_code=status.HTTP_201_CREATED)
async def add_room(website_id: UUID, data: RoomCreate, service: ContentService = Depends(get_content_service)):
    room = await service.add_room(website_id, data)
    return api_response({"room": room}, message="Room added successfully")


@router.put("/rooms/{room_id}")
async def update_room(
    website_id: UUID,
    room_id: str,
    data: RoomUpdate,
    service: ContentService = Depends(get_content_service),
):
    room = await service.update_room(website_id, room_id, data)
    return api_response({"room": room}, message="Room updated successfully")


@router.delete("/rooms/{room_id}")
async def delete_room(website_id: UUID, room_id: str, service: ContentService = Depends(get_content_service)):
    await service.delete_room(website_id, room_id)
    return api_response(message="Room deleted successfully")


# Hero sections

@router.get("/hero-sections")
async def list_hero_sections(website_id: UUID, service: ContentService = Depends(get_content_service)):
    heroes = await service.list_hero_sections(website_id)
    return api_response({"heroSections": heroes}, count=len(heroes))


@router.get("/hero-sections/page/{page}")
async def get_hero_section(
    website_id: UUID,
    page: HeroPage,
    service: ContentService = Depends(get_content_service),
):
    hero = await service.get_hero_section(website_id, page)
    return api_response({"heroSection": hero})


@router.post("/hero-sections")
async def upsert_hero_section(
    website_id: UUID,
    data: HeroSectionUpsert,
    service: ContentService = Depends(get_content_service),
):
    """Create or update the hero section for ``page``."""
    hero = await service.upsert_hero_section(website_id, data)
    return api_response({"heroSection": hero}, message="Hero section saved successfully")


@router.delete("/hero-sections/{hero_id}")
async def delete_hero_section(
    website_id: UUID,
    hero_id: str,
    service: ContentService = Depends(get_content_service),
):
    await service.delete_hero_section(website_id, hero_id)
    return api_response(message="Hero section deleted successfully")


# Facilities

@router.get("/facilities")
async def list_facilities(website_id: UUID, service: ContentService = Depends(get_content_service)):
    facilities = await service.list_facilities(website_id)
    return api_response({"facilities": facilities}, count=len(facilities))


@router.post("/facilities", status_code=status.HTTP_201_CREATED)
async def add_facility(
    website_id: UUID,
    data: FacilityCreate,
    service: ContentService = Depends(get_content_service),
):
    facility = await service.add_facility(website_id, data)
    return api_response({"facility": facility}, message="Facility added successfully")


@router.put("/facilities/{facility_id}")
async def update_facility(
    website_id: UUID,
    facility_id: str,
    data: FacilityUpdate,
    service: ContentService = Depends(get_content_service),
):
    facility = await service.update_facility(website_id, facility_id, data)
    return api_response({"facility": facility}, message="Facility updated successfully")


@router.delete("/facilities/{facility_id}")
async def delete_facility(
    website_id: UUID,
    facility_id: str,
    service: ContentService = Depends(get_content_service),
):
    await service.delete_facility(website_id, facility_id)
    return api_response(message="Facility deleted successfully")


# Reviews

@router.get("/reviews")
async def list_reviews(website_id: UUID, service: ContentService = Depends(get_content_service)):
    reviews = await service.list_reviews(website_id)
    return api_response({"reviews": reviews}, count=len(reviews))


@router.post("/reviews", status_code=status.HTTP_201_CREATED)
async def add_review(website_id: UUID, data: ReviewCreate, service: ContentService = Depends(get_content_service)):
    review = await service.add_review(website_id, data)
    return api_response({"review": review}, message="Review added successfully")


@router.put("/reviews/{review_id}")
async def update_review(
    website_id: UUID,
    review_id: str,
    data: ReviewUpdate,
    service: ContentService = Depends(get_content_service),
):
    review = await service.update_review(website_id, review_id, data)
    return api_response({"review": review}, message="Review updated successfully")


@router.delete("/reviews/{review_id}")
async def delete_review(
    website_id: UUID,
    review_id: str,
    service: ContentService = Depends(get_content_service),
):
    await service.delete_review(website_id, review_id)
    return api_response(message="Review deleted successfully")


# Offer

@router.get("/offer")
async def get_offer(website_id: UUID, service: ContentService = Depends(get_content_service)):
    offer = await service.get_offer(website_id)
    return {"success": True, "data": {"offer": offer}}


@router.put("/offer")
async def upsert_offer(website_id: UUID, data: OfferUpsert, service: ContentService = Depends(get_content_service)):
    offer = await service.upsert_offer(website_id, data)
    return api_response({"offer": offer}, message="Offer saved successfully")


@router.delete("/offer")
async def delete_offer(website_id: UUID, service: ContentService = Depends(get_content_service)):
    await service.delete_offer(website_id)
    return api_response(message="Offer deleted successfully")


# Our story

@router.get("/our-story")
async def get_our_story(website_id: UUID, service: ContentService = Depends(get_content_service)):
    return api_response({"ourStory": await service.get_our_story(website_id)})


@router.put("/our-story")
async def update_our_story(
    website_id: UUID,
    data: OurStoryUpdate,
    service: ContentService = Depends(get_content_service),
):
    story = await service.update_our_story(website_id, data)
    return api_response({"ourStory": story}, message="Our Story updated successfully")


# Site settings

@router.get("/site-settings")
async def get_site_settings(website_id: UUID, service: ContentService = Depends(get_content_service)):
    return api_response({"siteSettings": await service.get_site_settings(website_id)})


@router.put("/site-settings")
async def update_site_settings(
    website_id: UUID,
    data: SiteSettingsUpdate,
    service: ContentService = Depends(get_content_service),
):
    site_settings = await service.update_site_settings(website_id, data)
    return api_response({"siteSettings": site_settings}, message="Site settings updated successfully")


# Contact info

@router.get("/contact-info")
async def get_contact_info(website_id: UUID, service: ContentService = Depends(get_content_service)):
    return api_response(await service.get_contact_info(website_id))


@router.put("/contact-info")
async def update_contact_info(
    website_id: UUID,
    data: ContactInfoUpdate,
    service: ContentService = Depends(get_content_service),
):
    info = await service.update_contact_info(website_id, data)
    return api_response(info, message="Contact info updated successfully")
