"""Website lifecycle service: CRUD, admin assignment and the public projection."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from hotel_cms.core.exceptions import ConflictError, NotFoundError, ValidationError
from hotel_cms.models.contact_message import ContactMessage
from hotel_cms.models.user import ROLE_ADMIN, User
from hotel_cms.models.website import (
    EMBEDDED_FIELDS,
    Website,
    default_hotel_info,
    default_our_story,
    default_site_settings,
)
from hotel_cms.schemas.website import WebsiteCreate, WebsiteUpdate
from hotel_cms.services.file_storage import FileStorage, sanitize_folder_name

logger = logging.getLogger(__name__)

NAME_TAKEN_MESSAGE = "A website with a similar name already exists"


def rewrite_image_paths(value: Any, old_prefix: str, new_prefix: str) -> Any:
    """Copy of an embedded document with stored image paths moved to a new folder prefix."""
    if isinstance(value, str):
        if value.startswith(old_prefix):
            return new_prefix + value[len(old_prefix):]
        return value
    if isinstance(value, list):
        return [rewrite_image_paths(item, old_prefix, new_prefix) for item in value]
    if isinstance(value, dict):
        return {key: rewrite_image_paths(item, old_prefix, new_prefix) for key, item in value.items()}
    return value


async def commit_website_changes(db: AsyncSession) -> None:
    """
    Commit the unit of work, translating version conflicts.

    Website rows carry a version counter; if another request saved the same
    website since it was loaded, the flush fails and the caller gets a 409.
    """
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning("Website modified concurrently, rejecting stale write")
        raise ConflictError()


class WebsiteService:
    """
    Website (tenant) management.

    This service owns the admin/website link: ``Website.assigned_admin_id`` and
    ``User.website_id`` are only changed through ``set_assigned_admin``.
    """

    def __init__(self, db_session: AsyncSession, file_storage: Optional[FileStorage] = None):
        self.db = db_session
        self.files = file_storage

    # Lookups

    async def get_website(self, website_id: uuid.UUID) -> Website:
        """
        Get website by internal id.

        Raises:
            NotFoundError: If the website does not exist
        """
        website = await self.db.get(Website, website_id)
        if website is None:
            raise NotFoundError("Website not found")
        return website

    async def find_website(self, website_id: uuid.UUID) -> Optional[Website]:
        return await self.db.get(Website, website_id)

    async def get_active_by_unique_id(self, unique_id: str) -> Website:
        """Active website by its public identifier; inactive and missing look the same."""
        result = await self.db.execute(
            select(Website).where(Website.unique_id == unique_id, Website.is_active.is_(True))
        )
        website = result.scalar_one_or_none()
        if website is None:
            raise NotFoundError("Website not found")
        return website

    async def _domain_taken(
        self, column, value: Optional[str], exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        if not value:
            return False
        query = select(Website.id).where(column == value)
        if exclude_id is not None:
            query = query.where(Website.id != exclude_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def _name_taken(self, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """True when another website's name maps to the same image folder."""
        folder = sanitize_folder_name(name)
        query = select(Website.id, Website.name)
        if exclude_id is not None:
            query = query.where(Website.id != exclude_id)
        result = await self.db.execute(query)
        return any(sanitize_folder_name(other) == folder for _, other in result.all())

    async def admin_summary(self, website: Website) -> Optional[Dict[str, Any]]:
        """``{id, name, email}`` of the assigned admin, if any."""
        if website.assigned_admin_id is None:
            return None
        admin = await self.db.get(User, website.assigned_admin_id)
        if admin is None:
            return None
        return {"id": str(admin.id), "name": admin.name, "email": admin.email}

    async def serialize(self, website: Website) -> Dict[str, Any]:
        return website.to_dict(assigned_admin=await self.admin_summary(website))

    # Listing

    async def list_websites(self, user: User) -> List[Website]:
        """
        Websites visible to the caller, sorted by name.

        A super_admin sees every website. An admin sees only the website in
        their current assignment, and nothing when they have none. The stored
        assignment is used, not the token claim.
        """
        query = select(Website).order_by(Website.name)
        if not user.is_super_admin:
            if user.website_id is None:
                return []
            query = query.where(Website.id == user.website_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # Lifecycle

    async def create_website(self, data: WebsiteCreate) -> Website:
        """
        Create a website with every embedded container initialised.

        Raises:
            ValidationError: If the domain or subdomain is already in use, or
                another website's name maps to the same image folder
        """
        logger.info(f"Creating website {data.name} ({data.domain})")

        if await self._name_taken(data.name):
            raise ValidationError(NAME_TAKEN_MESSAGE)
        if await self._domain_taken(Website.domain, data.domain):
            raise ValidationError("Website with this domain already exists")
        if await self._domain_taken(Website.subdomain, data.subdomain):
            raise ValidationError("Website with this subdomain already exists")

        website = Website(
            name=data.name,
            domain=data.domain,
            subdomain=data.subdomain,
            theme=data.theme,
            settings=data.settings.document(),
            seo=data.seo.document(),
            hotel_info=default_hotel_info(data.name),
            rooms=[],
            hero_sections=[],
            our_story=default_our_story(),
            facilities=[],
            reviews=[],
            offer=None,
            site_settings=default_site_settings(),
            is_active=True,
        )
        self.db.add(website)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Database integrity error creating website: {e}")
            raise ValidationError("Website with this domain already exists")

        logger.info(f"Successfully created website {website.id}")
        return website

    async def update_website(self, website_id: uuid.UUID, data: WebsiteUpdate) -> Website:
        """
        Partial update of website-level fields.

        Raises:
            NotFoundError: If the website does not exist
            ValidationError: If the new domain or subdomain belongs to another website
                or the new name maps to another website's image folder
        """
        website = await self.get_website(website_id)
        fields = data.model_dump(exclude_unset=True)
        fields = {k: v for k, v in fields.items() if v is not None}

        if "domain" in fields and await self._domain_taken(Website.domain, fields["domain"], website.id):
            raise ValidationError("Domain is already in use")
        if "subdomain" in fields and await self._domain_taken(
            Website.subdomain, fields["subdomain"], website.id
        ):
            raise ValidationError("Subdomain is already in use")
        if "name" in fields and await self._name_taken(fields["name"], website.id):
            raise ValidationError(NAME_TAKEN_MESSAGE)

        old_name = website.name

        for key in ("name", "domain", "subdomain", "theme", "is_active"):
            if key in fields:
                setattr(website, key, fields[key])
        if data.settings is not None:
            website.set_embedded("settings", data.settings.document())
        if data.seo is not None:
            website.set_embedded("seo", data.seo.document())
        if data.hotel_info is not None:
            hotel_info = website.get_embedded("hotel_info")
            hotel_info.update(data.hotel_info)
            website.set_embedded("hotel_info", hotel_info)

        moved = self.files is not None and sanitize_folder_name(old_name) != sanitize_folder_name(website.name)
        if moved:
            old_prefix = self.files.url_prefix_for(old_name)
            new_prefix = self.files.url_prefix_for(website.name)
            for field in EMBEDDED_FIELDS:
                website.set_embedded(field, rewrite_image_paths(getattr(website, field), old_prefix, new_prefix))

        await commit_website_changes(self.db)
        if moved:
            await self.files.move_website_folder(old_name, website.name)
        logger.info(f"Updated website {website.id}")
        return website

    async def delete_website(self, website_id: uuid.UUID) -> None:
        """
        Delete a website.

        The assigned admin is unassigned first, then the image folder is
        removed, then the contact messages and the website row.
        """
        website = await self.get_website(website_id)
        logger.info(f"Deleting website {website.id} ({website.name})")

        await self.set_assigned_admin(website=website)

        if self.files is not None:
            await self.files.delete_website_folder(website.name)

        await self.db.execute(delete(ContactMessage).where(ContactMessage.website_id == website.id))
        await self.db.delete(website)
        await commit_website_changes(self.db)

        logger.info(f"Deleted website {website_id}")

    # Admin assignment

    async def set_assigned_admin(
        self,
        website: Optional[Website] = None,
        admin: Optional[User] = None,
    ) -> None:
        """
        Change the admin/website link on both sides.

        - ``website`` and ``admin``: assign ``admin`` to ``website``. Whoever
          held the website before is released, and the admin leaves any other
          website it was assigned to.
        - ``website`` only: release the website's current admin.
        - ``admin`` only: detach the admin from its current website.

        Changes are staged on the session; the caller commits them as one
        transaction.
        """
        if admin is not None and admin.website_id is not None and (
            website is None or admin.website_id != website.id
        ):
            current = await self.find_website(admin.website_id)
            if current is not None and current.assigned_admin_id == admin.id:
                current.assigned_admin_id = None
            admin.revoke_access(admin.website_id)
            admin.website_id = None

        if website is not None and website.assigned_admin_id is not None and (
            admin is None or website.assigned_admin_id != admin.id
        ):
            previous = await self.db.get(User, website.assigned_admin_id)
            if previous is not None:
                if previous.website_id == website.id:
                    previous.website_id = None
                previous.revoke_access(website.id)
            website.assigned_admin_id = None

        if website is not None and admin is not None:
            website.assigned_admin_id = admin.id
            admin.website_id = website.id
            admin.grant_access(website.id)

    async def assign_admin(self, website_id: uuid.UUID, admin_id: Optional[uuid.UUID]) -> Website:
        """
        Assign an admin to a website, or unassign when ``admin_id`` is None.

        Raises:
            NotFoundError: If the website or the admin does not exist
            ValidationError: If the user does not have the admin role
        """
        website = await self.get_website(website_id)

        if admin_id is None:
            await self.set_assigned_admin(website=website)
            logger.info(f"Unassigned admin from website {website.id}")
        else:
            admin = await self.db.get(User, admin_id)
            if admin is None:
                raise NotFoundError("Admin user not found")
            if admin.role != ROLE_ADMIN:
                raise ValidationError("User must have admin role to be assigned to a website")
            await self.set_assigned_admin(website=website, admin=admin)
            logger.info(f"Assigned admin {admin.id} to website {website.id}")

        await commit_website_changes(self.db)
        return website

    # Public projection

    async def public_projection(self, unique_id: str) -> Dict[str, Any]:
        """Read-only view of an active website for front-end renderers."""
        website = await self.get_active_by_unique_id(unique_id)
        rooms = website.available_rooms()
        return {
            "website": {
                "uniqueId": website.unique_id,
                "name": website.name,
                "domain": website.domain,
                "theme": website.theme,
                "settings": website.settings,
                "seo": website.seo,
                "isActive": website.is_active,
            },
            "hotelInfo": website.hotel_info,
            "rooms": rooms,
            "heroSections": website.active_hero_sections(),
            "ourStory": website.our_story,
            "facilities": website.facilities or [],
            "reviews": website.reviews or [],
            "offer": website.offer,
            "siteSettings": website.site_settings,
            "totalRooms": len(rooms),
            "totalFacilities": len(website.facilities or []),
            "averageRating": website.average_rating(),
        }
