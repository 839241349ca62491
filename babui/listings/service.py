"""
Publishing a listing: upload its pictures, validate, insert the row and
record it on the owner's profile.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from babui.config import Settings, get_settings
from babui.db.mapping import row_to_property
from babui.db.repository import PropertyRepository, UserRepository
from babui.exceptions import ListingValidationError
from babui.listings.fields import MAX_IMAGES, FieldError, ListingForm, build_listing_row, validate_listing
from babui.models.property import Property
from babui.services.storage import StorageService, listing_image_name

logger = structlog.get_logger()


@dataclass
class ImageUpload:
    filename: str
    data: bytes
    content_type: Optional[str] = None


class ListingService:
    def __init__(
        self,
        properties: PropertyRepository,
        users: UserRepository,
        storage: StorageService,
        settings: Settings | None = None,
    ):
        self.properties = properties
        self.users = users
        self.storage = storage
        self.settings = settings or get_settings()

    def publish(
        self,
        form: ListingForm,
        owner_id: str,
        uploads: list[ImageUpload] | None = None,
    ) -> Property:
        """
        Create a listing owned by `owner_id`.

        The form is validated before anything is uploaded.

        Raises:
            ListingValidationError: If the form is invalid
            StorageError: If a picture upload fails
            BackendError: If the row could not be written
        """
        uploads = uploads or []
        if len(form.images) + len(uploads) > MAX_IMAGES:
            raise ListingValidationError([FieldError("images", f"at most {MAX_IMAGES} images")])

        errors = validate_listing(form)
        if errors:
            raise ListingValidationError(errors)

        urls = list(form.images)
        for upload in uploads:
            urls.append(
                self.storage.upload(
                    self.settings.property_images_bucket,
                    listing_image_name(upload.filename),
                    upload.data,
                    content_type=upload.content_type,
                )
            )

        row = self.properties.create(build_listing_row(form, owner_id, image_urls=urls))
        prop = row_to_property(row)

        owner = self.users.get(owner_id) or {}
        mine = [str(p) for p in owner.get("myproperties") or []]
        self.users.set_my_properties(owner_id, [*mine, prop.id])

        logger.info("Published listing", property_id=prop.id, owner_id=owner_id, images=len(urls))
        return prop
