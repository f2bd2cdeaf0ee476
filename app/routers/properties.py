"""
Property listing endpoints.
Creating a listing stages its photos first, then inserts the property and image rows in one transaction.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import RedirectResponse
from typing import Optional, List
from app.config import Settings
from app.models.user import User
from app.schemas.auth import PageResponse
from app.schemas.property import PropertyForm
from app.services.identity import Identity
from app.services.property import PropertyTransactionManager
from app.services.upload import UploadStaging
from app.routers.pages import page_user
from app.utils.dependencies import (
    get_identity,
    get_app_settings,
    get_property_manager,
    get_upload_staging,
    require_authenticated_user
)
from app.utils.exceptions import TooManyFilesError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Properties"])


@router.get(
    "/add-property",
    response_model=PageResponse,
    summary="Add-property form"
)
async def add_property_page(identity: Identity = Depends(get_identity)) -> PageResponse:
    return PageResponse(title="Add Property", user=page_user(identity))


@router.post(
    "/add-property",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create a property listing",
    description="Create a listing with up to five photos. Requires a logged-in user."
)
async def add_property(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    area_sqm: Optional[str] = Form(None),
    property_type: Optional[str] = Form(None),
    location_city: Optional[str] = Form(None),
    listing_type: Optional[str] = Form(None),
    photos: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(require_authenticated_user),
    settings: Settings = Depends(get_app_settings),
    staging: UploadStaging = Depends(get_upload_staging),
    manager: PropertyTransactionManager = Depends(get_property_manager)
) -> RedirectResponse:
    """
    Create a property listing owned by the current user.

    Raises:
        LoginRequiredError: If the caller is not logged in
        ValidationError: If a field is missing or invalid, or too many photos were sent
        FileUploadError: If a photo is not an acceptable image
        TransactionFailedError: If the property could not be saved
    """
    form = PropertyForm.from_form({
        "title": title,
        "description": description,
        "price": price,
        "area_sqm": area_sqm,
        "property_type": property_type,
        "location_city": location_city,
        "listing_type": listing_type,
    })

    files = UploadStaging.selected_files(photos)
    if len(files) > settings.max_property_images:
        raise TooManyFilesError(settings.max_property_images)

    staged_files = await staging.stage(files)
    await manager.create_property(current_user.id, form, staged_files)

    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
