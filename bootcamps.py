"""
Bootcamp routes: listing, CRUD, radius search and photo upload.
"""

import os
import re
import unicodedata
from typing import Literal

from fastapi import APIRouter, Depends, File, Path, Request, UploadFile

import config
from database import Store, get_store
from errors import FileTooLarge, GeocodeError, InvalidFileType
from geocoder import Geocoder, GeoLocation, get_geocoder
from guard import ensure_can_create_bootcamp, ensure_can_mutate
from logger import get_logger
from query import advanced_results
from schemas import Bootcamp as BootcampSchema, BootcampCreate, BootcampUpdate
from security import get_current_user, require_role
from storage import FileStorage, get_storage

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["bootcamps"])


def slugify(value: str) -> str:
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^\w\s-]", "", value).strip().lower()
    return re.sub(r"[-\s]+", "-", value)


def resolve_location(geocoder: Geocoder, query: str) -> GeoLocation:
    location = geocoder.geocode(query)
    if location is None:
        raise GeocodeError(f"Could not geocode {query}")
    return location


@router.get("/bootcamps")
def get_bootcamps(request: Request, store: Store = Depends(get_store)):
    return advanced_results(store.bootcamps, request.query_params.multi_items())


@router.get("/bootcamps/radius/{zipcode}/{distance}")
def get_bootcamps_in_radius(
    zipcode: str,
    distance: float = Path(..., gt=0, allow_inf_nan=False),
    unit: Literal["mi", "km"] = "mi",
    store: Store = Depends(get_store),
    geocoder: Geocoder = Depends(get_geocoder),
):
    center = resolve_location(geocoder, zipcode)
    # Angular radius: distance divided by the earth's radius in the same unit
    radius = distance / config.EARTH_RADIUS[unit]
    bootcamps = store.bootcamps.find(
        {"location": {"$geoWithin": {"$centerSphere": [[center.longitude, center.latitude], radius]}}}
    )
    return {"success": True, "count": len(bootcamps), "data": bootcamps}


@router.get("/bootcamps/{bootcamp_id}")
def get_bootcamp(bootcamp_id: str, store: Store = Depends(get_store)):
    return {"success": True, "data": store.bootcamps.get_or_404(bootcamp_id, "Bootcamp")}


@router.post("/bootcamps", status_code=201)
def create_bootcamp(
    payload: BootcampCreate,
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
    geocoder: Geocoder = Depends(get_geocoder),
):
    already_owns_one = store.bootcamps.find_one({"user_id": current_user["id"]}) is not None
    ensure_can_create_bootcamp(current_user, already_owns_one)
    location = resolve_location(geocoder, payload.address)
    doc = BootcampSchema(
        user_id=current_user["id"],
        slug=slugify(payload.name),
        location=location.to_point(),
        **payload.model_dump(),
    ).model_dump(exclude_none=True)
    bootcamp = store.bootcamps.create(doc)
    logger.info("bootcamp created", bootcamp_id=bootcamp["id"], user_id=current_user["id"])
    return {"success": True, "data": bootcamp}


@router.put("/bootcamps/{bootcamp_id}")
def update_bootcamp(
    bootcamp_id: str,
    payload: BootcampUpdate,
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
    geocoder: Geocoder = Depends(get_geocoder),
):
    bootcamp = store.bootcamps.get_or_404(bootcamp_id, "Bootcamp")
    ensure_can_mutate(bootcamp, current_user, "update")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return {"success": True, "data": bootcamp}
    if "name" in changes:
        changes["slug"] = slugify(changes["name"])
    if "address" in changes:
        changes["location"] = resolve_location(geocoder, changes["address"]).to_point()
    updated = store.bootcamps.update_by_id(bootcamp_id, {"$set": changes})
    return {"success": True, "data": updated}


@router.delete("/bootcamps/{bootcamp_id}")
def delete_bootcamp(
    bootcamp_id: str,
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
):
    bootcamp = store.bootcamps.get_or_404(bootcamp_id, "Bootcamp")
    ensure_can_mutate(bootcamp, current_user, "delete")
    # Courses and reviews of the bootcamp are left in place.
    store.bootcamps.delete(bootcamp_id)
    logger.info("bootcamp deleted", bootcamp_id=bootcamp_id, user_id=current_user["id"])
    return {"success": True, "data": None}


@router.put("/bootcamps/{bootcamp_id}/photo")
def upload_bootcamp_photo(
    bootcamp_id: str,
    file: UploadFile = File(...),
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
    storage: FileStorage = Depends(get_storage),
):
    bootcamp = store.bootcamps.get_or_404(bootcamp_id, "Bootcamp")
    ensure_can_mutate(bootcamp, current_user, "update")

    if not (file.content_type or "").startswith("image"):
        raise InvalidFileType("Please upload an image file")
    data = file.file.read(config.MAX_FILE_UPLOAD + 1)
    if len(data) > config.MAX_FILE_UPLOAD:
        raise FileTooLarge(f"Please upload an image less than {config.MAX_FILE_UPLOAD} bytes")

    filename = f"photo_{bootcamp['id']}{os.path.splitext(file.filename or '')[1]}"
    storage.store(data, filename)
    store.bootcamps.update_by_id(bootcamp_id, {"$set": {"photo": filename}})
    logger.info("bootcamp photo uploaded", bootcamp_id=bootcamp_id, filename=filename)
    return {"success": True, "data": filename}
